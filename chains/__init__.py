"""Balance readers for the supported blockchain networks."""

from .base import ChainAdapter
from .endpoints import EndpointPool
from .evm import EvmAdapter
from .exceptions import (
    ChainError,
    EndpointsExhaustedError,
    InvalidAddressError,
    RpcError,
    RpcResponseError,
)
from .factory import ChainAdapterRegistry
from .stub import StubAdapter
from .tron import TronAdapter, TronGridClient

__all__ = [
    "ChainAdapter",
    "ChainAdapterRegistry",
    "EndpointPool",
    "EvmAdapter",
    "StubAdapter",
    "TronAdapter",
    "TronGridClient",
    "ChainError",
    "EndpointsExhaustedError",
    "InvalidAddressError",
    "RpcError",
    "RpcResponseError",
]
