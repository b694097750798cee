"""API models package."""

from .network import (
    AddressValidationResponse,
    NetworkResponse,
    TokenResponse,
    TransferLimitsResponse,
)
from .operations import ClearQueueResponse, ThresholdResponse, ThresholdUpdate
from .portfolio import (
    PortfolioResponse,
    PriceHistoryEntry,
    PriceQuoteResponse,
    PriceResponse,
)

__all__ = [
    "AddressValidationResponse",
    "NetworkResponse",
    "TokenResponse",
    "TransferLimitsResponse",
    "ClearQueueResponse",
    "ThresholdResponse",
    "ThresholdUpdate",
    "PortfolioResponse",
    "PriceHistoryEntry",
    "PriceQuoteResponse",
    "PriceResponse",
]
