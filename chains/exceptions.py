"""Custom exceptions for chain adapters."""


class ChainError(Exception):
    """Base exception for balance-read errors."""

    pass


class InvalidAddressError(ChainError):
    """Raised when an address does not match the network's format."""

    pass


class RpcError(ChainError):
    """Raised when a node cannot be reached or returns garbage."""

    pass


class RpcResponseError(RpcError):
    """Raised when a node answers with a JSON-RPC error object."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code


class EndpointsExhaustedError(RpcError):
    """Raised when every configured endpoint failed for one call."""

    pass
