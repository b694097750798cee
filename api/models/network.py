"""Network models for API responses."""

from pydantic import BaseModel

from core.types import ChainKind


class TokenResponse(BaseModel):
    """Token configured on a network."""

    symbol: str
    name: str
    address: str
    decimals: int


class NetworkResponse(BaseModel):
    """Response model for a supported network."""

    network_id: str
    name: str
    kind: ChainKind
    native_token: str
    explorer: str
    emoji: str
    tokens: list[TokenResponse]


class AddressValidationResponse(BaseModel):
    """Response model for an address format check."""

    network_id: str
    address: str
    valid: bool


class TransferLimitsResponse(BaseModel):
    """Minimum transfer and rough fee for a token."""

    network_id: str
    symbol: str
    minimum_transfer: float
    estimated_fee: float
    fee_token: str | None
