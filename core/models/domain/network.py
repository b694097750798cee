"""Network, token and balance domain models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.types import ChainKind

NATIVE_ADDRESS = "native"


class TokenConfig(BaseModel):
    """A token as configured for one network.

    ``decimals`` must match the contract's own value, otherwise every balance
    is off by a power of ten.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    address: str = Field(description="Contract address or 'native'")
    decimals: int = Field(ge=0, le=36)

    @property
    def is_native(self) -> bool:
        return self.address == NATIVE_ADDRESS


class NetworkConfig(BaseModel):
    """Static configuration of a supported network."""

    model_config = ConfigDict(frozen=True)

    network_id: str
    name: str
    kind: ChainKind
    chain_id: int | str
    native_token: str
    native_decimals: int = Field(default=18, ge=0, le=36)
    rpc_urls: tuple[str, ...] = ()
    explorer: str = ""
    emoji: str = "🔗"
    tokens: dict[str, TokenConfig] = Field(default_factory=dict)
    fee_params: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_endpoints(self) -> "NetworkConfig":
        if self.kind != ChainKind.STUB and not self.rpc_urls:
            raise ValueError(f"Network {self.network_id} needs at least one RPC URL")
        return self

    @property
    def primary_rpc_url(self) -> str | None:
        return self.rpc_urls[0] if self.rpc_urls else None

    def token(self, symbol: str) -> TokenConfig | None:
        return self.tokens.get(symbol.upper())

    def balance_symbols(self) -> list[str]:
        """Native token first, then every contract token."""
        symbols = [self.native_token]
        for symbol, token in self.tokens.items():
            if not token.is_native and symbol not in symbols:
                symbols.append(symbol)
        return symbols


class Balance(BaseModel):
    """Balance read result.

    ``degraded`` marks a zero that stands in for a failed read, as opposed
    to an account that really holds nothing.
    """

    value: float = Field(default=0.0, ge=0.0)
    degraded: bool = False
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> "Balance":
        return cls(value=0.0, degraded=True, error=error)
