"""Portfolio display models."""

from datetime import datetime

from pydantic import BaseModel, Field

from core.models.domain.price import PriceRecord
from core.utils import utc_now


class TokenHolding(BaseModel):
    """One token line of a portfolio view."""

    symbol: str
    balance: float
    balance_formatted: str
    usd_value: str
    rub_value: str
    display_text: str


class PortfolioTotal(BaseModel):
    usd: str = "0.00"
    rub: str = "0.00"


class PortfolioView(BaseModel):
    """Display-ready holdings and totals for one network."""

    network_id: str
    tokens: list[TokenHolding] = Field(default_factory=list)
    total: PortfolioTotal = Field(default_factory=PortfolioTotal)


class PortfolioSnapshot(BaseModel):
    """Result of a portfolio load: the view plus what went into it."""

    network_id: str
    network_name: str
    address: str
    view: PortfolioView
    prices: dict[str, PriceRecord] = Field(default_factory=dict)
    degraded_symbols: list[str] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded_symbols)
