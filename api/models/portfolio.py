"""Portfolio and price models for API responses."""

from pydantic import BaseModel

from core.models.domain.portfolio import PortfolioSnapshot
from core.models.domain.price import PriceRecord


class PortfolioResponse(BaseModel):
    """Formatted portfolio together with its plain-text rendering."""

    snapshot: PortfolioSnapshot
    message: str


class PriceResponse(BaseModel):
    """A single token price with its rendered price card."""

    price: PriceRecord
    message: str


class PriceQuoteResponse(BaseModel):
    """Prices keyed by upper-case symbol."""

    prices: dict[str, PriceRecord]


class PriceHistoryEntry(BaseModel):
    """A stored price sample."""

    symbol: str
    price: float
    price_rub: float | None
    ath: float | None
    source: str
    timestamp: str
