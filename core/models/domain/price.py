"""Price domain models."""

from datetime import datetime, timedelta

from pydantic import BaseModel, Field

from core.types import PriceSource
from core.utils import utc_now


class PriceRecord(BaseModel):
    """A token price in USD and RUB with its provenance."""

    symbol: str
    price: float = Field(description="Unit price in USD")
    price_rub: float = Field(description="Unit price in RUB")
    change_24h: float = 0.0
    market_cap: float = 0.0
    volume_24h: float = 0.0
    ath: float | None = None
    ath_source: str | None = None
    source: PriceSource
    fetched_at: datetime = Field(default_factory=utc_now)

    def is_fresh(self, ttl_seconds: float, now: datetime | None = None) -> bool:
        """Whether the record is younger than ``ttl_seconds``."""
        now = now or utc_now()
        return now - self.fetched_at < timedelta(seconds=ttl_seconds)

    @property
    def is_external(self) -> bool:
        return self.source in (
            PriceSource.EXTERNAL_DETAILED,
            PriceSource.EXTERNAL_SIMPLE,
        )


class MarketQuote(BaseModel):
    """Normalized answer of a market-data lookup, USD only."""

    coin_id: str
    price: float
    change_24h: float = 0.0
    market_cap: float = 0.0
    volume_24h: float = 0.0
    ath: float | None = None
