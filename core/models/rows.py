"""SQLModel database models for Metawhale."""

from datetime import datetime

from sqlmodel import Field, Index, SQLModel

from core.utils import utc_now


class PriceHistory(SQLModel, table=True):
    """Insert-only price sample for one token."""

    __tablename__ = "price_history"
    __table_args__ = (Index("idx_price_history_symbol_timestamp", "symbol", "timestamp"),)

    id: int | None = Field(default=None, primary_key=True)
    symbol: str = Field(index=True, description="Token symbol (e.g., CES)")
    price: float = Field(description="Unit price in USD")
    price_rub: float | None = Field(default=None, description="Unit price in RUB")
    change_24h: float = Field(default=0.0)
    market_cap: float = Field(default=0.0)
    volume_24h: float = Field(default=0.0)
    ath: float | None = Field(default=None, description="All-time high in USD")
    source: str = Field(default="external-detailed")
    timestamp: datetime = Field(default_factory=utc_now, index=True)
