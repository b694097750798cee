"""Price history repository."""

from sqlmodel import Session, col, select

from core.database.repository.base import BaseRepository
from core.models.rows import PriceHistory


class PriceHistoryRepository(BaseRepository[PriceHistory]):
    """Insert-only price samples, queried newest-first."""

    def __init__(self, db: Session) -> None:
        super().__init__(PriceHistory, db)

    def latest(self, symbol: str) -> PriceHistory | None:
        """Most recent sample for ``symbol``."""
        statement = (
            select(PriceHistory)
            .where(PriceHistory.symbol == symbol.upper())
            .order_by(col(PriceHistory.timestamp).desc(), col(PriceHistory.id).desc())
            .limit(1)
        )
        return self.db.exec(statement).first()

    def highest(self, symbol: str) -> PriceHistory | None:
        """Sample with the highest recorded price for ``symbol``."""
        statement = (
            select(PriceHistory)
            .where(PriceHistory.symbol == symbol.upper())
            .order_by(col(PriceHistory.price).desc())
            .limit(1)
        )
        return self.db.exec(statement).first()

    def highest_price(self, symbol: str) -> float | None:
        """Persisted all-time high: the larger of stored ATH and stored price."""
        candidates = []
        top = self.highest(symbol)
        if top is not None:
            candidates.append(top.price)

        statement = (
            select(PriceHistory)
            .where(PriceHistory.symbol == symbol.upper())
            .where(col(PriceHistory.ath).is_not(None))
            .order_by(col(PriceHistory.ath).desc())
            .limit(1)
        )
        top_ath = self.db.exec(statement).first()
        if top_ath is not None and top_ath.ath is not None:
            candidates.append(top_ath.ath)

        return max(candidates) if candidates else None

    def recent(self, symbol: str, limit: int = 24) -> list[PriceHistory]:
        statement = (
            select(PriceHistory)
            .where(PriceHistory.symbol == symbol.upper())
            .order_by(col(PriceHistory.timestamp).desc())
            .limit(limit)
        )
        return list(self.db.exec(statement).all())
