"""Token price aggregation with a chain of fallbacks."""

import asyncio
from typing import Iterable

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from core.database.repository import PriceHistoryRepository
from core.log import get_logger
from core.models.domain.price import MarketQuote, PriceRecord
from core.models.rows import PriceHistory
from core.rate_limiter import AsyncRateLimiter
from core.types import PriceSource
from .ath import ath_source, reconcile_ath
from .client import MarketDataClient
from .constants import FALLBACK_PRICES_USD, coin_id_for
from .exceptions import MarketDataError
from .rates import CurrencyRateCache

logger = get_logger(__name__)


class PriceService:
    """Resolves token prices in USD and RUB.

    Lookup order: fresh in-memory record, detailed market data, simple
    market data, latest stored price, hard-coded fallback. Never raises for
    missing data.
    """

    def __init__(
        self,
        market: MarketDataClient,
        rates: CurrencyRateCache,
        engine: Engine | None = None,
        primary_symbol: str = "CES",
        primary_limiter: AsyncRateLimiter | None = None,
        cache_ttl_seconds: float = 5.0,
        cache_max_size: int = 256,
        fallback_prices: dict[str, float] | None = None,
    ):
        """Initialize price service.

        Args:
            market: Market-data API client
            rates: USD/RUB rate cache
            engine: Database engine holding price history; None disables it
            primary_symbol: The system's own token, whose lookups are spaced out
            primary_limiter: Limiter applied before external lookups of the primary token
            cache_ttl_seconds: How long a resolved record is reused
            cache_max_size: Most records kept; expired and then oldest ones are evicted
            fallback_prices: Last-resort USD prices by symbol
        """
        self.market = market
        self.rates = rates
        self.engine = engine
        self.primary_symbol = primary_symbol.upper()
        self.primary_limiter = primary_limiter or AsyncRateLimiter(min_interval=0)
        if cache_max_size < 1:
            raise ValueError("cache_max_size must be at least 1")

        self.cache_ttl_seconds = cache_ttl_seconds
        self.cache_max_size = cache_max_size
        self.fallback_prices = (
            FALLBACK_PRICES_USD if fallback_prices is None else fallback_prices
        )
        self._cache: dict[str, PriceRecord] = {}

    async def get_price(self, symbol: str) -> PriceRecord:
        symbol = symbol.upper()

        cached = self._cache.get(symbol)
        if cached is not None and cached.is_fresh(self.cache_ttl_seconds):
            return cached

        if symbol == self.primary_symbol:
            await self.primary_limiter.wait()

        record = await self._from_market(symbol)
        if record is None:
            record = await self._from_history(symbol)
        if record is None:
            record = await self._from_fallback(symbol)

        self._remember(symbol, record)
        logger.debug(f"{symbol} price ${record.price} from {record.source.value}")
        return record

    async def get_prices(self, symbols: Iterable[str]) -> dict[str, PriceRecord]:
        """Concurrent lookups keyed by upper-case symbol."""
        unique = list(dict.fromkeys(symbol.upper() for symbol in symbols))
        records = await asyncio.gather(*(self.get_price(s) for s in unique))
        return dict(zip(unique, records))

    def invalidate(self, symbol: str | None = None) -> None:
        if symbol is None:
            self._cache.clear()
        else:
            self._cache.pop(symbol.upper(), None)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def _remember(self, symbol: str, record: PriceRecord) -> None:
        self._cache.pop(symbol, None)
        self._cache[symbol] = record
        if len(self._cache) <= self.cache_max_size:
            return

        expired = [
            key
            for key, cached in self._cache.items()
            if not cached.is_fresh(self.cache_ttl_seconds)
        ]
        for key in expired:
            del self._cache[key]
        # Insertion order is recency of resolution.
        while len(self._cache) > self.cache_max_size:
            del self._cache[next(iter(self._cache))]

    def record_snapshot(self, record: PriceRecord) -> PriceHistory | None:
        """Store a price sample; returns None when no database is configured."""
        if self.engine is None:
            return None

        row = PriceHistory(
            symbol=record.symbol,
            price=record.price,
            price_rub=record.price_rub,
            change_24h=record.change_24h,
            market_cap=record.market_cap,
            volume_24h=record.volume_24h,
            ath=record.ath,
            source=record.source.value,
            timestamp=record.fetched_at,
        )
        with Session(self.engine) as session:
            return PriceHistoryRepository(session).create(row)

    async def aclose(self) -> None:
        await self.market.aclose()
        await self.rates.aclose()

    async def _from_market(self, symbol: str) -> PriceRecord | None:
        coin_id = coin_id_for(symbol)

        try:
            quote = await self.market.get_coin_details(coin_id)
            source = PriceSource.EXTERNAL_DETAILED
        except MarketDataError as e:
            logger.warning(f"Detailed lookup for {symbol} failed: {e}")
            try:
                quote = await self.market.get_simple_price(coin_id)
                source = PriceSource.EXTERNAL_SIMPLE
            except MarketDataError as e:
                logger.warning(f"Simple lookup for {symbol} failed: {e}")
                return None

        return await self._record_from_quote(symbol, quote, source)

    async def _record_from_quote(
        self, symbol: str, quote: MarketQuote, source: PriceSource
    ) -> PriceRecord:
        rate = await self.rates.get_rate()
        persisted = self._persisted_ath(symbol)
        ath = reconcile_ath(persisted, quote.ath, quote.price)
        if quote.price >= ath and persisted is not None:
            logger.info(f"New {symbol} all-time high: ${quote.price}")

        return PriceRecord(
            symbol=symbol,
            price=quote.price,
            price_rub=quote.price * rate,
            change_24h=quote.change_24h,
            market_cap=quote.market_cap,
            volume_24h=quote.volume_24h,
            ath=ath,
            ath_source=ath_source(persisted, quote.ath),
            source=source,
        )

    async def _from_history(self, symbol: str) -> PriceRecord | None:
        row = self._latest_row(symbol)
        if row is None:
            return None

        logger.info(f"Using last saved {symbol} price from database")
        price_rub = row.price_rub
        if not price_rub:
            price_rub = row.price * await self.rates.get_rate()

        return PriceRecord(
            symbol=symbol,
            price=row.price,
            price_rub=price_rub,
            change_24h=row.change_24h,
            market_cap=row.market_cap,
            volume_24h=row.volume_24h,
            ath=row.ath or row.price,
            ath_source="database",
            source=PriceSource.CACHED,
        )

    async def _from_fallback(self, symbol: str) -> PriceRecord:
        price = self.fallback_prices.get(symbol, 0.0)
        logger.warning(f"No price data for {symbol}, using fallback ${price}")
        rate = await self.rates.get_rate()
        return PriceRecord(
            symbol=symbol,
            price=price,
            price_rub=price * rate,
            source=PriceSource.FALLBACK,
        )

    def _persisted_ath(self, symbol: str) -> float | None:
        if self.engine is None:
            return None
        try:
            with Session(self.engine) as session:
                return PriceHistoryRepository(session).highest_price(symbol)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read stored ATH for {symbol}: {e}")
            return None

    def _latest_row(self, symbol: str) -> PriceHistory | None:
        if self.engine is None:
            return None
        try:
            with Session(self.engine) as session:
                return PriceHistoryRepository(session).latest(symbol)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read stored price for {symbol}: {e}")
            return None
