"""Token price lookups with market data, rate conversion and fallbacks."""

from .ath import reconcile_ath
from .client import MarketDataClient
from .constants import COIN_IDS, FALLBACK_PRICES_USD, coin_id_for
from .exceptions import (
    ExchangeRateError,
    MarketDataError,
    MarketDataNotFoundError,
    MarketDataTimeoutError,
    PriceError,
)
from .rates import CurrencyRateCache, ExchangeRateClient
from .service import PriceService
from .snapshot import PriceSnapshotJob

__all__ = [
    "COIN_IDS",
    "FALLBACK_PRICES_USD",
    "coin_id_for",
    "reconcile_ath",
    "MarketDataClient",
    "ExchangeRateClient",
    "CurrencyRateCache",
    "PriceService",
    "PriceSnapshotJob",
    "PriceError",
    "MarketDataError",
    "MarketDataNotFoundError",
    "MarketDataTimeoutError",
    "ExchangeRateError",
]
