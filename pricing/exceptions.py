"""Custom exceptions for price lookups."""


class PriceError(Exception):
    """Base exception for pricing errors."""

    pass


class MarketDataError(PriceError):
    """Raised when the market-data API request fails."""

    pass


class MarketDataNotFoundError(MarketDataError):
    """Raised when the market-data API has no price for a coin."""

    pass


class MarketDataTimeoutError(MarketDataError):
    """Raised when a market-data request times out."""

    pass


class ExchangeRateError(PriceError):
    """Raised when no usable currency rate could be fetched."""

    pass
