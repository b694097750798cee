"""USD to RUB exchange rate client and cache."""

import asyncio
import time
from typing import Callable

import httpx

from core.log import get_logger
from core.utils import to_float
from .constants import BASE_CURRENCY, SECONDARY_CURRENCY
from .exceptions import ExchangeRateError

logger = get_logger(__name__)


class ExchangeRateClient:
    """Client for an exchangerate-api style ``/{base}`` endpoint."""

    def __init__(
        self,
        base_url: str = "https://api.exchangerate-api.com/v4/latest",
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get_rate(
        self, base: str = BASE_CURRENCY, quote: str = SECONDARY_CURRENCY
    ) -> float:
        """Units of ``quote`` per one ``base``.

        Raises:
            ExchangeRateError: If the request fails or the rate is missing
        """
        try:
            response = await self.client.get(
                f"{self.base_url}/{base}", timeout=self.timeout
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ExchangeRateError(f"Exchange rate request failed: {e}")

        rates = body.get("rates") if isinstance(body, dict) else None
        rate = to_float((rates or {}).get(quote))
        if rate <= 0:
            raise ExchangeRateError(f"{quote} rate not found in response")
        return rate


class CurrencyRateCache:
    """Caches the USD/RUB rate for a fixed time-to-live.

    Concurrent callers share one in-flight fetch. When a fetch fails the
    last known rate is used, or the fallback constant if there is none.
    """

    def __init__(
        self,
        client: ExchangeRateClient,
        ttl_seconds: float = 60.0,
        fallback_rate: float = 100.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.fallback_rate = fallback_rate
        self._clock = clock
        self._rate: float | None = None
        self._fetched_at: float | None = None
        self._lock = asyncio.Lock()

    @property
    def rate(self) -> float | None:
        """Last fetched rate, regardless of age."""
        return self._rate

    def is_fresh(self) -> bool:
        return (
            self._rate is not None
            and self._fetched_at is not None
            and self._clock() - self._fetched_at < self.ttl_seconds
        )

    async def get_rate(self) -> float:
        if self.is_fresh():
            return self._rate  # type: ignore[return-value]

        async with self._lock:
            if self.is_fresh():
                return self._rate  # type: ignore[return-value]

            try:
                rate = await self.client.get_rate()
            except ExchangeRateError as e:
                fallback = self._rate if self._rate is not None else self.fallback_rate
                logger.warning(f"Using USD/RUB rate {fallback}: {e}")
                return fallback

            self._rate = rate
            self._fetched_at = self._clock()
            logger.info(f"USD/RUB rate: {rate}")
            return rate

    def invalidate(self) -> None:
        self._fetched_at = None

    async def aclose(self) -> None:
        await self.client.aclose()
