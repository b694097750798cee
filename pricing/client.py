"""Market-data API client (CoinGecko-compatible)."""

from typing import Any

import httpx

from core.log import get_logger
from core.models.domain.price import MarketQuote
from core.utils import to_float
from .exceptions import MarketDataError, MarketDataNotFoundError, MarketDataTimeoutError

logger = get_logger(__name__)


class MarketDataClient:
    """Detailed and simple price lookups against the market-data API."""

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        api_key: str = "",
        api_key_header: str = "X-CG-Demo-API-Key",
        detail_timeout: float = 10.0,
        simple_timeout: float = 8.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize market-data client.

        Args:
            base_url: API base URL
            api_key: API key; sent in ``api_key_header`` when set
            api_key_header: Header name carrying the key
            detail_timeout: Timeout for ``/coins/{id}`` in seconds
            simple_timeout: Timeout for ``/simple/price`` in seconds
            client: Shared HTTP client. Owned and closed by the caller when given.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_key_header = api_key_header
        self.detail_timeout = detail_timeout
        self.simple_timeout = simple_timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.detail_timeout),
                headers={"Accept": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get_coin_details(self, coin_id: str) -> MarketQuote:
        """Fetch full market data for a coin.

        Raises:
            MarketDataNotFoundError: If the coin or its USD price is unknown
            MarketDataError: If the request fails
        """
        body = await self._get(
            f"/coins/{coin_id}",
            params={
                "localization": "false",
                "tickers": "false",
                "market_data": "true",
                "community_data": "false",
                "developer_data": "false",
                "sparkline": "false",
            },
            timeout=self.detail_timeout,
        )

        market = body.get("market_data") or {}
        price = (market.get("current_price") or {}).get("usd")
        if price is None:
            raise MarketDataNotFoundError(f"No USD price for {coin_id}")

        ath = (market.get("ath") or {}).get("usd")
        return MarketQuote(
            coin_id=coin_id,
            price=to_float(price),
            change_24h=to_float(market.get("price_change_percentage_24h")),
            market_cap=to_float((market.get("market_cap") or {}).get("usd")),
            volume_24h=to_float((market.get("total_volume") or {}).get("usd")),
            ath=to_float(ath) if ath is not None else None,
        )

    async def get_simple_price(self, coin_id: str) -> MarketQuote:
        """Fetch the current price only.

        Raises:
            MarketDataNotFoundError: If the response has no USD price for the coin
            MarketDataError: If the request fails
        """
        body = await self._get(
            "/simple/price",
            params={
                "ids": coin_id,
                "vs_currencies": "usd",
                "include_24hr_change": "true",
                "include_market_cap": "true",
                "include_24hr_vol": "true",
            },
            timeout=self.simple_timeout,
        )

        entry = body.get(coin_id) or {}
        if entry.get("usd") is None:
            raise MarketDataNotFoundError(f"No simple price for {coin_id}")

        return MarketQuote(
            coin_id=coin_id,
            price=to_float(entry["usd"]),
            change_24h=to_float(entry.get("usd_24h_change")),
            market_cap=to_float(entry.get("usd_market_cap")),
            volume_24h=to_float(entry.get("usd_24h_vol")),
        )

    async def _get(
        self, path: str, params: dict[str, str], timeout: float
    ) -> dict[str, Any]:
        headers = {}
        if self.api_key:
            headers[self.api_key_header] = self.api_key

        try:
            response = await self.client.get(
                f"{self.base_url}{path}",
                params=params,
                headers=headers,
                timeout=timeout,
            )
            response.raise_for_status()
            body = response.json()

        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise MarketDataNotFoundError(f"{path} not found")
            logger.warning(f"Market data HTTP error for {path}: {e}")
            raise MarketDataError(f"HTTP {e.response.status_code}: {e}")

        except httpx.TimeoutException:
            logger.warning(f"Timeout fetching {path}")
            raise MarketDataTimeoutError(f"Timeout fetching {path}")

        except httpx.HTTPError as e:
            raise MarketDataError(f"Request to {path} failed: {e}")

        except ValueError as e:
            raise MarketDataError(f"Invalid JSON from {path}: {e}")

        if not isinstance(body, dict):
            raise MarketDataError(f"Unexpected response from {path}")
        return body
