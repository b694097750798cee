"""Tests for MarketDataClient."""

import pytest
from pytest_httpserver import HTTPServer

from pricing import MarketDataClient, MarketDataError, MarketDataNotFoundError

from tests.utils.test_helpers import TestDataFactory


@pytest.fixture
def market_client(httpserver: HTTPServer) -> MarketDataClient:
    return MarketDataClient(base_url=httpserver.url_for("/api/v3"))


class TestMarketDataClient:
    """Test detailed and simple lookups."""

    @pytest.mark.asyncio
    async def test_coin_details(self, mock_market_server, market_client):
        """Test parsing of the detailed market data response."""
        try:
            quote = await market_client.get_coin_details("whalebit")
        finally:
            await market_client.aclose()

        assert quote.coin_id == "whalebit"
        assert quote.price == 2.0
        assert quote.ath == 3.5
        assert quote.change_24h == 1.5
        assert quote.market_cap == 1_000_000.0
        assert quote.volume_24h == 50_000.0

        request, _ = mock_market_server.log[-1]
        assert request.args["market_data"] == "true"
        assert request.args["tickers"] == "false"

    @pytest.mark.asyncio
    async def test_coin_details_without_ath(
        self, httpserver: HTTPServer, market_client
    ):
        httpserver.expect_request("/api/v3/coins/whalebit").respond_with_json(
            TestDataFactory.coin_details(price=1.2, ath=None)
        )
        try:
            quote = await market_client.get_coin_details("whalebit")
        finally:
            await market_client.aclose()

        assert quote.price == 1.2
        assert quote.ath is None

    @pytest.mark.asyncio
    async def test_coin_details_missing_price(
        self, httpserver: HTTPServer, market_client
    ):
        """Test that a response without a USD price is treated as not found."""
        httpserver.expect_request("/api/v3/coins/whalebit").respond_with_json(
            {"id": "whalebit", "market_data": {}}
        )
        with pytest.raises(MarketDataNotFoundError):
            await market_client.get_coin_details("whalebit")
        await market_client.aclose()

    @pytest.mark.asyncio
    async def test_not_found(self, httpserver: HTTPServer, market_client):
        httpserver.expect_request("/api/v3/coins/nope").respond_with_json(
            {"error": "coin not found"}, status=404
        )
        with pytest.raises(MarketDataNotFoundError):
            await market_client.get_coin_details("nope")
        await market_client.aclose()

    @pytest.mark.asyncio
    async def test_server_error(self, httpserver: HTTPServer, market_client):
        """Test that HTTP errors surface as MarketDataError."""
        httpserver.expect_request("/api/v3/coins/whalebit").respond_with_data(
            "error", status=500
        )
        with pytest.raises(MarketDataError, match="HTTP 500"):
            await market_client.get_coin_details("whalebit")
        await market_client.aclose()

    @pytest.mark.asyncio
    async def test_invalid_json(self, httpserver: HTTPServer, market_client):
        httpserver.expect_request("/api/v3/coins/whalebit").respond_with_data(
            "<html>", content_type="text/html"
        )
        with pytest.raises(MarketDataError, match="Invalid JSON"):
            await market_client.get_coin_details("whalebit")
        await market_client.aclose()

    @pytest.mark.asyncio
    async def test_simple_price(self, httpserver: HTTPServer, market_client):
        """Test the simple price endpoint."""
        httpserver.expect_request("/api/v3/simple/price").respond_with_json(
            {"tether": {"usd": 1.001, "usd_24h_change": -0.1, "usd_24h_vol": 9.0}}
        )
        try:
            quote = await market_client.get_simple_price("tether")
        finally:
            await market_client.aclose()

        assert quote.price == 1.001
        assert quote.change_24h == -0.1
        assert quote.volume_24h == 9.0
        assert quote.ath is None

        request, _ = httpserver.log[-1]
        assert request.args["ids"] == "tether"
        assert request.args["vs_currencies"] == "usd"

    @pytest.mark.asyncio
    async def test_simple_price_missing_coin(
        self, httpserver: HTTPServer, market_client
    ):
        httpserver.expect_request("/api/v3/simple/price").respond_with_json({})
        with pytest.raises(MarketDataNotFoundError):
            await market_client.get_simple_price("tether")
        await market_client.aclose()

    @pytest.mark.asyncio
    async def test_api_key_header(self, mock_market_server: HTTPServer):
        """Test that the API key is sent in the configured header."""
        client = MarketDataClient(
            base_url=mock_market_server.url_for("/api/v3"), api_key="demo-key"
        )
        try:
            await client.get_coin_details("tether")
        finally:
            await client.aclose()

        request, _ = mock_market_server.log[-1]
        assert request.headers["X-CG-Demo-API-Key"] == "demo-key"
