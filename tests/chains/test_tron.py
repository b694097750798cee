"""Tests for the TRON chain adapter."""

import pytest
from pytest_httpserver import HTTPServer

from chains import InvalidAddressError, TronAdapter, TronGridClient

from tests.utils.test_helpers import TRON_ADDRESS


class TestTronAdapter:
    """Test TronAdapter against a mock TronGrid server."""

    @pytest.mark.asyncio
    async def test_get_balances(self, mock_tron_grid, test_tron_network):
        """Test TRX and TRC-20 balances from a single account lookup."""
        adapter = TronAdapter(test_tron_network)
        try:
            balances = await adapter.get_balances(TRON_ADDRESS)
        finally:
            await adapter.aclose()

        assert list(balances) == ["TRX", "USDT"]
        assert balances["TRX"].value == 150.0
        assert balances["USDT"].value == 20.0
        assert not any(b.degraded for b in balances.values())
        assert len(mock_tron_grid.log) == 1

    @pytest.mark.asyncio
    async def test_single_reads(self, mock_tron_grid, test_tron_network):
        adapter = TronAdapter(test_tron_network)
        try:
            native = await adapter.get_native_balance(TRON_ADDRESS)
            usdt = await adapter.get_token_balance(TRON_ADDRESS, "usdt")
        finally:
            await adapter.aclose()

        assert native.value == 150.0
        assert usdt.value == 20.0

    @pytest.mark.asyncio
    async def test_inactive_account_is_zero(
        self, httpserver: HTTPServer, test_tron_network
    ):
        """Test that an account that was never activated holds nothing."""
        httpserver.expect_request(f"/v1/accounts/{TRON_ADDRESS}").respond_with_json(
            {"success": True, "data": []}
        )
        adapter = TronAdapter(test_tron_network)
        try:
            balances = await adapter.get_balances(TRON_ADDRESS)
        finally:
            await adapter.aclose()

        assert balances["TRX"].value == 0.0
        assert balances["TRX"].degraded is False
        assert balances["USDT"].value == 0.0

    @pytest.mark.asyncio
    async def test_missing_trc20_entry_is_zero(
        self, httpserver: HTTPServer, test_tron_network
    ):
        httpserver.expect_request(f"/v1/accounts/{TRON_ADDRESS}").respond_with_json(
            {"success": True, "data": [{"balance": 1_000_000, "trc20": []}]}
        )
        adapter = TronAdapter(test_tron_network)
        try:
            balances = await adapter.get_balances(TRON_ADDRESS)
        finally:
            await adapter.aclose()

        assert balances["TRX"].value == 1.0
        assert balances["USDT"].value == 0.0

    @pytest.mark.asyncio
    async def test_grid_failure_is_degraded(
        self, httpserver: HTTPServer, test_tron_network
    ):
        """Test that a TronGrid error marks every balance as degraded."""
        httpserver.expect_request(f"/v1/accounts/{TRON_ADDRESS}").respond_with_json(
            {"success": False, "error": "rate limited"}
        )
        adapter = TronAdapter(test_tron_network)
        try:
            balances = await adapter.get_balances(TRON_ADDRESS)
        finally:
            await adapter.aclose()

        assert all(b.degraded for b in balances.values())
        assert "rate limited" in balances["TRX"].error

    @pytest.mark.asyncio
    async def test_invalid_address(self, test_tron_network):
        """Test that malformed addresses are rejected before any request."""
        adapter = TronAdapter(test_tron_network)

        with pytest.raises(InvalidAddressError):
            await adapter.get_account("0x742d35Cc6634C0532925a3b844Bc454e4438f44e")

        balances = await adapter.get_balances("not-tron")
        assert balances["TRX"].degraded is True


class TestTronGridClient:
    """Test the TronGrid HTTP client."""

    @pytest.mark.asyncio
    async def test_api_key_header(self, mock_tron_grid: HTTPServer):
        """Test that the API key is sent when configured."""
        grid = TronGridClient(api_key="secret")
        try:
            account = await grid.get_account(mock_tron_grid.url_for("/"), TRON_ADDRESS)
        finally:
            await grid.aclose()

        assert account["balance"] == 150_000_000
        request, _ = mock_tron_grid.log[-1]
        assert request.headers["TRON-PRO-API-KEY"] == "secret"

    @pytest.mark.asyncio
    async def test_no_api_key_header(self, mock_tron_grid: HTTPServer):
        grid = TronGridClient()
        try:
            await grid.get_account(mock_tron_grid.url_for("/"), TRON_ADDRESS)
        finally:
            await grid.aclose()

        request, _ = mock_tron_grid.log[-1]
        assert "TRON-PRO-API-KEY" not in request.headers
