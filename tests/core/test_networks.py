"""Tests for the network catalog."""

import pytest
from pydantic import ValidationError

from core.config import Settings
from core.models.domain.network import Balance, NetworkConfig
from core.networks import DEFAULT_EMOJI, NetworkCatalog, network_emoji
from core.types import ChainKind, Environment


@pytest.fixture
def catalog() -> NetworkCatalog:
    return NetworkCatalog.from_settings(Settings(environment=Environment.TESTING))


class TestNetworkCatalog:
    """Test NetworkCatalog lookups."""

    def test_supported_networks(self, catalog):
        """Test that all seven networks are configured."""
        assert catalog.ids() == [
            "polygon",
            "tron",
            "bsc",
            "solana",
            "arbitrum",
            "avalanche",
            "ton",
        ]
        assert "polygon" in catalog
        assert catalog.is_supported("dogecoin") is False

    def test_stub_networks(self, catalog):
        """Test that networks without a balance reader are marked as stubs."""
        kinds = {network.network_id: network.kind for network in catalog}

        assert kinds["solana"] == ChainKind.STUB
        assert kinds["ton"] == ChainKind.STUB
        assert kinds["tron"] == ChainKind.TRON
        assert kinds["polygon"] == ChainKind.EVM

    def test_settings_overrides(self):
        """Test that RPC URL and CES contract come from settings."""
        settings = Settings(
            environment=Environment.TESTING,
            polygon_rpc_url="https://rpc.example.com",
            ces_contract_address="0x0000000000000000000000000000000000000001",
        )
        polygon = NetworkCatalog.from_settings(settings).get("polygon")

        assert polygon.primary_rpc_url == "https://rpc.example.com"
        assert polygon.token("ces").address.endswith("0001")

    def test_balance_symbols_native_first(self, catalog):
        """Test balance symbol order for networks with and without a native token entry."""
        assert catalog.get("polygon").balance_symbols() == ["POL", "CES", "USDT"]
        assert catalog.get("tron").balance_symbols() == ["TRX", "USDT"]
        assert catalog.get("bsc").balance_symbols() == ["BNB", "USDT", "BUSD", "USDC"]

    def test_token_decimals(self, catalog):
        """Test per-network token decimals."""
        assert catalog.token("polygon", "USDT").decimals == 6
        assert catalog.token("bsc", "USDT").decimals == 18
        assert catalog.token("polygon", "DOGE") is None
        assert catalog.token("unknown", "USDT") is None

    def test_display_name_and_emoji(self, catalog):
        """Test display helpers, including unknown networks."""
        assert catalog.display_name("bsc") == "BNB Smart Chain"
        assert catalog.display_name("unknown") == "Unknown Network"
        assert catalog.emoji("polygon") == "🟣"
        assert catalog.emoji("unknown") == DEFAULT_EMOJI
        assert network_emoji("ton") == "💎"

    @pytest.mark.parametrize(
        "network_id,address,expected",
        [
            ("polygon", "0x742d35Cc6634C0532925a3b844Bc454e4438f44e", True),
            ("polygon", "0x742d35Cc6634C0532925a3b844Bc454e4438f44", False),
            ("bsc", "742d35Cc6634C0532925a3b844Bc454e4438f44e", False),
            ("tron", "TLa2f6VPqDgRE67v1736s7bJ8Ray5wYjU7", True),
            ("tron", "0x742d35Cc6634C0532925a3b844Bc454e4438f44e", False),
            ("solana", "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB", True),
            ("ton", "EQCxE6mUtQJKFnGfaROTKOt1lZbDiiX1kCixRv7Nw2Id_sDs", True),
            ("unknown", "0x742d35Cc6634C0532925a3b844Bc454e4438f44e", False),
        ],
    )
    def test_validate_address(self, catalog, network_id, address, expected):
        """Test address format checks per network family."""
        assert catalog.validate_address(network_id, address) is expected

    def test_minimum_transfer(self, catalog):
        """Test configured minimums and the default."""
        assert catalog.minimum_transfer("polygon", "ces") == 0.0001
        assert catalog.minimum_transfer("ton", "NOT") == 1000
        assert catalog.minimum_transfer("polygon", "DOGE") == 0.001

    def test_estimate_fee(self, catalog):
        """Test native and token fee estimates."""
        assert catalog.estimate_fee("polygon", "POL") == (0.001, "POL")
        assert catalog.estimate_fee("polygon", "CES") == (0.002, "POL")
        assert catalog.estimate_fee("tron", "USDT") == (15.0, "TRX")
        assert catalog.estimate_fee("unknown", "USDT") == (0.0, None)


class TestNetworkModels:
    """Test network and balance models."""

    def test_rpc_urls_required_for_real_networks(self):
        """Test that non-stub networks need at least one endpoint."""
        with pytest.raises(ValidationError, match="needs at least one RPC URL"):
            NetworkConfig(
                network_id="x", name="X", kind=ChainKind.EVM, chain_id=1, native_token="X"
            )

    def test_stub_network_without_rpc(self):
        network = NetworkConfig(
            network_id="x", name="X", kind=ChainKind.STUB, chain_id=1, native_token="X"
        )
        assert network.primary_rpc_url is None

    def test_failed_balance(self):
        """Test that a failed read is a degraded zero."""
        balance = Balance.failed("timeout")

        assert balance.value == 0.0
        assert balance.degraded is True
        assert balance.error == "timeout"
        assert Balance(value=0.0).degraded is False
