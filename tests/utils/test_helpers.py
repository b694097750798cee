"""Test helper utilities for metawhale tests."""

from typing import Any

from core.models.domain.price import PriceRecord
from core.models.rows import PriceHistory
from core.types import PriceSource

WALLET_ADDRESS = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"
CES_CONTRACT = "0x1bdf71ede1a4777db1eebe7232bcda20d6fc1610"
USDT_CONTRACT = "0xc2132D05D31c914a87C6611C10748AEb04B58e8F"
TRON_ADDRESS = "TLa2f6VPqDgRE67v1736s7bJ8Ray5wYjU7"
TRON_USDT_CONTRACT = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"


class TestDataFactory:
    """Factory class for creating test data objects."""

    __test__ = False

    @staticmethod
    def coin_details(
        price: float = 2.0,
        ath: float | None = 3.5,
        change_24h: float = 1.5,
        market_cap: float = 1_000_000.0,
        volume_24h: float = 50_000.0,
    ) -> dict[str, Any]:
        """Market-data ``/coins/{id}`` response body."""
        market_data: dict[str, Any] = {
            "current_price": {"usd": price},
            "price_change_percentage_24h": change_24h,
            "market_cap": {"usd": market_cap},
            "total_volume": {"usd": volume_24h},
        }
        if ath is not None:
            market_data["ath"] = {"usd": ath}
        return {"id": "whalebit", "symbol": "ces", "market_data": market_data}

    @staticmethod
    def create_price_record(
        symbol: str = "CES",
        price: float = 2.0,
        price_rub: float = 180.0,
        source: PriceSource = PriceSource.EXTERNAL_DETAILED,
        ath: float | None = None,
    ) -> PriceRecord:
        return PriceRecord(
            symbol=symbol,
            price=price,
            price_rub=price_rub,
            source=source,
            ath=ath,
        )

    @staticmethod
    def create_price_history(
        symbol: str = "CES",
        price: float = 2.0,
        price_rub: float | None = 180.0,
        ath: float | None = None,
        **kwargs: Any,
    ) -> PriceHistory:
        """Create a PriceHistory row with default or custom values."""
        return PriceHistory(
            symbol=symbol, price=price, price_rub=price_rub, ath=ath, **kwargs
        )
