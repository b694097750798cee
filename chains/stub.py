"""Placeholder adapter for networks without a balance reader yet."""

from core.log import get_logger
from core.models.domain.network import Balance, TokenConfig
from .base import ChainAdapter

logger = get_logger(__name__)


class StubAdapter(ChainAdapter):
    """Always answers with a degraded zero and a warning."""

    async def get_native_balance(self, address: str) -> Balance:
        return self._unavailable(self.network.native_token)

    async def get_token_balance(self, address: str, symbol: str) -> Balance:
        return self._unavailable(symbol.upper())

    def _unavailable(self, symbol: str) -> Balance:
        logger.warning(
            f"{self.network.name} balance reads are not yet implemented "
            f"({symbol} reported as 0)"
        )
        return Balance.failed(f"{self.network.name} is not yet implemented")

    async def _fetch_native(self, address: str) -> float:
        return 0.0

    async def _fetch_token(self, address: str, token: TokenConfig) -> float:
        return 0.0
