"""Base class for chain adapters."""

import asyncio
from abc import ABC, abstractmethod

from core.log import get_logger
from core.models.domain.network import Balance, NetworkConfig, TokenConfig

logger = get_logger(__name__)


class ChainAdapter(ABC):
    """Reads native and token balances for one network.

    Public methods never raise for data problems: any failure is logged and
    returned as a degraded zero balance. Subclasses implement the raw reads.
    """

    def __init__(self, network: NetworkConfig):
        self.network = network

    @property
    def network_id(self) -> str:
        return self.network.network_id

    async def get_native_balance(self, address: str) -> Balance:
        try:
            value = await self._fetch_native(address)
        except Exception as e:
            logger.error(
                f"Native balance read failed on {self.network_id} for {address}: {e}"
            )
            return Balance.failed(str(e))
        return Balance(value=value)

    async def get_token_balance(self, address: str, symbol: str) -> Balance:
        symbol = symbol.upper()
        if symbol == self.network.native_token:
            return await self.get_native_balance(address)

        token = self.network.token(symbol)
        if token is None:
            logger.warning(f"Token {symbol} is not configured on {self.network_id}")
            return Balance.failed(f"Unknown token {symbol}")
        if token.is_native:
            return await self.get_native_balance(address)

        try:
            value = await self._fetch_token(address, token)
        except Exception as e:
            logger.error(
                f"{symbol} balance read failed on {self.network_id} for {address}: {e}"
            )
            return Balance.failed(str(e))
        return Balance(value=value)

    async def get_balances(self, address: str) -> dict[str, Balance]:
        """Native plus every configured token, fetched concurrently."""
        symbols = self.network.balance_symbols()
        results = await asyncio.gather(
            *(self.get_token_balance(address, symbol) for symbol in symbols)
        )
        return dict(zip(symbols, results))

    async def aclose(self) -> None:
        """Release network resources held by the adapter."""
        pass

    @abstractmethod
    async def _fetch_native(self, address: str) -> float:
        pass

    @abstractmethod
    async def _fetch_token(self, address: str, token: TokenConfig) -> float:
        pass
