"""Portfolio loading pipeline driven by the background scheduler."""

import asyncio
import time
from typing import Any, Iterable

from chains import ChainAdapterRegistry
from core.log import get_logger
from core.models.domain.portfolio import PortfolioSnapshot
from core.models.domain.price import PriceRecord
from core.performance import PerformanceMonitor
from core.scheduler import BackgroundScheduler
from pricing import PriceService
from .portfolio_formatter import format_portfolio

logger = get_logger(__name__)


class PortfolioService:
    """Loads balances and prices for a wallet and formats them."""

    def __init__(
        self,
        chains: ChainAdapterRegistry,
        prices: PriceService,
        scheduler: BackgroundScheduler,
        monitor: PerformanceMonitor,
        task_priority: int = 1,
        task_timeout: float = 30.0,
    ):
        self.chains = chains
        self.prices = prices
        self.scheduler = scheduler
        self.monitor = monitor
        self.task_priority = task_priority
        self.task_timeout = task_timeout

    async def load_portfolio(self, network_id: str, address: str) -> PortfolioSnapshot:
        """Fetch balances and prices concurrently and format them.

        Failed balance reads show up as zero and are listed in
        ``degraded_symbols``.
        """
        adapter = self.chains.get(network_id)
        network = adapter.network

        balances, prices = await asyncio.gather(
            adapter.get_balances(address),
            self.prices.get_prices(network.balance_symbols()),
        )

        degraded = [symbol for symbol, balance in balances.items() if balance.degraded]
        if degraded:
            logger.warning(
                f"Degraded balances on {network_id} for {address}: {', '.join(degraded)}"
            )

        view = format_portfolio(
            network_id,
            {symbol: balance.value for symbol, balance in balances.items()},
            prices,
        )
        return PortfolioSnapshot(
            network_id=network_id,
            network_name=network.name,
            address=address,
            view=view,
            prices=prices,
            degraded_symbols=degraded,
        )

    def submit_portfolio(
        self, subject_id: str | int, network_id: str, address: str
    ) -> "asyncio.Future[PortfolioSnapshot]":
        """Queue a portfolio load and return its handle."""

        async def work() -> PortfolioSnapshot:
            async with self.monitor.measure("portfolio", subject_id):
                return await self.load_portfolio(network_id, address)

        return self._submit("portfolio", subject_id, work)

    def submit_price_quote(
        self, subject_id: str | int, symbols: Iterable[str]
    ) -> "asyncio.Future[dict[str, PriceRecord]]":
        """Queue a price lookup for ``symbols`` and return its handle."""
        symbols = list(symbols)

        async def work() -> dict[str, PriceRecord]:
            async with self.monitor.measure("price_quote", subject_id):
                return await self.prices.get_prices(symbols)

        return self._submit("price_quote", subject_id, work)

    def _submit(self, kind: str, subject_id: str | int, work: Any) -> "asyncio.Future[Any]":
        task_id = f"{kind}_{subject_id}_{int(time.time() * 1000)}"
        return self.scheduler.submit(
            task_id,
            work,
            priority=self.task_priority,
            timeout=self.task_timeout,
        )
