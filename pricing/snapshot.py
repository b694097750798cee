"""Periodic job storing price samples into the price history."""

from core.log import get_logger
from core.periodic_task import PeriodicJob
from .service import PriceService

logger = get_logger(__name__)


class PriceSnapshotJob(PeriodicJob):
    """Fetches prices and stores fresh external results."""

    name = "price-snapshot"

    def __init__(self, service: PriceService, symbols: list[str]):
        self.service = service
        self.symbols = [symbol.upper() for symbol in symbols]

    async def on_start(self) -> None:
        if self.service.engine is None:
            logger.warning("Price snapshots enabled without a database")

    async def execute(self) -> None:
        for symbol in self.symbols:
            self.service.invalidate(symbol)
            record = await self.service.get_price(symbol)
            if not record.is_external:
                logger.info(
                    f"Skipping {symbol} snapshot, price came from {record.source.value}"
                )
                continue

            row = self.service.record_snapshot(record)
            if row is not None:
                logger.info(f"Stored {symbol} price ${record.price}")
