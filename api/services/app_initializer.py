"""Application service initializer for managing startup and shutdown."""

from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from chains import ChainAdapterRegistry
from core.config import Settings
from core.database.engine import create_database_engine, create_database_tables
from core.log import get_logger
from core.networks import NetworkCatalog
from core.performance import PerformanceMonitor, PerformanceSummaryJob
from core.periodic_task import PeriodicJobRunner
from core.rate_limiter import AsyncRateLimiter
from core.scheduler import BackgroundScheduler
from core.services import PortfolioService
from pricing import (
    CurrencyRateCache,
    ExchangeRateClient,
    MarketDataClient,
    PriceService,
    PriceSnapshotJob,
)

logger = get_logger(__name__)


class AppServiceInitializer:
    """Manages initialization and lifecycle of application services."""

    def __init__(
        self,
        settings: Settings,
        engine: Engine | None = None,
        catalog: NetworkCatalog | None = None,
    ):
        """Initialize with application settings.

        Args:
            settings: Application settings
            engine: Prebuilt database engine; created from settings when omitted
            catalog: Network catalog; built from settings when omitted
        """
        self.settings = settings
        self.engine = engine
        self.catalog = catalog
        self.chains: ChainAdapterRegistry | None = None
        self.price_service: PriceService | None = None
        self.scheduler: BackgroundScheduler | None = None
        self.monitor: PerformanceMonitor | None = None
        self.portfolio_service: PortfolioService | None = None
        self.job_runners: list[PeriodicJobRunner] = []

    async def initialize_all_services(self, app: FastAPI) -> None:
        """Initialize all services and configure app.state."""
        logger.info("Initializing all application services...")

        await self.initialize_database()
        await self.initialize_chain_services()
        await self.initialize_price_services()
        await self.initialize_task_services()
        self._setup_app_state(app)

        logger.info("All application services initialized successfully")

    async def initialize_database(self) -> None:
        """Initialize database engine and create tables."""
        logger.info("Initializing database...")

        if self.engine is None:
            db_path = self.settings.database_path
            self.engine = create_database_engine(
                self.settings.environment,
                db_path=Path(db_path) if db_path else None,
            )

        create_database_tables(self.engine)

        logger.info("Database initialized successfully")

    async def initialize_chain_services(self) -> None:
        """Initialize the network catalog and chain adapters."""
        if self.catalog is None:
            self.catalog = NetworkCatalog.from_settings(self.settings)

        self.chains = ChainAdapterRegistry(self.catalog, config=self.settings)
        logger.info(f"Chain adapters ready for {', '.join(self.catalog.ids())}")

    async def initialize_price_services(self) -> None:
        """Initialize market data, exchange rates and the price service."""
        if not self.engine:
            raise RuntimeError("Database must be initialized before price services")

        market = MarketDataClient(
            base_url=self.settings.market_data_api_base_url,
            api_key=self.settings.market_data_api_key,
            api_key_header=self.settings.market_data_api_key_header,
            detail_timeout=self.settings.market_data_detail_timeout,
            simple_timeout=self.settings.market_data_simple_timeout,
        )
        if not self.settings.market_data_api_key:
            logger.warning("Market-data API key is not set, using the public tier")

        rates = CurrencyRateCache(
            ExchangeRateClient(
                base_url=self.settings.exchange_rate_api_base_url,
                timeout=self.settings.exchange_rate_timeout,
            ),
            ttl_seconds=self.settings.exchange_rate_ttl_seconds,
            fallback_rate=self.settings.exchange_rate_fallback,
        )

        self.price_service = PriceService(
            market,
            rates,
            engine=self.engine,
            primary_symbol=self.settings.primary_token_symbol,
            primary_limiter=AsyncRateLimiter(
                min_interval=self.settings.primary_token_min_interval
            ),
            cache_ttl_seconds=self.settings.price_cache_ttl_seconds,
            cache_max_size=self.settings.price_cache_max_size,
        )

    async def initialize_task_services(self) -> None:
        """Initialize the scheduler, performance monitor and portfolio service."""
        if not self.chains or not self.price_service:
            raise RuntimeError(
                "Chain and price services must be initialized before task services"
            )

        self.scheduler = BackgroundScheduler(
            default_timeout=self.settings.scheduler_default_timeout,
            default_priority=self.settings.scheduler_default_priority,
            yield_seconds=self.settings.scheduler_yield_seconds,
            cancel_abandoned_work=self.settings.scheduler_cancel_abandoned_work,
        )
        self.monitor = PerformanceMonitor(
            threshold_ms=self.settings.perf_threshold_ms,
            max_metrics=self.settings.perf_max_metrics,
            max_slow_metrics=self.settings.perf_max_slow_metrics,
        )
        self.portfolio_service = PortfolioService(
            self.chains,
            self.price_service,
            self.scheduler,
            self.monitor,
            task_priority=self.settings.portfolio_task_priority,
            task_timeout=self.settings.portfolio_task_timeout,
        )

        self.job_runners = [
            PeriodicJobRunner(
                PerformanceSummaryJob(self.monitor),
                interval_seconds=self.settings.perf_summary_interval_minutes * 60,
                run_immediately=False,
            )
        ]
        if self.settings.price_snapshot_enabled:
            self.job_runners.append(
                PeriodicJobRunner(
                    PriceSnapshotJob(
                        self.price_service, [self.settings.primary_token_symbol]
                    ),
                    interval_seconds=self.settings.price_snapshot_interval,
                )
            )
        else:
            logger.warning("Price snapshots are disabled")

    async def start_all_services(self) -> None:
        """Start all background jobs."""
        logger.info("Starting all background services...")

        if not self.scheduler:
            raise RuntimeError("Task services must be initialized before starting")

        for runner in self.job_runners:
            await self._safe_call(f"{runner.job.name} job", "start", runner.start)

        logger.info("All background services started successfully")

    async def stop_all_services(self) -> None:
        """Stop background jobs, drain the scheduler and close clients."""
        logger.info("Stopping all background services...")

        for runner in self.job_runners:
            await self._safe_call(f"{runner.job.name} job", "stop", runner.stop)

        if self.scheduler:
            await self._safe_call("scheduler", "stop", self.scheduler.shutdown)
        if self.chains:
            await self._safe_call("chain adapters", "stop", self.chains.aclose)
        if self.price_service:
            await self._safe_call("price service", "stop", self.price_service.aclose)

        logger.info("All background services stopped successfully")

    @staticmethod
    async def _safe_call(
        service_name: str,
        action: str,
        func: Callable[[], Coroutine[Any, Any, Any]],
    ) -> bool:
        """Run a lifecycle step, logging instead of raising on failure."""
        try:
            await func()
            logger.info(f"{service_name} {action} completed")
            return True
        except Exception as e:
            logger.error(f"Failed to {action} {service_name}: {e}")
            return False

    def _setup_app_state(self, app: FastAPI) -> None:
        """Configure app.state with initialized services."""
        app.state.settings = self.settings
        app.state.engine = self.engine
        app.state.catalog = self.catalog
        app.state.chains = self.chains
        app.state.price_service = self.price_service
        app.state.scheduler = self.scheduler
        app.state.monitor = self.monitor
        app.state.portfolio_service = self.portfolio_service
        app.state.job_runners = self.job_runners
