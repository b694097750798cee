"""FastAPI dependencies backed by app state."""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.engine import Engine
from sqlmodel import Session

from core.config import Settings
from core.database.repository import PriceHistoryRepository
from core.networks import NetworkCatalog
from core.performance import PerformanceMonitor
from core.periodic_task import PeriodicJobRunner
from core.scheduler import BackgroundScheduler
from core.services import PortfolioService


def get_settings(request: Request) -> Settings:
    """Get settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


# Database engine dependency
def get_engine(request: Request) -> Engine:
    """Get database engine from app state."""
    engine: Engine = request.app.state.engine
    return engine


# Database session dependency
def get_db(
    engine: Annotated[Engine, Depends(get_engine)],
) -> Generator[Session, None, None]:
    """Get database session from app state."""
    with Session(engine) as session:
        yield session


def get_price_history_repository(
    db: Annotated[Session, Depends(get_db)],
) -> PriceHistoryRepository:
    """Get price history repository."""
    return PriceHistoryRepository(db)


# Service dependencies
def get_catalog(request: Request) -> NetworkCatalog:
    """Get network catalog from app state."""
    catalog: NetworkCatalog = request.app.state.catalog
    return catalog


def get_scheduler(request: Request) -> BackgroundScheduler:
    """Get background scheduler from app state."""
    scheduler: BackgroundScheduler = request.app.state.scheduler
    return scheduler


def get_monitor(request: Request) -> PerformanceMonitor:
    """Get performance monitor from app state."""
    monitor: PerformanceMonitor = request.app.state.monitor
    return monitor


def get_portfolio_service(request: Request) -> PortfolioService:
    """Get portfolio service from app state."""
    service: PortfolioService = request.app.state.portfolio_service
    return service


def get_job_runners(request: Request) -> list[PeriodicJobRunner]:
    """Get periodic job runners from app state."""
    runners: list[PeriodicJobRunner] = request.app.state.job_runners
    return runners
