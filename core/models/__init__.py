"""Unified models package for Metawhale."""

# Domain models
from core.models.domain.network import Balance, NetworkConfig, TokenConfig
from core.models.domain.performance import (
    Metric,
    OperationStats,
    PerformanceReport,
    PerformanceStats,
)
from core.models.domain.portfolio import (
    PortfolioSnapshot,
    PortfolioTotal,
    PortfolioView,
    TokenHolding,
)
from core.models.domain.price import MarketQuote, PriceRecord
from core.models.domain.task import (
    JobRunnerStatus,
    JobStats,
    SchedulerStats,
    Task,
    TaskEvent,
)

# Database models (SQLModel rows)
from core.models.rows import PriceHistory

__all__ = [
    # Domain models
    "Balance",
    "NetworkConfig",
    "TokenConfig",
    "Metric",
    "OperationStats",
    "PerformanceReport",
    "PerformanceStats",
    "PortfolioSnapshot",
    "PortfolioTotal",
    "PortfolioView",
    "TokenHolding",
    "MarketQuote",
    "PriceRecord",
    "JobRunnerStatus",
    "JobStats",
    "SchedulerStats",
    "Task",
    "TaskEvent",
    # Database models (SQLModel rows)
    "PriceHistory",
]
