"""Core functionality for the metawhale system."""

from .config import Settings, settings
from .log import (
    get_logger,
    setup_logging,
    setup_production_logging,
    setup_test_logging,
)
from .types import ChainKind, Environment, PriceSource, TaskOutcome

__all__ = [
    "ChainKind",
    "Environment",
    "PriceSource",
    "TaskOutcome",
    "Settings",
    "settings",
    "get_logger",
    "setup_logging",
    "setup_production_logging",
    "setup_test_logging",
]
