"""Core database functionality."""

from .engine import (
    create_database_engine,
    create_database_tables,
    drop_database_tables,
)
from .repository import PriceHistoryRepository

__all__ = [
    "PriceHistoryRepository",
    "create_database_engine",
    "create_database_tables",
    "drop_database_tables",
]
