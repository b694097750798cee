"""Repository layer for database operations."""

from .base import BaseRepository
from .price_history import PriceHistoryRepository

__all__ = [
    "BaseRepository",
    "PriceHistoryRepository",
]
