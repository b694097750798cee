"""Utility functions for the application."""

import math
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def get_current_timestamp() -> str:
    """Get current timestamp in ISO8601 format."""
    return utc_now().isoformat()


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce loosely typed API values to a finite float."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def scale_amount(raw: int | str, decimals: int) -> float:
    """Convert an integer amount in the smallest unit to a decimal quantity.

    Args:
        raw: Integer amount (or its decimal string form)
        decimals: Token decimal precision

    Returns:
        Quantity as float, computed through Decimal to avoid rounding drift
    """
    try:
        amount = Decimal(int(raw))
    except (TypeError, ValueError, InvalidOperation):
        raise ValueError(f"Invalid raw amount: {raw!r}")
    return float(amount.scaleb(-decimals))


def format_compact_number(num: float) -> str:
    """Format large numbers as 1.23K / 4.56M / 7.89B."""
    if num >= 1e9:
        return f"{num / 1e9:.2f}B"
    if num >= 1e6:
        return f"{num / 1e6:.2f}M"
    if num >= 1e3:
        return f"{num / 1e3:.2f}K"
    return f"{num:.2f}"
