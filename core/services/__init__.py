"""Core services package."""

from .portfolio_formatter import (
    format_portfolio,
    render_price_message,
    render_wallet_message,
)
from .portfolio_service import PortfolioService

__all__ = [
    "PortfolioService",
    "format_portfolio",
    "render_price_message",
    "render_wallet_message",
]
