"""API routers package."""

from .common import router as common_router
from .networks import router as networks_router
from .operations import router as operations_router
from .portfolio import router as portfolio_router
from .prices import router as prices_router

__all__ = [
    "common_router",
    "networks_router",
    "operations_router",
    "portfolio_router",
    "prices_router",
]
