"""API routers package."""

from coinfolio.api.routers.assets import router as assets_router
from coinfolio.api.routers.portfolio import router as portfolio_router

__all__ = [
    "assets_router",
    "portfolio_router",
]
