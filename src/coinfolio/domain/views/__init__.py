"""View models for service outputs."""

from coinfolio.domain.views.portfolio import PositionValuation, PortfolioValuation

__all__ = [
    "PositionValuation",
    "PortfolioValuation",
]
