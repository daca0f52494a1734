"""Repository protocol definitions (interfaces)."""

from coinfolio.repositories.protocols.portfolio_repo import PortfolioRepository

__all__ = [
    "PortfolioRepository",
]
