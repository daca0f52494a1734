"""Repository layer - data access abstractions and implementations."""

from coinfolio.repositories.protocols import PortfolioRepository

__all__ = [
    "PortfolioRepository",
]
