"""Domain layer - pure business models with no external dependencies."""

from coinfolio.domain.models import (
    Asset,
    PriceQuote,
    AssetMarket,
    AssetDetails,
    PurchaseEvent,
    Position,
    PortfolioRecord,
    CacheEntry,
)

__all__ = [
    "Asset",
    "PriceQuote",
    "AssetMarket",
    "AssetDetails",
    "PurchaseEvent",
    "Position",
    "PortfolioRecord",
    "CacheEntry",
]
