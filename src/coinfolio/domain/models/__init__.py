"""Domain models package."""

from coinfolio.domain.models.asset import Asset, PriceQuote, AssetMarket, AssetDetails
from coinfolio.domain.models.position import PurchaseEvent, Position, PortfolioRecord
from coinfolio.domain.models.cache import CacheEntry

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
