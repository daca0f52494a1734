"""Service layer - business logic orchestration."""

from coinfolio.services.market_data_cache import MarketDataCache, CACHE_TTL_SECONDS
from coinfolio.services.market_data_service import MarketDataService
from coinfolio.services.asset_resolver import AssetResolver, normalize_identifier
from coinfolio.services.portfolio_ledger import PortfolioLedger, OwnerLockRegistry

__all__ = [
    "MarketDataCache",
    "CACHE_TTL_SECONDS",
    "MarketDataService",
    "AssetResolver",
    "normalize_identifier",
    "PortfolioLedger",
    "OwnerLockRegistry",
]
