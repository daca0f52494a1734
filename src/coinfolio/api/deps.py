"""Dependency injection for FastAPI."""

from typing import Optional

from fastapi import Depends

from coinfolio.config.settings import Settings, get_settings
from coinfolio.repositories.sqlalchemy.database import get_session_factory
from coinfolio.repositories.sqlalchemy import SqlAlchemyPortfolioRepository
from coinfolio.providers import CoinGeckoProvider, MarketDataProvider, StubMarketDataProvider
from coinfolio.services import (
    AssetResolver,
    MarketDataCache,
    MarketDataService,
    OwnerLockRegistry,
    PortfolioLedger,
)

# Process-wide state: one cache and one lock registry shared by every request.
_market_data_cache: Optional[MarketDataCache] = None
_owner_locks: Optional[OwnerLockRegistry] = None


def build_market_provider(settings: Settings) -> MarketDataProvider:
    """Provider selected by `market_data_provider` ('coingecko' or 'stub')."""
    if settings.market_data_provider == "stub":
        return StubMarketDataProvider()
    return CoinGeckoProvider(
        base_url=settings.market_data_base_url,
        timeout_seconds=settings.market_data_timeout_seconds,
        api_key=settings.market_data_api_key,
    )


def get_market_data_cache() -> MarketDataCache:
    """Provide the shared MarketDataCache, built on first use."""
    global _market_data_cache
    if _market_data_cache is None:
        settings = get_settings()
        _market_data_cache = MarketDataCache(
            provider=build_market_provider(settings),
            ttl_seconds=settings.market_data_cache_ttl_seconds,
        )
    return _market_data_cache


def get_owner_locks() -> OwnerLockRegistry:
    """Provide the shared per-owner lock registry."""
    global _owner_locks
    if _owner_locks is None:
        _owner_locks = OwnerLockRegistry()
    return _owner_locks


def reset_dependencies() -> None:
    """Drop the shared cache and locks (used when settings change)."""
    global _market_data_cache, _owner_locks
    _market_data_cache = None
    _owner_locks = None


def get_market_data_service(
    cache: MarketDataCache = Depends(get_market_data_cache),
) -> MarketDataService:
    """Provide MarketDataService instance."""
    return MarketDataService(cache=cache, quote_currency=get_settings().quote_currency)


def get_asset_resolver(
    market_data_service: MarketDataService = Depends(get_market_data_service),
) -> AssetResolver:
    """Provide AssetResolver instance."""
    return AssetResolver(
        market_data_service=market_data_service,
        universe_size=get_settings().resolver_universe_size,
    )


def get_portfolio_repo() -> SqlAlchemyPortfolioRepository:
    """Provide PortfolioRepository instance (one session per repository call)."""
    return SqlAlchemyPortfolioRepository(get_session_factory())


def get_portfolio_ledger(
    resolver: AssetResolver = Depends(get_asset_resolver),
    portfolio_repo: SqlAlchemyPortfolioRepository = Depends(get_portfolio_repo),
    owner_locks: OwnerLockRegistry = Depends(get_owner_locks),
) -> PortfolioLedger:
    """Provide PortfolioLedger instance."""
    return PortfolioLedger(
        resolver=resolver,
        portfolio_repo=portfolio_repo,
        owner_locks=owner_locks,
    )
