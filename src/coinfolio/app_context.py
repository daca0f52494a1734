"""Application context for in-process service management.

Provides a centralized way to access the resolver, market data and ledger
without HTTP, e.g. from a chat agent or a script.
"""

from pathlib import Path
from typing import Optional

from coinfolio.config.settings import Settings, set_settings, get_settings
from coinfolio.repositories.sqlalchemy.database import (
    get_session_factory,
    init_db_with_path,
)
from coinfolio.repositories.sqlalchemy import SqlAlchemyPortfolioRepository
from coinfolio.api.deps import build_market_provider
from coinfolio.services import (
    AssetResolver,
    MarketDataCache,
    MarketDataService,
    OwnerLockRegistry,
    PortfolioLedger,
)


class AppContext:
    """
    Application context providing in-process access to all services.

    Holds one market data cache and one lock registry for its lifetime, the
    same sharing the HTTP app gets from its dependencies. Safe to use from
    several threads at once.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize application context.

        Args:
            data_dir: Optional data directory. If not provided, uses default.
        """
        self._data_dir = data_dir
        self._initialized = False

        # Service instances (lazy initialized)
        self._cache: Optional[MarketDataCache] = None
        self._market_data_service: Optional[MarketDataService] = None
        self._resolver: Optional[AssetResolver] = None
        self._ledger: Optional[PortfolioLedger] = None
        self._owner_locks = OwnerLockRegistry()

    def initialize(self, data_dir: Optional[Path] = None, **overrides) -> None:
        """
        Initialize or reinitialize the application with a data directory.

        Args:
            data_dir: Data directory path. Uses default if not provided.
            **overrides: Extra Settings fields, e.g. market_data_provider="stub".
        """
        if data_dir:
            self._data_dir = data_dir

        settings = Settings(data_dir=self._data_dir, **overrides)
        set_settings(settings)

        db_path = settings.get_data_dir() / "coinfolio.db"
        init_db_with_path(db_path)

        self.close()
        self._cache = None
        self._market_data_service = None
        self._resolver = None
        self._ledger = None

        self._initialized = True

    @property
    def is_initialized(self) -> bool:
        """Check if context is initialized."""
        return self._initialized

    @property
    def data_dir(self) -> Path:
        """Get the current data directory."""
        return get_settings().get_data_dir()

    @property
    def cache(self) -> MarketDataCache:
        """Get the shared MarketDataCache."""
        if self._cache is None:
            settings = get_settings()
            self._cache = MarketDataCache(
                provider=build_market_provider(settings),
                ttl_seconds=settings.market_data_cache_ttl_seconds,
            )
        return self._cache

    @property
    def market_data(self) -> MarketDataService:
        """Get the MarketDataService instance."""
        if self._market_data_service is None:
            self._market_data_service = MarketDataService(
                cache=self.cache,
                quote_currency=get_settings().quote_currency,
            )
        return self._market_data_service

    @property
    def resolver(self) -> AssetResolver:
        """Get the AssetResolver instance."""
        if self._resolver is None:
            self._resolver = AssetResolver(
                market_data_service=self.market_data,
                universe_size=get_settings().resolver_universe_size,
            )
        return self._resolver

    @property
    def ledger(self) -> PortfolioLedger:
        """Get the PortfolioLedger instance."""
        if self._ledger is None:
            self._ledger = PortfolioLedger(
                resolver=self.resolver,
                portfolio_repo=SqlAlchemyPortfolioRepository(get_session_factory()),
                owner_locks=self._owner_locks,
            )
        return self._ledger

    def close(self) -> None:
        """Drop the ledger; its repository opens a session per call, so none stay open."""
        self._ledger = None


# Global application context
_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
    return _app_context


def set_app_context(context: AppContext) -> None:
    """Set the global application context."""
    global _app_context
    _app_context = context
