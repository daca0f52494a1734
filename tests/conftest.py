"""
Pytest configuration and fixtures for the coinfolio tests.

This module provides:
- In-memory SQLite database fixtures
- A deterministic, call-counting market data provider
- A fake monotonic clock for cache freshness
- Service and repository fixtures
- FastAPI test client wired to the fixtures above
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

import pytest
import pytz
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from coinfolio.main import app
from coinfolio.api.deps import (
    get_market_data_cache,
    get_owner_locks,
    get_portfolio_repo,
    reset_dependencies,
)
from coinfolio.repositories.sqlalchemy.database import Base, reset_database
# Import ORM models to register them with Base before creating tables
from coinfolio.repositories.sqlalchemy import orm_models  # noqa: F401
from coinfolio.repositories.sqlalchemy import SqlAlchemyPortfolioRepository
from coinfolio.providers.market_data_provider import MarketDataRequest
from coinfolio.core.exceptions import DataSourceUnavailable
from coinfolio.domain.models import PortfolioRecord, Position
from coinfolio.services import (
    AssetResolver,
    MarketDataCache,
    MarketDataService,
    OwnerLockRegistry,
    PortfolioLedger,
)
from coinfolio.config.settings import Settings, set_settings, reset_settings


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 12,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create an aware UTC datetime."""
    return pytz.UTC.localize(datetime(year, month, day, hour, minute, second))


class FakeClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2024, 6, 15, 14, 30, 0)


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a controllable monotonic clock."""
    return FakeClock()


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def portfolio_repo(test_engine) -> SqlAlchemyPortfolioRepository:
    """Provide test PortfolioRepository on the in-memory engine."""
    return SqlAlchemyPortfolioRepository(
        sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    )


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class CountingMarketProvider:
    """
    Deterministic market data provider for testing.

    Serves CoinGecko-shaped payloads from a fixed ranked listing and records
    every call, so tests can assert how often the price source was hit.
    Failures can be switched on for everything, the listing only, or
    individual asset ids.
    """

    DEFAULT_ROWS = [
        # id, symbol, name, price, market cap, 24h %
        ("bitcoin", "btc", "Bitcoin", 60000.0, 1200000000000.0, 2.5),
        ("ethereum", "eth", "Ethereum", 3000.0, 360000000000.0, -1.25),
        ("solana", "sol", "Solana", 150.0, 70000000000.0, 4.0),
        ("dogecoin", "doge", "Dogecoin", 0.12, 17000000000.0, 0.0),
    ]

    def __init__(self, rows: Optional[list[tuple]] = None):
        self.rows = list(rows or self.DEFAULT_ROWS)
        self.calls: list[str] = []
        self.fail_all = False
        self.fail_listing = False
        self.failing_ids: set[str] = set()

    def calls_to(self, path: str) -> int:
        return sum(1 for p in self.calls if p == path)

    @property
    def listing_calls(self) -> int:
        return self.calls_to("/coins/markets")

    def set_price(self, asset_id: str, price: float) -> None:
        self.rows = [
            (r[0], r[1], r[2], price, r[4], r[5]) if r[0] == asset_id else r
            for r in self.rows
        ]

    def fetch(self, request: MarketDataRequest) -> Any:
        self.calls.append(request.path)
        if self.fail_all:
            raise DataSourceUnavailable("Price source down")

        if request.path == "/coins/markets":
            if self.fail_listing:
                raise DataSourceUnavailable("Listing unavailable", status=503)
            per_page = int(request.query.get("per_page", "100"))
            return [self._row(r, rank) for rank, r in enumerate(self.rows[:per_page], 1)]

        asset_id = request.path.rsplit("/", 1)[-1]
        if asset_id in self.failing_ids:
            raise DataSourceUnavailable(f"Details unavailable for {asset_id}", status=503)
        for rank, row in enumerate(self.rows, 1):
            if row[0] == asset_id:
                return self._details(row, rank)
        raise DataSourceUnavailable(f"Unknown id {asset_id}", status=404)

    @staticmethod
    def _row(row: tuple, rank: int) -> dict[str, Any]:
        asset_id, symbol, name, price, market_cap, change = row
        return {
            "id": asset_id,
            "symbol": symbol,
            "name": name,
            "current_price": price,
            "market_cap": market_cap,
            "market_cap_rank": rank,
            "total_volume": market_cap / 50,
            "high_24h": price,
            "low_24h": price,
            "price_change_percentage_24h": change,
            "price_change_percentage_24h_in_currency": change,
            "price_change_percentage_7d_in_currency": None,
            "price_change_percentage_30d_in_currency": None,
        }

    @staticmethod
    def _details(row: tuple, rank: int) -> dict[str, Any]:
        asset_id, symbol, name, price, market_cap, change = row
        return {
            "id": asset_id,
            "symbol": symbol,
            "name": name,
            "market_cap_rank": rank,
            "description": {"en": f"{name} is a test asset. It has a second sentence."},
            "market_data": {
                "current_price": {"usd": price},
                "market_cap": {"usd": market_cap},
                "total_volume": {"usd": market_cap / 50},
                "high_24h": {"usd": price},
                "low_24h": {"usd": price},
                "price_change_percentage_24h": change,
                "market_cap_rank": rank,
            },
        }


class FailingMarketProvider:
    """Market provider that always raises a non-domain exception."""

    def __init__(self):
        self.calls = 0

    def fetch(self, request: MarketDataRequest) -> Any:
        self.calls += 1
        raise ConnectionError("Network unavailable")


@pytest.fixture
def market_provider() -> CountingMarketProvider:
    """Provide the deterministic counting provider."""
    return CountingMarketProvider()


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    """Provide a market provider that always fails."""
    return FailingMarketProvider()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def market_cache(market_provider, fake_clock) -> MarketDataCache:
    """Provide a MarketDataCache over the counting provider with a 60s TTL."""
    return MarketDataCache(provider=market_provider, ttl_seconds=60, clock=fake_clock)


@pytest.fixture
def market_data_service(market_cache) -> MarketDataService:
    """Provide test MarketDataService."""
    return MarketDataService(cache=market_cache, quote_currency="usd")


@pytest.fixture
def asset_resolver(market_data_service) -> AssetResolver:
    """Provide test AssetResolver over the top 100."""
    return AssetResolver(market_data_service=market_data_service, universe_size=100)


@pytest.fixture
def portfolio_ledger(asset_resolver, portfolio_repo, fixed_now) -> PortfolioLedger:
    """Provide test PortfolioLedger with a fixed wall clock."""
    return PortfolioLedger(
        resolver=asset_resolver,
        portfolio_repo=portfolio_repo,
        owner_locks=OwnerLockRegistry(),
        clock=lambda: fixed_now,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def position_factory(fixed_now):
    """Factory for building Position records directly (bypassing the ledger)."""

    def _create_position(
        asset_id: str = "bitcoin",
        symbol: str = "BTC",
        name: str = "Bitcoin",
        quantity: str = "1",
        average_cost: str = "100",
        last_purchase_at: Optional[datetime] = None,
    ) -> Position:
        return Position(
            asset_id=asset_id,
            symbol=symbol,
            name=name,
            quantity=Decimal(quantity),
            average_cost=Decimal(average_cost),
            last_purchase_at=last_purchase_at or fixed_now,
        )

    return _create_position


@pytest.fixture
def seed_portfolio(portfolio_repo):
    """Store positions for an owner without going through the resolver."""

    def _seed(owner_id: str, positions: list[Position]) -> PortfolioRecord:
        return portfolio_repo.save(PortfolioRecord(owner_id=owner_id, positions=positions))

    return _seed


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(portfolio_repo, market_cache, tmp_path) -> TestClient:
    """Provide FastAPI test client with test database and counting provider."""
    set_settings(Settings(data_dir=tmp_path, market_data_provider="stub"))
    reset_database()
    reset_dependencies()

    owner_locks = OwnerLockRegistry()
    app.dependency_overrides[get_portfolio_repo] = lambda: portfolio_repo
    app.dependency_overrides[get_market_data_cache] = lambda: market_cache
    app.dependency_overrides[get_owner_locks] = lambda: owner_locks
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_dependencies()
    reset_settings()
