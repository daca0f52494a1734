"""Market data providers module."""

from coinfolio.providers.market_data_provider import (
    MarketDataProvider,
    MarketDataRequest,
    top_markets_request,
    asset_details_request,
)
from coinfolio.providers.coingecko_provider import CoinGeckoProvider
from coinfolio.providers.stub_provider import StubMarketDataProvider

__all__ = [
    "MarketDataProvider",
    "MarketDataRequest",
    "top_markets_request",
    "asset_details_request",
    "CoinGeckoProvider",
    "StubMarketDataProvider",
]
