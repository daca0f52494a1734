"""Market data service: typed listings, details and quotes over the cache."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from coinfolio.core.exceptions import DataSourceUnavailable
from coinfolio.core.numbers import to_decimal
from coinfolio.domain.models import Asset, AssetDetails, AssetMarket, PriceQuote
from coinfolio.providers.market_data_provider import (
    asset_details_request,
    top_markets_request,
)
from coinfolio.services.market_data_cache import MarketDataCache

logger = logging.getLogger(__name__)

MAX_LISTING_SIZE = 250


def _parse_asset(raw: dict[str, Any]) -> Asset:
    asset_id = raw.get("id")
    symbol = raw.get("symbol")
    if not isinstance(asset_id, str) or not isinstance(symbol, str) or not asset_id:
        raise ValueError("asset record missing id/symbol")
    name = raw.get("name")
    return Asset(id=asset_id, symbol=symbol, name=name if isinstance(name, str) else asset_id)


def _parse_rank(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _parse_market_row(raw: Any, as_of: datetime) -> AssetMarket:
    if not isinstance(raw, dict):
        raise ValueError("market row is not an object")
    asset = _parse_asset(raw)
    price = to_decimal(raw.get("current_price"))
    if price is None or price <= 0:
        raise ValueError(f"no usable price for {asset.id}")
    quote = PriceQuote(
        asset_id=asset.id,
        current_price=price,
        as_of=as_of,
        price_change_24h=to_decimal(
            raw.get("price_change_percentage_24h_in_currency", raw.get("price_change_percentage_24h"))
        ),
        price_change_7d=to_decimal(
            raw.get("price_change_percentage_7d_in_currency", raw.get("price_change_percentage_7d"))
        ),
        price_change_30d=to_decimal(
            raw.get("price_change_percentage_30d_in_currency", raw.get("price_change_percentage_30d"))
        ),
        market_cap=to_decimal(raw.get("market_cap")),
        rank=_parse_rank(raw.get("market_cap_rank")),
        high_24h=to_decimal(raw.get("high_24h")),
        low_24h=to_decimal(raw.get("low_24h")),
    )
    return AssetMarket(asset=asset, quote=quote)


def _in_currency(block: dict[str, Any], field: str, currency: str) -> Optional[Decimal]:
    values = block.get(field)
    if not isinstance(values, dict):
        return None
    return to_decimal(values.get(currency))


def _parse_details(raw: Any, currency: str, as_of: datetime) -> AssetDetails:
    if not isinstance(raw, dict):
        raise ValueError("details payload is not an object")
    asset = _parse_asset(raw)
    market = raw.get("market_data")
    if not isinstance(market, dict):
        raise ValueError(f"no market data for {asset.id}")
    price = _in_currency(market, "current_price", currency)
    if price is None or price <= 0:
        raise ValueError(f"no usable {currency} price for {asset.id}")

    quote = PriceQuote(
        asset_id=asset.id,
        current_price=price,
        as_of=as_of,
        price_change_24h=to_decimal(market.get("price_change_percentage_24h")),
        price_change_7d=to_decimal(market.get("price_change_percentage_7d")),
        price_change_30d=to_decimal(market.get("price_change_percentage_30d")),
        market_cap=_in_currency(market, "market_cap", currency),
        rank=_parse_rank(market.get("market_cap_rank", raw.get("market_cap_rank"))),
        high_24h=_in_currency(market, "high_24h", currency),
        low_24h=_in_currency(market, "low_24h", currency),
    )
    description = raw.get("description")
    text = description.get("en", "") if isinstance(description, dict) else ""
    return AssetDetails(
        asset=asset,
        quote=quote,
        total_volume=_in_currency(market, "total_volume", currency),
        description=text or "",
    )


class MarketDataService:
    """
    Typed access to the price source through the shared cache.

    Every call goes through MarketDataCache, so repeated reads inside the TTL
    window cost nothing. Malformed payloads raise DataSourceUnavailable just
    like transport failures.
    """

    def __init__(self, cache: MarketDataCache, quote_currency: str = "usd"):
        self._cache = cache
        self._currency = quote_currency.lower()

    @property
    def quote_currency(self) -> str:
        return self._currency

    def get_top_assets(self, count: int = 10) -> list[AssetMarket]:
        """
        Ranked listing of the `count` largest assets by market cap.

        Rows without a usable price are skipped; a payload that is not a list
        raises DataSourceUnavailable.
        """
        count = max(1, min(count, MAX_LISTING_SIZE))
        entry = self._cache.fetch_entry(
            top_markets_request(count, self._currency),
            validate=lambda payload: isinstance(payload, list),
        )
        result: list[AssetMarket] = []
        for raw in entry.payload:
            try:
                result.append(_parse_market_row(raw, entry.retrieved_at))
            except ValueError as error:
                logger.debug("Skipping market row: %s", error)
        return result

    def get_asset_details(self, asset_id: str) -> AssetDetails:
        """Detail record (quote plus description) for one canonical asset id."""
        entry = self._cache.fetch_entry(
            asset_details_request(asset_id),
            validate=lambda payload: isinstance(payload, dict) and "market_data" in payload,
        )
        try:
            return _parse_details(entry.payload, self._currency, entry.retrieved_at)
        except ValueError as error:
            raise DataSourceUnavailable(f"Malformed details for {asset_id}: {error}") from error

    def get_quotes(self, asset_ids: list[str], universe_size: int = 100) -> dict[str, PriceQuote]:
        """
        Fetch quotes for asset ids.

        Prices come from the ranked listing first; ids outside it fall back to
        a detail fetch each. Ids whose quote cannot be fetched are omitted from
        the result.
        """
        if not asset_ids:
            return {}

        result: dict[str, PriceQuote] = {}
        try:
            for market in self.get_top_assets(universe_size):
                if market.asset.id in asset_ids:
                    result[market.asset.id] = market.quote
        except DataSourceUnavailable as error:
            logger.warning("Market listing unavailable, trying per-asset details: %s", error.message)

        for asset_id in asset_ids:
            if asset_id in result:
                continue
            try:
                result[asset_id] = self.get_asset_details(asset_id).quote
            except DataSourceUnavailable as error:
                logger.warning("No live quote for %s: %s", asset_id, error.message)
        return result
