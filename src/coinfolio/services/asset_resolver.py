"""Resolve loose asset identifiers to canonical assets."""

import logging
from typing import Optional

from coinfolio.domain.models import Asset, AssetMarket, PriceQuote
from coinfolio.services.market_data_service import MarketDataService

logger = logging.getLogger(__name__)

DEFAULT_UNIVERSE_SIZE = 100


def normalize_identifier(identifier: Optional[str]) -> str:
    """Trim and lowercase; None -> ''."""
    return (identifier or "").strip().lower()


class AssetResolver:
    """
    Maps an id or ticker, in any case, to a canonical Asset.

    Only the `universe_size` largest assets by market cap are resolvable; there
    is no fallback search of the full universe and no fuzzy matching. The first
    exact match in rank order wins, so within one cache window the same
    identifier always resolves the same way.
    """

    def __init__(
        self,
        market_data_service: MarketDataService,
        universe_size: int = DEFAULT_UNIVERSE_SIZE,
    ):
        self._market_data = market_data_service
        self._universe_size = universe_size

    @property
    def universe_size(self) -> int:
        return self._universe_size

    def resolve(self, identifier: str) -> Optional[Asset]:
        """Return the canonical Asset, or None when not found.

        Raises DataSourceUnavailable if the ranked listing cannot be fetched.
        """
        market = self.resolve_market(identifier)
        return market.asset if market else None

    def resolve_market(self, identifier: str) -> Optional[AssetMarket]:
        """Return the matching listing row (asset plus live quote), or None."""
        normalized = normalize_identifier(identifier)
        if not normalized:
            return None

        for market in self._market_data.get_top_assets(self._universe_size):
            asset = market.asset
            if normalized == asset.id or normalized == asset.symbol.lower():
                return market

        logger.debug("Identifier %r not in top %d", normalized, self._universe_size)
        return None

    def live_quotes(self, asset_ids: list[str]) -> dict[str, PriceQuote]:
        """Live quotes for canonical ids; ids without a quote are omitted."""
        return self._market_data.get_quotes(asset_ids, universe_size=self._universe_size)
