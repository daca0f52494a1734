"""Asset identity and market data records."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Asset:
    """
    Canonical identity of a tradable coin.

    `id` is the price source's lowercase slug ("bitcoin"); `symbol` is the
    ticker as the source reports it ("btc").
    """

    id: str
    symbol: str
    name: str


@dataclass(frozen=True)
class PriceQuote:
    """Point-in-time market read for one asset, in the quote currency."""

    asset_id: str
    current_price: Decimal
    as_of: datetime
    price_change_24h: Optional[Decimal] = None
    price_change_7d: Optional[Decimal] = None
    price_change_30d: Optional[Decimal] = None
    market_cap: Optional[Decimal] = None
    rank: Optional[int] = None
    high_24h: Optional[Decimal] = None
    low_24h: Optional[Decimal] = None


@dataclass(frozen=True)
class AssetMarket:
    """One row of the ranked market listing."""

    asset: Asset
    quote: PriceQuote


@dataclass(frozen=True)
class AssetDetails:
    """Full detail record for a single asset."""

    asset: Asset
    quote: PriceQuote
    total_volume: Optional[Decimal] = None
    description: str = ""

    @property
    def summary(self) -> str:
        """First sentence of the description."""
        first = self.description.strip().split(".")[0].strip()
        return f"{first}." if first else ""
