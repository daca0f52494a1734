"""Pydantic schemas for asset and market data endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from coinfolio.core.numbers import format_large_number, format_price, format_price_change
from coinfolio.domain.models import AssetDetails, AssetMarket, PriceQuote


def _float(value) -> Optional[float]:
    return float(value) if value is not None else None


class QuoteResponse(BaseModel):
    """Live quote for one asset."""

    current_price: float
    price_change_24h: Optional[float] = None
    price_change_7d: Optional[float] = None
    price_change_30d: Optional[float] = None
    market_cap: Optional[float] = None
    rank: Optional[int] = None
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None
    as_of: datetime

    # Display strings, e.g. "$64,250.00", "↑ 1.85%", "$1.27T"
    price_display: str
    change_24h_display: str
    market_cap_display: str

    @classmethod
    def from_domain(cls, quote: PriceQuote) -> "QuoteResponse":
        return cls(
            current_price=float(quote.current_price),
            price_change_24h=_float(quote.price_change_24h),
            price_change_7d=_float(quote.price_change_7d),
            price_change_30d=_float(quote.price_change_30d),
            market_cap=_float(quote.market_cap),
            rank=quote.rank,
            high_24h=_float(quote.high_24h),
            low_24h=_float(quote.low_24h),
            as_of=quote.as_of,
            price_display=format_price(quote.current_price),
            change_24h_display=format_price_change(quote.price_change_24h),
            market_cap_display=format_large_number(quote.market_cap),
        )


class AssetMarketResponse(BaseModel):
    """An asset with its live quote."""

    id: str
    symbol: str
    name: str
    quote: QuoteResponse

    @classmethod
    def from_domain(cls, market: AssetMarket) -> "AssetMarketResponse":
        return cls(
            id=market.asset.id,
            symbol=market.asset.symbol.upper(),
            name=market.asset.name,
            quote=QuoteResponse.from_domain(market.quote),
        )


class TopAssetsResponse(BaseModel):
    """Ranked market listing."""

    currency: str
    assets: list[AssetMarketResponse]
    count: int


class AssetDetailsResponse(AssetMarketResponse):
    """Detail record: quote plus volume and description."""

    total_volume: Optional[float] = None
    total_volume_display: str = "unknown"
    description: str = ""
    summary: str = ""

    @classmethod
    def from_details(cls, details: AssetDetails) -> "AssetDetailsResponse":
        return cls(
            id=details.asset.id,
            symbol=details.asset.symbol.upper(),
            name=details.asset.name,
            quote=QuoteResponse.from_domain(details.quote),
            total_volume=_float(details.total_volume),
            total_volume_display=format_large_number(details.total_volume),
            description=details.description,
            summary=details.summary,
        )
