"""Pydantic schemas for API request/response."""

from coinfolio.api.schemas.asset import (
    QuoteResponse,
    AssetMarketResponse,
    TopAssetsResponse,
    AssetDetailsResponse,
)
from coinfolio.api.schemas.portfolio import (
    PurchaseRequest,
    PositionResponse,
    PositionValuationResponse,
    PortfolioResponse,
)

__all__ = [
    "QuoteResponse",
    "AssetMarketResponse",
    "TopAssetsResponse",
    "AssetDetailsResponse",
    "PurchaseRequest",
    "PositionResponse",
    "PositionValuationResponse",
    "PortfolioResponse",
]
