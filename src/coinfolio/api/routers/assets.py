"""Asset lookup API: ranked listing, identifier resolution and details."""

from fastapi import APIRouter, Depends, Query

from coinfolio.api.deps import get_asset_resolver, get_market_data_service
from coinfolio.api.schemas import AssetDetailsResponse, AssetMarketResponse, TopAssetsResponse
from coinfolio.core.exceptions import UnknownAsset
from coinfolio.services import AssetResolver, MarketDataService
from coinfolio.services.market_data_service import MAX_LISTING_SIZE

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get("/top", response_model=TopAssetsResponse)
def get_top_assets(
    count: int = Query(10, ge=1, le=MAX_LISTING_SIZE),
    market_data: MarketDataService = Depends(get_market_data_service),
):
    """Largest assets by market cap, rank order."""
    assets = market_data.get_top_assets(count)
    return TopAssetsResponse(
        currency=market_data.quote_currency,
        assets=[AssetMarketResponse.from_domain(a) for a in assets],
        count=len(assets),
    )


@router.get("/{identifier}", response_model=AssetMarketResponse)
def get_asset(
    identifier: str,
    resolver: AssetResolver = Depends(get_asset_resolver),
):
    """Resolve an id or ticker (any case) and return it with its live quote."""
    market = resolver.resolve_market(identifier)
    if market is None:
        raise UnknownAsset(identifier)
    return AssetMarketResponse.from_domain(market)


@router.get("/{identifier}/details", response_model=AssetDetailsResponse)
def get_asset_details(
    identifier: str,
    resolver: AssetResolver = Depends(get_asset_resolver),
    market_data: MarketDataService = Depends(get_market_data_service),
):
    """Detail record with description; the identifier must resolve first."""
    asset = resolver.resolve(identifier)
    if asset is None:
        raise UnknownAsset(identifier)
    return AssetDetailsResponse.from_details(market_data.get_asset_details(asset.id))
