"""Portfolio API: record purchases and value holdings at live prices."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from coinfolio.api.deps import get_portfolio_ledger
from coinfolio.api.schemas import PortfolioResponse, PositionResponse, PurchaseRequest
from coinfolio.domain.models import PurchaseEvent
from coinfolio.services import PortfolioLedger

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.post("/{owner_id}/purchases", response_model=PositionResponse, status_code=201)
def record_purchase(
    owner_id: str,
    data: PurchaseRequest,
    ledger: PortfolioLedger = Depends(get_portfolio_ledger),
):
    """
    Merge a purchase into the owner's portfolio.

    Repeat purchases of the same asset fold into one position at the
    quantity-weighted average cost. Returns the resulting position.
    """
    position = ledger.merge(
        owner_id,
        PurchaseEvent(
            asset_id=data.asset,
            quantity=data.quantity,
            unit_price=data.unit_price,
            occurred_at=data.occurred_at,
        ),
    )
    return PositionResponse.from_domain(position)


@router.get("/{owner_id}", response_model=PortfolioResponse)
def get_portfolio(
    owner_id: str,
    ledger: PortfolioLedger = Depends(get_portfolio_ledger),
):
    """
    Value the owner's positions at live prices.

    Positions without a live quote are listed with null price fields and left
    out of the totals; `complete` is false in that case.
    """
    valuation = ledger.valuate(owner_id)
    if valuation is None:
        return JSONResponse(
            status_code=404,
            content={"error": "EMPTY_PORTFOLIO", "message": f"No positions for {owner_id}"},
        )
    return PortfolioResponse.from_domain(valuation)
