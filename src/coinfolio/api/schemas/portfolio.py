"""Pydantic schemas for portfolio endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from coinfolio.core.numbers import round2
from coinfolio.domain.models import Position
from coinfolio.domain.views import PortfolioValuation, PositionValuation


def _float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def _percent(value: Optional[Decimal]) -> Optional[float]:
    return float(round2(value)) if value is not None else None


class PurchaseRequest(BaseModel):
    """Request schema for recording a purchase.

    Quantity and price bounds are enforced by the ledger, which answers 400
    INVALID_PURCHASE for non-positive values.
    """

    asset: str = Field(..., min_length=1, description="Asset id or ticker, any case (e.g. 'btc')")
    quantity: Decimal
    unit_price: Decimal
    occurred_at: Optional[datetime] = None


class PositionResponse(BaseModel):
    """A stored position after a merge."""

    asset_id: str
    symbol: str
    name: str
    quantity: float
    average_cost: float
    last_purchase_at: datetime

    @classmethod
    def from_domain(cls, position: Position) -> "PositionResponse":
        return cls(
            asset_id=position.asset_id,
            symbol=position.symbol,
            name=position.name,
            quantity=float(position.quantity),
            average_cost=float(position.average_cost),
            last_purchase_at=position.last_purchase_at,
        )


class PositionValuationResponse(BaseModel):
    """A position with live valuation fields (null when no live price)."""

    asset_id: str
    symbol: str
    name: str
    quantity: float
    average_cost: float
    invested_value: float
    last_purchase_at: Optional[datetime] = None
    current_price: Optional[float] = None
    price_change_24h: Optional[float] = None
    current_value: Optional[float] = None
    profit_loss: Optional[float] = None
    profit_loss_percent: Optional[float] = None

    @classmethod
    def from_domain(cls, item: PositionValuation) -> "PositionValuationResponse":
        return cls(
            asset_id=item.asset_id,
            symbol=item.symbol,
            name=item.name,
            quantity=float(item.quantity),
            average_cost=float(item.average_cost),
            invested_value=float(item.invested_value),
            last_purchase_at=item.last_purchase_at,
            current_price=_float(item.current_price),
            price_change_24h=_float(item.price_change_24h),
            current_value=_float(item.current_value),
            profit_loss=_float(item.profit_loss),
            profit_loss_percent=_percent(item.profit_loss_percent),
        )


class PortfolioResponse(BaseModel):
    """Valuation snapshot of an owner's portfolio."""

    owner_id: str
    positions: list[PositionValuationResponse]
    total_invested: float
    total_current_value: float
    total_profit_loss: float
    total_profit_loss_percent: Optional[float] = None
    total_cost_basis: float
    complete: bool
    last_updated: Optional[datetime] = None

    @classmethod
    def from_domain(cls, valuation: PortfolioValuation) -> "PortfolioResponse":
        return cls(
            owner_id=valuation.owner_id,
            positions=[PositionValuationResponse.from_domain(p) for p in valuation.positions],
            total_invested=float(valuation.total_invested),
            total_current_value=float(valuation.total_current_value),
            total_profit_loss=float(valuation.total_profit_loss),
            total_profit_loss_percent=_percent(valuation.total_profit_loss_percent),
            total_cost_basis=float(valuation.total_cost_basis),
            complete=valuation.is_complete,
            last_updated=valuation.last_updated,
        )
