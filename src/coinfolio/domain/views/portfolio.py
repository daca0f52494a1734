"""View models for portfolio valuation outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class PositionValuation:
    """A stored position joined with its live quote (price fields None when unavailable)."""

    asset_id: str
    symbol: str
    name: str
    quantity: Decimal
    average_cost: Decimal
    invested_value: Decimal
    last_purchase_at: Optional[datetime] = None
    current_price: Optional[Decimal] = None
    price_change_24h: Optional[Decimal] = None
    current_value: Optional[Decimal] = None
    profit_loss: Optional[Decimal] = None
    profit_loss_percent: Optional[Decimal] = None

    @property
    def is_priced(self) -> bool:
        return self.current_price is not None


@dataclass
class PortfolioValuation:
    """
    Valuation snapshot for one owner.

    Totals cover priced positions only, so profit/loss compares like with like.
    `total_cost_basis` is the invested value of every position, priced or not.
    """

    owner_id: str
    positions: list[PositionValuation] = field(default_factory=list)
    total_invested: Decimal = field(default_factory=lambda: Decimal("0"))
    total_current_value: Decimal = field(default_factory=lambda: Decimal("0"))
    total_profit_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    total_cost_basis: Decimal = field(default_factory=lambda: Decimal("0"))
    total_profit_loss_percent: Optional[Decimal] = None
    last_updated: Optional[datetime] = None

    @property
    def is_complete(self) -> bool:
        """True when every position has a live price."""
        return all(p.is_priced for p in self.positions)
