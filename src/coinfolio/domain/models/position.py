"""Portfolio ledger domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class PurchaseEvent:
    """
    A single purchase to merge into an owner's portfolio.

    `asset_id` may be any resolvable identifier (slug or ticker, any case).
    """

    asset_id: str
    quantity: Decimal
    unit_price: Decimal
    occurred_at: Optional[datetime] = None


@dataclass
class Position:
    """
    One owner's holding in one asset.

    `average_cost` is the quantity-weighted mean of all contributing purchase
    prices. `symbol` and `name` are refreshed on every merge for display.
    """

    asset_id: str
    symbol: str
    name: str
    quantity: Decimal
    average_cost: Decimal
    last_purchase_at: datetime

    @property
    def invested_value(self) -> Decimal:
        return self.quantity * self.average_cost


@dataclass
class PortfolioRecord:
    """Persisted document: every position for one owner."""

    owner_id: str
    positions: list[Position] = field(default_factory=list)
    updated_at: Optional[datetime] = None

    def find(self, asset_id: str) -> Optional[Position]:
        """Return the position for asset_id, if held."""
        for position in self.positions:
            if position.asset_id == asset_id:
                return position
        return None
