"""Portfolio ledger: weighted-average purchase merging and live valuation."""

import logging
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from threading import Lock
from typing import Callable, Iterator, Optional

from coinfolio.core.exceptions import InvalidPurchase, UnknownAsset
from coinfolio.core.numbers import to_decimal
from coinfolio.core.timezone import now_utc, to_utc
from coinfolio.domain.models import Asset, PortfolioRecord, Position, PriceQuote, PurchaseEvent
from coinfolio.domain.views import PortfolioValuation, PositionValuation
from coinfolio.repositories.protocols import PortfolioRepository
from coinfolio.services.asset_resolver import AssetResolver

logger = logging.getLogger(__name__)


class OwnerLockRegistry:
    """
    One lock per owner id, shared process-wide.

    Held only across a merge's read-modify-write so concurrent purchases for
    the same owner are applied one after another instead of overwriting each
    other. Different owners never contend. A lock is dropped once no thread
    holds or waits on it.
    """

    def __init__(self) -> None:
        # owner_id -> [lock, number of threads holding or waiting]
        self._entries: dict[str, list] = {}
        self._guard = Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def hold(self, owner_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.setdefault(owner_id, [Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[owner_id]


def _merge_position(
    existing: Position,
    asset: Asset,
    quantity: Decimal,
    unit_price: Decimal,
    occurred_at: datetime,
) -> Position:
    """Quantity-weighted average of the existing holding and the new purchase."""
    total_quantity = existing.quantity + quantity
    total_cost = existing.quantity * existing.average_cost + quantity * unit_price
    return Position(
        asset_id=asset.id,
        symbol=asset.symbol.upper(),
        name=asset.name,
        quantity=total_quantity,
        average_cost=total_cost / total_quantity,
        last_purchase_at=max(existing.last_purchase_at, occurred_at),
    )


def _value_position(position: Position, quote: Optional[PriceQuote]) -> PositionValuation:
    invested = position.invested_value
    valuation = PositionValuation(
        asset_id=position.asset_id,
        symbol=position.symbol,
        name=position.name,
        quantity=position.quantity,
        average_cost=position.average_cost,
        invested_value=invested,
        last_purchase_at=position.last_purchase_at,
    )
    if quote is None:
        return valuation

    current_value = position.quantity * quote.current_price
    profit_loss = current_value - invested
    valuation.current_price = quote.current_price
    valuation.price_change_24h = quote.price_change_24h
    valuation.current_value = current_value
    valuation.profit_loss = profit_loss
    valuation.profit_loss_percent = profit_loss / invested * 100
    return valuation


class PortfolioLedger:
    """
    Per-owner holdings built from purchase events.

    Each owner's positions live in one document that is read, merged and
    written back whole. Repeated purchases of an asset collapse into a single
    position whose average cost is weighted by quantity. Valuation joins the
    stored positions with live quotes and degrades per position when a quote
    is unavailable.
    """

    def __init__(
        self,
        resolver: AssetResolver,
        portfolio_repo: PortfolioRepository,
        owner_locks: Optional[OwnerLockRegistry] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._resolver = resolver
        self._portfolio_repo = portfolio_repo
        self._owner_locks = owner_locks or OwnerLockRegistry()
        self._clock = clock

    def merge(self, owner_id: str, event: PurchaseEvent) -> Position:
        """
        Merge a purchase into the owner's portfolio and return the resulting position.

        Raises InvalidPurchase for a non-positive quantity or price and
        UnknownAsset when the identifier does not resolve. Both are raised
        before anything is written.
        """
        quantity, unit_price = self._validate(event)

        asset = self._resolver.resolve(event.asset_id)
        if asset is None:
            logger.info("Rejected purchase of unknown asset %r for %s", event.asset_id, owner_id)
            raise UnknownAsset(event.asset_id)

        occurred_at = to_utc(event.occurred_at) if event.occurred_at else self._clock()

        with self._owner_locks.hold(owner_id):
            record = self._portfolio_repo.get(owner_id) or PortfolioRecord(owner_id=owner_id)
            existing = record.find(asset.id)

            if existing is not None:
                merged = _merge_position(existing, asset, quantity, unit_price, occurred_at)
                positions = [merged if p.asset_id == asset.id else p for p in record.positions]
                logger.debug("Updated existing position for %s (%s)", asset.name, owner_id)
            else:
                merged = Position(
                    asset_id=asset.id,
                    symbol=asset.symbol.upper(),
                    name=asset.name,
                    quantity=quantity,
                    average_cost=unit_price,
                    last_purchase_at=occurred_at,
                )
                positions = record.positions + [merged]
                logger.debug("Added new position for %s (%s)", asset.name, owner_id)

            self._portfolio_repo.save(
                PortfolioRecord(
                    owner_id=owner_id,
                    positions=[p for p in positions if p.quantity > 0],
                )
            )

        return merged

    def valuate(self, owner_id: str) -> Optional[PortfolioValuation]:
        """
        Value the owner's positions at live prices.

        Returns None when the owner has no positions. A position whose quote
        cannot be fetched is still listed, without price fields, and is left
        out of the totals.
        """
        positions = self.get_positions(owner_id)
        if not positions:
            return None

        quotes = self._resolver.live_quotes([p.asset_id for p in positions])
        missing = [p.asset_id for p in positions if p.asset_id not in quotes]
        if missing:
            logger.warning("Valuing %s without live prices for: %s", owner_id, ", ".join(missing))

        valuation = PortfolioValuation(owner_id=owner_id)
        for position in positions:
            item = _value_position(position, quotes.get(position.asset_id))
            valuation.positions.append(item)
            valuation.total_cost_basis += item.invested_value
            if item.current_value is not None:
                valuation.total_invested += item.invested_value
                valuation.total_current_value += item.current_value

        valuation.total_profit_loss = valuation.total_current_value - valuation.total_invested
        if valuation.total_invested > 0:
            valuation.total_profit_loss_percent = (
                valuation.total_profit_loss / valuation.total_invested * 100
            )
        valuation.last_updated = self._clock()
        return valuation

    def get_positions(self, owner_id: str) -> list[Position]:
        """Stored positions for an owner, without pricing."""
        record = self._portfolio_repo.get(owner_id)
        return list(record.positions) if record else []

    def has_portfolio(self, owner_id: str) -> bool:
        """True when the owner holds at least one position."""
        return bool(self.get_positions(owner_id))

    @staticmethod
    def _validate(event: PurchaseEvent) -> tuple[Decimal, Decimal]:
        quantity = to_decimal(event.quantity)
        unit_price = to_decimal(event.unit_price)
        if quantity is None or quantity <= 0:
            raise InvalidPurchase(f"Quantity must be greater than zero, got {event.quantity}")
        if unit_price is None or unit_price <= 0:
            raise InvalidPurchase(f"Unit price must be greater than zero, got {event.unit_price}")
        return quantity, unit_price
