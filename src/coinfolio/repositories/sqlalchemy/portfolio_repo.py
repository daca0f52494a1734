"""SQLAlchemy implementation of PortfolioRepository."""

import json
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from coinfolio.core.exceptions import PersistenceFailure
from coinfolio.core.timezone import now_utc, parse_datetime_utc, to_utc
from coinfolio.domain.models import PortfolioRecord, Position
from coinfolio.repositories.sqlalchemy.orm_models import PortfolioDocumentORM

logger = logging.getLogger(__name__)


class SqlAlchemyPortfolioRepository:
    """
    SQLAlchemy-backed owner document store.

    Each owner has one row whose `document` column holds the position array
    and last-updated timestamp as JSON. A save replaces the whole document.

    Every call opens its own session from `session_factory`, so one
    repository can be shared by concurrent threads.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self, owner_id: str) -> Optional[PortfolioRecord]:
        """Read the record for an owner."""
        with self._session_factory() as db:
            try:
                orm_doc = db.get(PortfolioDocumentORM, owner_id)
            except SQLAlchemyError as error:
                db.rollback()
                logger.error("Failed to read portfolio for %s: %s", owner_id, error)
                raise PersistenceFailure(f"Could not read portfolio for {owner_id}") from error
            if orm_doc is None:
                return None
            document = orm_doc.document
        try:
            return self._to_domain(owner_id, json.loads(document))
        except (ValueError, KeyError, TypeError, InvalidOperation) as error:
            logger.error("Corrupt portfolio document for %s: %s", owner_id, error)
            raise PersistenceFailure(f"Stored portfolio for {owner_id} is unreadable") from error

    def save(self, record: PortfolioRecord) -> PortfolioRecord:
        """Write the full record for an owner (insert or replace), stamped with the write time."""
        updated_at = now_utc()
        document = json.dumps(self._to_document(record, updated_at))
        with self._session_factory() as db:
            try:
                orm_doc = db.get(PortfolioDocumentORM, record.owner_id)
                if orm_doc:
                    orm_doc.document = document
                    orm_doc.updated_at = updated_at
                else:
                    db.add(
                        PortfolioDocumentORM(
                            owner_id=record.owner_id,
                            document=document,
                            updated_at=updated_at,
                        )
                    )
                db.commit()
            except SQLAlchemyError as error:
                db.rollback()
                logger.error("Failed to write portfolio for %s: %s", record.owner_id, error)
                raise PersistenceFailure(f"Could not save portfolio for {record.owner_id}") from error

        return PortfolioRecord(
            owner_id=record.owner_id,
            positions=list(record.positions),
            updated_at=updated_at,
        )

    @staticmethod
    def _to_document(record: PortfolioRecord, updated_at: datetime) -> dict[str, Any]:
        """Serialize record to a JSON-safe dict (Decimals as strings)."""
        return {
            "owner_id": record.owner_id,
            "updated_at": to_utc(updated_at).isoformat(),
            "positions": [
                {
                    "asset_id": p.asset_id,
                    "symbol": p.symbol,
                    "name": p.name,
                    "quantity": str(p.quantity),
                    "average_cost": str(p.average_cost),
                    "last_purchase_at": to_utc(p.last_purchase_at).isoformat(),
                }
                for p in record.positions
            ],
        }

    @staticmethod
    def _to_domain(owner_id: str, data: dict[str, Any]) -> PortfolioRecord:
        """Convert a stored document to the domain model."""
        positions = [
            Position(
                asset_id=item["asset_id"],
                symbol=item["symbol"],
                name=item["name"],
                quantity=Decimal(item["quantity"]),
                average_cost=Decimal(item["average_cost"]),
                last_purchase_at=parse_datetime_utc(item["last_purchase_at"]),
            )
            for item in data.get("positions", [])
        ]
        updated_at = data.get("updated_at")
        return PortfolioRecord(
            owner_id=owner_id,
            positions=positions,
            updated_at=parse_datetime_utc(updated_at) if updated_at else None,
        )
