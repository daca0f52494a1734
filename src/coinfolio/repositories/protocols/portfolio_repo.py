"""Portfolio repository protocol."""

from typing import Protocol, Optional

from coinfolio.domain.models import PortfolioRecord


class PortfolioRepository(Protocol):
    """
    Owner-scoped document store: one record per owner.

    Implementations raise PersistenceFailure when the store cannot be read or
    written.
    """

    def get(self, owner_id: str) -> Optional[PortfolioRecord]:
        """Read the full record for an owner; None if the owner has none."""
        ...

    def save(self, record: PortfolioRecord) -> PortfolioRecord:
        """Write the full record for an owner in a single write (last writer wins)."""
        ...
