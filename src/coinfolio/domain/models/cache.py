"""Market data cache entry."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """
    One memoized response from the price source.

    Entries are replaced whole, never patched. `fetched_at` is on the cache's
    monotonic clock and drives freshness; `retrieved_at` is the wall-clock
    time of the same fetch, reported as the quote timestamp.
    """

    key: str
    payload: Any
    fetched_at: float
    retrieved_at: datetime

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        """Usable iff younger than the TTL."""
        return now - self.fetched_at < ttl_seconds
