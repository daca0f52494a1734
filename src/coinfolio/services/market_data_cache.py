"""Time-windowed cache in front of the market data provider."""

import logging
import time
from threading import Lock
from typing import Any, Callable, Optional

from coinfolio.core.exceptions import DataSourceUnavailable
from coinfolio.core.timezone import now_utc
from coinfolio.domain.models import CacheEntry
from coinfolio.providers.market_data_provider import MarketDataProvider, MarketDataRequest

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 60

PayloadCheck = Callable[[Any], bool]


class MarketDataCache:
    """
    Memoizes provider payloads keyed by request signature.

    One instance is built at process start and shared by every request. An
    entry is served while younger than the TTL; otherwise the provider is
    called once and the entry replaced whole. A failed call leaves the old
    entry in place and raises DataSourceUnavailable.

    Concurrent misses on the same key may each call the provider. The lock
    only guards the mapping and is never held across the external call.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._provider = provider
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def fetch(self, request: MarketDataRequest, validate: Optional[PayloadCheck] = None) -> Any:
        """Return the payload for request, calling the provider only on a miss or stale entry."""
        return self.fetch_entry(request, validate).payload

    def fetch_entry(
        self,
        request: MarketDataRequest,
        validate: Optional[PayloadCheck] = None,
    ) -> CacheEntry:
        """
        Like fetch, but return the whole entry (payload plus fetch timestamps).

        `validate` rejects a malformed payload before it is stored, so a bad
        response never replaces a good entry.
        """
        key = request.key
        entry = self._get_fresh(key)
        if entry is not None:
            logger.debug("Cache hit for %s", key)
            return entry

        logger.debug("Cache miss for %s", key)
        try:
            payload = self._provider.fetch(request)
        except DataSourceUnavailable:
            raise
        except Exception as error:
            # Any provider error counts as a data source failure
            logger.exception("Provider raised unexpectedly for %s", key)
            raise DataSourceUnavailable(f"Price source failed: {request.path}") from error

        if payload is None:
            raise DataSourceUnavailable(f"Price source returned an empty body: {request.path}")
        if validate is not None and not validate(payload):
            logger.warning("Discarding malformed payload for %s", key)
            raise DataSourceUnavailable(f"Malformed payload from price source: {request.path}")

        entry = CacheEntry(
            key=key,
            payload=payload,
            fetched_at=self._clock(),
            retrieved_at=now_utc(),
        )
        with self._lock:
            self._entries[key] = entry
        return entry

    def peek(self, request: MarketDataRequest) -> Optional[CacheEntry]:
        """Return the stored entry for request (fresh or stale) without fetching."""
        with self._lock:
            return self._entries.get(request.key)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def _get_fresh(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self._clock(), self._ttl):
            return None
        return entry
