"""Date-keyed cache around the order aggregator.

Entries are whole snapshots: every write replaces the stored value, so
concurrent recomputation for the same day can only waste work. Every key is
derived from the current generation token, so bulk invalidation is a single
write of a new token. Entries of older generations become unreachable and
expire with their TTL.
"""

import hashlib
import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Callable, NamedTuple

from django.core.cache.backends.base import BaseCache
from django.utils import timezone

from order_sheet.domain import CacheEntry, OrderRow
from order_sheet.domain.errors import CacheStoreError
from order_sheet.services.aggregator import OrderAggregator

logger = logging.getLogger(__name__)

DEFAULT_TTL = 3600
DEFAULT_KEY_PREFIX = "dos_orders_"


class CacheLookup(NamedTuple):
    rows: tuple[OrderRow, ...]
    was_cache_hit: bool


class OrderCache:
    """Memoizes aggregated rows per day for a fixed TTL."""

    def __init__(
        self,
        aggregator: OrderAggregator,
        store: BaseCache,
        ttl: int = DEFAULT_TTL,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._aggregator = aggregator
        self._store = store
        self._ttl = ttl
        self._key_prefix = key_prefix
        self._clock = clock

    @property
    def generation_key(self) -> str:
        return f"{self._key_prefix}generation"

    def cache_key(self, day: date) -> str:
        """Key of ``day`` in the current generation."""
        return self._key(day, self._generation())

    def get_or_compute(self, day: date, force_refresh: bool = False) -> CacheLookup:
        """Return rows for ``day`` and whether they came from the cache."""
        try:
            generation = self._generation()
            entry = None if force_refresh else self._read(day, generation)
        except CacheStoreError as exc:
            logger.warning("Cache read failed for %s, computing directly: %s", day, exc.message)
            generation = entry = None
        if entry is not None:
            logger.debug("Cache HIT for date: %s", day)
            return CacheLookup(rows=entry.rows, was_cache_hit=True)

        logger.debug("Cache MISS for date: %s (forced: %s)", day, force_refresh)
        result = self._aggregator.aggregate(day)
        if result.is_partial:
            logger.warning("Order sheet for %s is missing %d source(s)", day, len(result.skipped))

        entry = CacheEntry(date=day.isoformat(), rows=result.rows, created_at=self._clock())
        if generation is not None:
            # Written under the generation read before computing: a bulk
            # invalidation that lands meanwhile leaves this entry unreachable.
            try:
                self._write(self._key(day, generation), entry)
            except CacheStoreError as exc:
                logger.warning("Cache write failed for %s: %s", day, exc.message)
            else:
                logger.info("Cached %d orders for date: %s", len(entry.rows), day)
        return CacheLookup(rows=entry.rows, was_cache_hit=False)

    def invalidate(self, day: date | None = None) -> None:
        """Drop the entry for ``day``, or every entry this cache has written."""
        try:
            if day is not None:
                self._store.delete(self.cache_key(day))
                logger.debug("Invalidated order sheet cache for %s", day)
            else:
                self._store.set(self.generation_key, uuid.uuid4().hex, timeout=None)
                logger.debug("Invalidated order sheet cache for all dates")
        except Exception as exc:
            logger.warning("Cache invalidation failed: %s", exc)

    def _key(self, day: date, generation: str) -> str:
        digest = hashlib.sha256(f"{generation}:{day.isoformat()}".encode("utf-8")).hexdigest()
        return f"{self._key_prefix}{digest}"

    def _generation(self) -> str:
        try:
            generation = self._store.get(self.generation_key)
            if generation is None:
                self._store.add(self.generation_key, uuid.uuid4().hex, timeout=None)
                generation = self._store.get(self.generation_key)
        except Exception as exc:
            raise CacheStoreError(str(exc)) from exc
        if generation is None:
            raise CacheStoreError("Generation key could not be stored")
        return generation

    def _read(self, day: date, generation: str) -> CacheEntry | None:
        try:
            raw = self._store.get(self._key(day, generation))
        except Exception as exc:
            raise CacheStoreError(str(exc)) from exc
        if raw is None:
            return None

        try:
            entry = CacheEntry.from_dict(raw)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding unreadable cache entry for %s", day)
            return None
        if entry.date != day.isoformat():
            return None
        if self._clock() - entry.created_at >= timedelta(seconds=self._ttl):
            return None
        return entry

    def _write(self, key: str, entry: CacheEntry) -> None:
        try:
            self._store.set(key, entry.to_dict(), timeout=self._ttl)
        except Exception as exc:
            raise CacheStoreError(str(exc)) from exc
