"""Per-day memoization cache for engine queries."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable
from datetime import UTC, date, datetime, timedelta
from typing import Any, TypeVar

from veya.schemas.timing import GeoCoordinate

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class TimingCache:
    """LRU cache cleared wholesale when the civil date rolls over.

    Keys combine the query type, the instant rounded down to the minute, and
    the location rounded to 0.01 degrees. Values are immutable engine results.
    """

    def __init__(
        self,
        max_entries: int = 512,
        utc_offset: timedelta = timedelta(0),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.utc_offset = utc_offset
        self._clock = clock or (lambda: datetime.now(UTC))
        self._entries: OrderedDict[tuple, Any] = OrderedDict()
        self._lock = threading.RLock()
        self._civil_date: date | None = None
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(
        query: str,
        instant: datetime | None = None,
        location: GeoCoordinate | None = None,
        *extra: Hashable,
    ) -> tuple:
        minute = instant.replace(second=0, microsecond=0) if instant is not None else None
        place = (round(location.latitude, 2), round(location.longitude, 2)) if location is not None else None
        return (query, minute, place, *extra)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _roll_over(self) -> None:
        today = (self._clock() + self.utc_offset).date()
        if self._civil_date != today:
            if self._entries:
                logger.debug("Civil date now %s, dropping %d cached results", today, len(self._entries))
            self._entries.clear()
            self._civil_date = today

    def get(self, key: tuple, default: Any = None) -> Any:
        with self._lock:
            self._roll_over()
            value = self._entries.get(key, _MISSING)
            if value is _MISSING:
                self.misses += 1
                return default
            self._entries.move_to_end(key)
            self.hits += 1
            return value

    def put(self, key: tuple, value: Any) -> None:
        with self._lock:
            self._roll_over()
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def get_or_compute(self, key: tuple, compute: Callable[[], T]) -> T:
        """Return the cached value for ``key``, computing and storing it on a miss.

        The computation runs outside the lock; concurrent misses may compute twice.
        """
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            return cached
        value = compute()
        self.put(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
