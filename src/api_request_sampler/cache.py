"""LRU + TTL cache for resolved class definitions.

Entries are keyed by type name. Recency is the insertion order of the
underlying OrderedDict: a hit moves the entry to the end, eviction pops
from the front. A capacity below 1 disables storing altogether.
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable

from pydantic import BaseModel

from api_request_sampler.parser.base import PropertyDescriptor

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100
DEFAULT_MAX_AGE_MINUTES = 30


class CacheEntry(BaseModel):
    """A resolved class definition and where it came from."""

    type_name: str
    properties: list[PropertyDescriptor] = []
    raw_definition: str | None = None
    source_file: str
    inserted_at: float
    errors: list[str] | None = None  # parse failures, so they are not retried


class ClassDefinitionCache:
    """Bounded class definition cache evicting by recency and by age."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        max_age_minutes: float = DEFAULT_MAX_AGE_MINUTES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.capacity = capacity
        self.max_age = max_age_minutes * 60
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()

    def get(self, type_name: str) -> CacheEntry | None:
        """Return a copy of the entry, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(type_name)
            if entry is None:
                logger.debug("Cache MISS: %s", type_name)
                return None

            age = self._clock() - entry.inserted_at
            if age > self.max_age:
                logger.debug("Cache EXPIRED: %s (age: %ds)", type_name, round(age))
                del self._entries[type_name]
                return None

            logger.debug("Cache HIT: %s (age: %ds)", type_name, round(age))
            self._entries.move_to_end(type_name)
            return entry.model_copy(deep=True)

    def put(
        self,
        type_name: str,
        properties: list[PropertyDescriptor],
        raw_definition: str | None,
        source_file: str,
        errors: list[str] | None = None,
    ) -> None:
        with self._lock:
            # A re-put replaces the entry; drop it first so it lands at the MRU end.
            self._entries.pop(type_name, None)
            if self.capacity < 1:
                logger.debug("Cache disabled, not storing: %s", type_name)
                return
            while len(self._entries) >= self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache FULL, evicting: %s", evicted)

            self._entries[type_name] = CacheEntry(
                type_name=type_name,
                properties=list(properties),
                raw_definition=raw_definition,
                source_file=source_file,
                inserted_at=self._clock(),
                errors=list(errors) if errors is not None else None,
            )
            logger.debug(
                "Cached %s from %s%s (size: %d/%d)",
                type_name,
                source_file,
                " with errors" if errors else "",
                len(self._entries),
                self.capacity,
            )

    def cached_errors(self, type_name: str) -> list[str] | None:
        """Parse errors recorded for a type, if a live entry has any."""
        entry = self.get(type_name)
        if entry is None or not entry.errors:
            return None
        return entry.errors

    def invalidate_by_source_file(self, file_path: str) -> int:
        """Drop every entry parsed from ``file_path``. Returns how many went."""
        with self._lock:
            stale = [name for name, entry in self._entries.items() if entry.source_file == file_path]
            for name in stale:
                del self._entries[name]
        if stale:
            logger.debug("Invalidated %d entries from %s", len(stale), file_path)
        return len(stale)

    def invalidate(self, type_name: str) -> None:
        with self._lock:
            if self._entries.pop(type_name, None) is not None:
                logger.debug("Invalidated: %s", type_name)

    def clear(self) -> None:
        with self._lock:
            logger.debug("Clearing cache (%d entries)", len(self._entries))
            self._entries.clear()

    def stats(self) -> dict:
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self.capacity,
                "keys": list(self._entries.keys()),
            }
