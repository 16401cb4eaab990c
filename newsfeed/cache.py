"""Per-source TTL cache for fetched items."""

import time
from dataclasses import dataclass

from .config import CACHE_TTL_SECONDS
from .log import get_logger


@dataclass(frozen=True)
class CacheEntry:
    data: tuple
    fetched_at: float


class SourceCache:
    """Maps source key -> CacheEntry, with TTL staleness and forced refresh.

    Entries are immutable snapshots replaced by a single dict assignment, so
    concurrent refreshes of the same key need no lock: the last writer wins.
    A failed refresh leaves the previous entry in place and re-raises.
    """

    def __init__(self, ttl: float = CACHE_TTL_SECONDS, clock=time.time):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str, fetch_fn, force: bool = False) -> list:
        logger = get_logger("cache")
        entry = self._entries.get(key)
        if not force and entry is not None and self._is_fresh(entry):
            logger.debug("cache hit: %s (age %.0fs)", key, self._clock() - entry.fetched_at)
            return list(entry.data)

        logger.debug("cache %s: %s", "refresh" if force else "miss", key)
        data = tuple(fetch_fn())
        self._entries[key] = CacheEntry(data=data, fetched_at=self._clock())
        return list(data)

    def peek(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def is_fresh(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._is_fresh(entry)

    def invalidate(self, key: str | None = None):
        """Drop one entry, or all entries when key is None."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return (self._clock() - entry.fetched_at) < self.ttl
