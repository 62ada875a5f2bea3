"""In-memory TTL cache for normalized upstream responses.

One ``TTLCache`` is constructed per service at startup and injected into it;
there is no module-level cache. Entries are never evicted: a ``get`` after
the TTL is simply a miss, and the caller re-fetches and overwrites the entry
with ``set``. Keys accumulate for the lifetime of the process.

All access happens on the single asyncio event loop, so plain dict reads and
writes need no locking. Concurrent writers for one key resolve last-write-wins.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog

from cosmofy.models.cache import CacheEntry

if TYPE_CHECKING:
    from collections.abc import Callable

log = structlog.get_logger()


class TTLCache:
    """Fixed-TTL key/value cache implementing CacheProtocol."""

    def __init__(
        self,
        ttl_seconds: float,
        *,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._name = name
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` when absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            log.debug("cache_miss", cache=self._name, key=key)
            return None

        age = self._clock() - entry.stored_at
        if age > self._ttl_seconds:
            log.debug("cache_expired", cache=self._name, key=key, age_seconds=round(age, 3))
            return None

        log.debug("cache_hit", cache=self._name, key=key, age_seconds=round(age, 3))
        return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, stamped with the current time."""
        self._entries[key] = CacheEntry(key=key, value=value, stored_at=self._clock())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
