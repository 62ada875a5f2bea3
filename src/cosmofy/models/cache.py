from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class CacheEntry(BaseModel):
    """A normalized value stored by TTLCache.

    ``value`` is kept by reference so a hit returns the exact object that was
    stored. ``stored_at`` is read from the cache's clock (monotonic seconds).
    """

    model_config = ConfigDict(frozen=True)

    key: str
    value: Any
    stored_at: float
