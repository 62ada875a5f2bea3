"""Protocol interfaces for swappable components.

Services and AppState reference these protocols, not the concrete
implementations. This allows:
- Tests to use lightweight in-memory implementations
- Future backends (e.g. a shared Redis cache) to be swapped without changing
  service code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping


class CacheProtocol(Protocol):
    """Interface for the per-service response cache."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


class FetcherProtocol(Protocol):
    """Interface for the upstream JSON fetcher."""

    async def get_json(
        self,
        url: str,
        params: Mapping[str, str | int | float] | None = None,
        *,
        max_retries: int | None = None,
    ) -> Any: ...
