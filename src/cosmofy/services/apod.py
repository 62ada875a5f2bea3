"""NASA Astronomy Picture of the Day client.

Serves only authentic NASA data: without an API key every operation fails
with CONFIGURATION_MISSING before any network access, rather than degrading
to the shared demo key or to placeholder images.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import TypeAdapter

from cosmofy.errors import CosmofyError, ErrorCode
from cosmofy.models.apod import ApodImage, UpstreamApod
from cosmofy.services.common import parse_upstream_list, require_api_key

if TYPE_CHECKING:
    from cosmofy.config import NasaSettings
    from cosmofy.protocols import CacheProtocol, FetcherProtocol

log = structlog.get_logger()

_UPSTREAM = "NASA APOD API"
_APOD_LIST = TypeAdapter(list[UpstreamApod])


class ApodService:
    def __init__(
        self,
        fetcher: FetcherProtocol,
        cache: CacheProtocol,
        settings: NasaSettings,
        api_key: str | None,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._settings = settings
        self._api_key = api_key
        self._apod_url = f"{settings.base_url.rstrip('/')}/planetary/apod"

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def get_apod(self, day: date | None = None) -> ApodImage:
        """Return the picture for ``day`` (NASA's current day when omitted)."""
        params: dict[str, str] = {}
        if day is not None:
            params["date"] = day.isoformat()
        images = await self._query(f"apod-{params.get('date', 'today')}", params)
        if not images:
            raise CosmofyError(
                ErrorCode.UPSTREAM_MALFORMED,
                f"{_UPSTREAM} returned no picture",
            )
        return images[0]

    async def get_apod_range(self, start: date, end: date) -> list[ApodImage]:
        if start > end:
            raise CosmofyError(
                ErrorCode.INVALID_INPUT,
                f"start date {start} is after end date {end}",
            )
        return await self._query(
            f"apod-range-{start.isoformat()}-{end.isoformat()}",
            {"start_date": start.isoformat(), "end_date": end.isoformat()},
        )

    async def get_recent(
        self, days: int | None = None, today: date | None = None
    ) -> list[ApodImage]:
        """Gallery of the last ``days`` pictures, today (UTC) included."""
        days = self._settings.gallery_days if days is None else days
        if days < 1:
            raise CosmofyError(ErrorCode.INVALID_INPUT, f"days must be at least 1, got {days}")
        end = today or datetime.now(UTC).date()
        return await self.get_apod_range(end - timedelta(days=days - 1), end)

    async def _query(self, cache_key: str, params: dict[str, str]) -> list[ApodImage]:
        api_key = require_api_key(
            self._api_key,
            message="Please configure NASA_API_KEY environment variable to access live NASA "
            "astronomy images",
            title="NASA API key required for authentic APOD data",
        )

        cached = self._cache.get(cache_key)
        if cached is not None:
            log.info("cache_hit", upstream="apod", key=cache_key)
            return cached

        log.info("cache_miss_fetching", upstream="apod", key=cache_key)
        payload: Any = await self._fetcher.get_json(
            self._apod_url,
            {**params, "api_key": api_key},
        )
        # Single-day queries answer with an object, ranges with a list.
        items = payload if isinstance(payload, list) else [payload]
        images = [
            ApodImage.from_upstream(item, index)
            for index, item in enumerate(parse_upstream_list(_APOD_LIST, items, upstream=_UPSTREAM))
        ]
        self._cache.set(cache_key, images)
        return images
