"""NASA NeoWs client for near-Earth object close approaches.

Like APOD it uses the NASA key and serves only authentic data: without a key
every operation fails with CONFIGURATION_MISSING before any network access.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from cosmofy.errors import CosmofyError, ErrorCode
from cosmofy.models.asteroid import Asteroid, UpstreamNeoFeed
from cosmofy.services.common import parse_upstream, require_api_key

if TYPE_CHECKING:
    from cosmofy.config import NasaSettings
    from cosmofy.protocols import CacheProtocol, FetcherProtocol

log = structlog.get_logger()

_UPSTREAM = "NASA NeoWs API"


class AsteroidService:
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
        self._feed_url = f"{settings.base_url.rstrip('/')}/neo/rest/v1/feed"

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def get_feed(self, start: date, end: date) -> list[Asteroid]:
        """Objects approaching between ``start`` and ``end`` inclusive.

        Sorted by approach date, then name. Objects without approach data
        are dropped.
        """
        api_key = require_api_key(
            self._api_key,
            message="Please configure NASA_API_KEY environment variable to access live NASA "
            "near-Earth object data",
            title="NASA API key required for asteroid data",
        )
        if start > end:
            raise CosmofyError(
                ErrorCode.INVALID_INPUT,
                f"start date {start} is after end date {end}",
            )
        span = (end - start).days
        if span > self._settings.asteroid_window_days:
            raise CosmofyError(
                ErrorCode.INVALID_INPUT,
                f"feed window is {span} days; at most "
                f"{self._settings.asteroid_window_days} are allowed",
            )

        cache_key = f"neo-feed-{start.isoformat()}-{end.isoformat()}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            log.info("cache_hit", upstream="neo", key=cache_key)
            return cached

        log.info("cache_miss_fetching", upstream="neo", key=cache_key)
        payload = await self._fetcher.get_json(
            self._feed_url,
            {"start_date": start.isoformat(), "end_date": end.isoformat(), "api_key": api_key},
        )
        feed = parse_upstream(UpstreamNeoFeed, payload, upstream=_UPSTREAM)

        asteroids = []
        for neos in feed.near_earth_objects.values():
            for neo in neos:
                asteroid = Asteroid.from_upstream(neo)
                if asteroid is not None:
                    asteroids.append(asteroid)
        asteroids.sort(key=lambda a: (a.close_approach_date, a.name))

        log.info(
            "neo_feed_normalized",
            element_count=feed.element_count,
            asteroid_count=len(asteroids),
        )
        self._cache.set(cache_key, asteroids)
        return asteroids

    async def get_upcoming(self, limit: int = 10, today: date | None = None) -> list[Asteroid]:
        """The next ``limit`` close approaches from today (UTC) onward."""
        if limit < 1:
            raise CosmofyError(ErrorCode.INVALID_INPUT, f"limit must be at least 1, got {limit}")
        start = today or datetime.now(UTC).date()
        end = start + timedelta(days=self._settings.asteroid_window_days)
        asteroids = await self.get_feed(start, end)
        return [a for a in asteroids if a.close_approach_date >= start][:limit]
