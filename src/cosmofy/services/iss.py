"""open-notify client for ISS position, visible passes and crew.

Positions are cached briefly (the station moves ~460 km per minute); crew
rosters and pass predictions change slowly and share a longer-lived cache.
This service only reports live data. Falling back to synthesized values is
a per-endpoint decision made in cosmofy.endpoints.iss.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from cosmofy.errors import CosmofyError, ErrorCode
from cosmofy.models.iss import (
    CrewMember,
    IssPass,
    IssPosition,
    UpstreamAstros,
    UpstreamIssNow,
    UpstreamIssPasses,
)
from cosmofy.services.common import parse_upstream

if TYPE_CHECKING:
    from cosmofy.config import IssSettings
    from cosmofy.protocols import CacheProtocol, FetcherProtocol

log = structlog.get_logger()

_UPSTREAM = "open-notify"
_POSITION_KEY = "iss-now"
_CREW_KEY = "iss-crew"


class IssService:
    def __init__(
        self,
        fetcher: FetcherProtocol,
        position_cache: CacheProtocol,
        reference_cache: CacheProtocol,
        settings: IssSettings,
    ) -> None:
        self._fetcher = fetcher
        self._position_cache = position_cache
        self._reference_cache = reference_cache
        self._settings = settings

    @property
    def live_configured(self) -> bool:
        return bool(self._settings.position_url)

    async def get_live_position(self) -> IssPosition:
        if not self.live_configured:
            raise CosmofyError(
                ErrorCode.SERVICE_DISABLED,
                "No live ISS position upstream is configured",
            )

        cached = self._position_cache.get(_POSITION_KEY)
        if cached is not None:
            log.info("cache_hit", upstream="iss", key=_POSITION_KEY)
            return cached

        log.info("cache_miss_fetching", upstream="iss", key=_POSITION_KEY)
        payload = await self._fetcher.get_json(self._settings.position_url)
        position = IssPosition.from_upstream(
            parse_upstream(UpstreamIssNow, payload, upstream=_UPSTREAM)
        )
        self._position_cache.set(_POSITION_KEY, position)
        return position

    async def get_passes(self, latitude: float, longitude: float, count: int = 5) -> list[IssPass]:
        if not self._settings.passes_url:
            raise CosmofyError(
                ErrorCode.SERVICE_DISABLED,
                "No ISS pass prediction upstream is configured",
            )

        cache_key = f"iss-passes-{latitude:.4f}-{longitude:.4f}-{count}"
        cached = self._reference_cache.get(cache_key)
        if cached is not None:
            log.info("cache_hit", upstream="iss", key=cache_key)
            return cached

        log.info("cache_miss_fetching", upstream="iss", key=cache_key)
        payload = await self._fetcher.get_json(
            self._settings.passes_url,
            {"lat": latitude, "lon": longitude, "n": count},
        )
        upstream = parse_upstream(UpstreamIssPasses, payload, upstream=_UPSTREAM)
        passes = [
            IssPass(
                latitude=latitude,
                longitude=longitude,
                risetime=datetime.fromtimestamp(window.risetime, tz=UTC),
                duration=window.duration,
            )
            for window in upstream.response
        ]
        self._reference_cache.set(cache_key, passes)
        return passes

    async def get_crew(self) -> list[CrewMember]:
        if not self._settings.crew_url:
            raise CosmofyError(
                ErrorCode.SERVICE_DISABLED,
                "No ISS crew upstream is configured",
            )

        cached = self._reference_cache.get(_CREW_KEY)
        if cached is not None:
            log.info("cache_hit", upstream="iss", key=_CREW_KEY)
            return cached

        log.info("cache_miss_fetching", upstream="iss", key=_CREW_KEY)
        payload = await self._fetcher.get_json(self._settings.crew_url)
        astros = parse_upstream(UpstreamAstros, payload, upstream=_UPSTREAM)
        crew = [
            CrewMember(name=person.name, craft=person.craft)
            for person in astros.people
            if person.craft == "ISS"
        ]
        self._reference_cache.set(_CREW_KEY, crew)
        return crew
