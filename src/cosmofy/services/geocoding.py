"""Nominatim reverse-geocoding client.

Nominatim's usage policy requires an identifying User-Agent, which the shared
httpx client already sends. Lookups are keyed on coordinates rounded to four
decimals (~11 m) and cached for a day.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cosmofy.errors import CosmofyError, ErrorCode
from cosmofy.models.location import LocationInfo, UpstreamReverseGeocode
from cosmofy.services.common import parse_upstream

if TYPE_CHECKING:
    from cosmofy.config import GeocodingSettings
    from cosmofy.protocols import CacheProtocol, FetcherProtocol

log = structlog.get_logger()

_UPSTREAM = "Nominatim"


class GeocodingService:
    def __init__(
        self,
        fetcher: FetcherProtocol,
        cache: CacheProtocol,
        settings: GeocodingSettings,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._settings = settings
        self._reverse_url = f"{settings.base_url.rstrip('/')}/reverse"

    @property
    def enabled(self) -> bool:
        return self._settings.enabled

    async def reverse(
        self, latitude: float, longitude: float, *, max_retries: int | None = None
    ) -> LocationInfo:
        """Resolve coordinates to a place name.

        ``max_retries`` overrides the fetcher default for callers that would
        rather degrade quickly than wait out the backoff.

        Returns a LocationInfo with ``city=None`` when nothing is at the
        coordinates; raises CosmofyError when the geocoder is disabled or
        unreachable.
        """
        if not self._settings.enabled:
            raise CosmofyError(
                ErrorCode.SERVICE_DISABLED,
                "Reverse geocoding is disabled in the server configuration",
            )

        lat, lon = round(latitude, 4), round(longitude, 4)
        cache_key = f"reverse-{lat:.4f}-{lon:.4f}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            log.info("cache_hit", upstream="geocoding", key=cache_key)
            return cached

        log.info("cache_miss_fetching", upstream="geocoding", key=cache_key)
        payload = await self._fetcher.get_json(
            self._reverse_url,
            {"lat": lat, "lon": lon, "format": "json", "zoom": 10},
            max_retries=max_retries,
        )
        upstream = parse_upstream(UpstreamReverseGeocode, payload, upstream=_UPSTREAM)
        if upstream.error:
            log.info("geocode_no_result", latitude=lat, longitude=lon, reason=upstream.error)
        location = LocationInfo.from_upstream(lat, lon, upstream)
        self._cache.set(cache_key, location)
        return location
