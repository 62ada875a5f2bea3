"""Endpoint handler for /api/location.

Policy: no fallback. If the geocoder is disabled or unreachable the endpoint
answers 503; it never invents a place name. Coordinates with no place (open
ocean) are labelled with the coordinates themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cosmofy.endpoints.params import validate_input
from cosmofy.errors import CosmofyError, ErrorCode
from cosmofy.models.inputs import CoordinatesInput

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cosmofy.state import AppState


async def handle(params: Mapping[str, str], state: AppState) -> dict:
    log = structlog.get_logger().bind(endpoint="location")
    log.info("handler_called")

    if "lat" in params or "lon" in params:
        validated = validate_input(
            CoordinatesInput,
            params,
            title="Invalid coordinate ranges",
            hint="Latitude must be within [-90, 90] and longitude within [-180, 180].",
        )
        latitude, longitude = validated.lat, validated.lon
    else:
        latitude = state.settings.geocoding.default_latitude
        longitude = state.settings.geocoding.default_longitude
        log.info("location_default_coordinates", latitude=latitude, longitude=longitude)

    try:
        location = await state.geocoding.reverse(latitude, longitude)
    except CosmofyError as exc:
        if exc.code == ErrorCode.UPSTREAM_MALFORMED:
            raise
        raise exc.with_title("Geolocation service unavailable") from exc

    if location.city is None:
        location = location.model_copy(update={"city": location.coordinates_label()})
    return location.to_json()
