"""Endpoint handlers for /api/iss/*.

Per-endpoint upstream policy:
  - position: live open-notify data enriched with a place name; when the
    upstream is not configured or not reachable, a position synthesized from
    the ISS mean orbit is served instead (``source: "synthesized"``).
  - passes: live predictions, same synthesized fallback.
  - crew: live only; upstream failure is a 503.

A malformed upstream payload is never masked by a fallback: it stays a 500.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from cosmofy.endpoints.params import validate_input
from cosmofy.errors import CosmofyError, ErrorCode
from cosmofy.models.inputs import PassesInput
from cosmofy.synthesis import region_label, synthesize_iss_passes, synthesize_iss_position

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cosmofy.models.iss import IssPosition
    from cosmofy.state import AppState

_FALLBACK_CODES = frozenset({
    ErrorCode.UPSTREAM_UNAVAILABLE,
    ErrorCode.UPSTREAM_TIMEOUT,
    ErrorCode.UPSTREAM_REJECTED,
    ErrorCode.SERVICE_DISABLED,
})


def _can_fall_back(exc: CosmofyError, state: AppState) -> bool:
    return state.settings.iss.fallback_enabled and exc.code in _FALLBACK_CODES


async def _place_name(position: IssPosition, state: AppState) -> str:
    """City under the station, or a coarse region label when there is none."""
    fallback = region_label(position.latitude, position.longitude)
    if not state.geocoding.enabled:
        return fallback
    try:
        # Single attempt: the place name is enrichment only.
        location = await state.geocoding.reverse(
            position.latitude, position.longitude, max_retries=0
        )
    except CosmofyError as exc:
        structlog.get_logger().warning(
            "iss_location_lookup_failed", code=exc.code, message=exc.message
        )
        return fallback
    return location.city or fallback


async def handle_position(params: Mapping[str, str], state: AppState) -> dict:
    log = structlog.get_logger().bind(endpoint="iss_position")
    log.info("handler_called")

    try:
        position = await state.iss.get_live_position()
    except CosmofyError as exc:
        if not _can_fall_back(exc, state):
            raise exc.with_title("Failed to fetch ISS position") from exc
        log.warning("fallback_synthesized", code=exc.code, reason=exc.message)
        return synthesize_iss_position(datetime.now(UTC)).to_json()

    # The cached record is shared; enrich a copy.
    enriched = position.model_copy(update={"location": await _place_name(position, state)})
    return enriched.to_json()


async def handle_passes(params: Mapping[str, str], state: AppState) -> list[dict]:
    log = structlog.get_logger().bind(endpoint="iss_passes")
    log.info("handler_called")

    validated = validate_input(
        PassesInput,
        params,
        title="Invalid coordinates",
        hint="Latitude must be within [-90, 90] and longitude within [-180, 180].",
    )

    try:
        passes = await state.iss.get_passes(validated.lat, validated.lon, validated.n)
    except CosmofyError as exc:
        if not _can_fall_back(exc, state):
            raise exc.with_title("Failed to fetch ISS passes") from exc
        log.warning("fallback_synthesized", code=exc.code, reason=exc.message)
        passes = synthesize_iss_passes(
            validated.lat, validated.lon, validated.n, datetime.now(UTC)
        )

    return [iss_pass.to_json() for iss_pass in passes]


async def handle_crew(params: Mapping[str, str], state: AppState) -> list[dict]:
    log = structlog.get_logger().bind(endpoint="iss_crew")
    log.info("handler_called")

    try:
        crew = await state.iss.get_crew()
    except CosmofyError as exc:
        raise exc.with_title("Failed to fetch ISS crew") from exc

    log.info("iss_crew_complete", crew_count=len(crew))
    return [member.to_json() for member in crew]
