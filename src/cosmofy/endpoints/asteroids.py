"""Endpoint handler for /api/asteroids/upcoming.

Policy: authentic data only, as for APOD. A missing key or an unreachable
upstream is a 503.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cosmofy.endpoints.params import validate_input
from cosmofy.errors import CosmofyError, ErrorCode
from cosmofy.models.inputs import AsteroidsInput

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cosmofy.state import AppState

_FAILED = "Failed to fetch upcoming asteroids"


async def handle_upcoming(params: Mapping[str, str], state: AppState) -> list[dict]:
    """Next close approaches, soonest first."""
    log = structlog.get_logger().bind(endpoint="asteroids_upcoming")
    log.info("handler_called")

    validated = validate_input(
        AsteroidsInput,
        params,
        title=_FAILED,
        hint="limit must be between 1 and 50.",
    )
    try:
        asteroids = await state.asteroids.get_upcoming(validated.limit)
    except CosmofyError as exc:
        if exc.code == ErrorCode.CONFIGURATION_MISSING:
            raise
        raise exc.with_title(_FAILED) from exc

    log.info("asteroids_upcoming_complete", asteroid_count=len(asteroids))
    return [asteroid.to_json() for asteroid in asteroids]
