"""Endpoint handler for /api/sky-conditions.

There is no live sky-conditions upstream: the answer is always synthesized
from the clock and the observer's coordinates, and labelled as such.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from cosmofy.endpoints.params import validate_input
from cosmofy.models.inputs import CoordinatesInput
from cosmofy.synthesis import synthesize_sky_conditions

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cosmofy.state import AppState


async def handle(params: Mapping[str, str], state: AppState) -> dict:
    log = structlog.get_logger().bind(endpoint="sky_conditions")
    log.info("handler_called")

    validated = validate_input(
        CoordinatesInput,
        params,
        title="Invalid coordinates",
        hint="Provide numeric lat and lon query parameters.",
    )
    conditions = synthesize_sky_conditions(validated.lat, validated.lon, datetime.now(UTC))
    log.info("sky_conditions_synthesized", moon_phase=conditions.moon_phase)
    return conditions.to_json()
