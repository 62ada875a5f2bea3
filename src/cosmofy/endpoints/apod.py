"""Endpoint handlers for /api/apod and /api/apod/today.

Policy: authentic data only. A missing NASA key or an unreachable upstream
is a 503; there is no synthesized fallback for pictures.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import structlog

from cosmofy.endpoints.params import validate_input
from cosmofy.errors import CosmofyError, ErrorCode
from cosmofy.models.inputs import ApodDateInput

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cosmofy.state import AppState

_UNAVAILABLE = "NASA APOD API unavailable"


def _translate(exc: CosmofyError) -> CosmofyError:
    # The missing-key error already carries its own explanatory title.
    if exc.code == ErrorCode.CONFIGURATION_MISSING:
        return exc
    return exc.with_title(_UNAVAILABLE)


async def handle_gallery(params: Mapping[str, str], state: AppState) -> list[dict]:
    """Recent pictures for the gallery page."""
    log = structlog.get_logger().bind(endpoint="apod")
    log.info("handler_called")

    try:
        images = await state.apod.get_recent()
    except CosmofyError as exc:
        raise _translate(exc) from exc

    log.info("apod_gallery_complete", image_count=len(images))
    return [image.to_json() for image in images]


async def handle_today(params: Mapping[str, str], state: AppState) -> dict:
    """A single picture: today's, or the one for ``?date=YYYY-MM-DD``."""
    log = structlog.get_logger().bind(endpoint="apod_today")
    log.info("handler_called")

    validated = validate_input(
        ApodDateInput,
        params,
        hint="Use the YYYY-MM-DD format for date.",
    )
    try:
        day = date.fromisoformat(validated.date) if validated.date else None
    except ValueError as exc:
        raise CosmofyError(
            ErrorCode.INVALID_INPUT,
            f"Not a calendar date: {validated.date}",
        ) from exc

    try:
        image = await state.apod.get_apod(day)
    except CosmofyError as exc:
        raise _translate(exc) from exc
    return image.to_json()
