from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from cosmofy.errors import CosmofyError, ErrorCode

ModelT = TypeVar("ModelT", bound=BaseModel)
T = TypeVar("T")


def parse_upstream(model: type[ModelT], payload: Any, *, upstream: str) -> ModelT:
    """Validate an upstream JSON payload against its schema.

    A payload of the wrong shape is a normalization failure (HTTP 500), not an
    availability problem, so it is never masked as one.
    """
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise CosmofyError(
            ErrorCode.UPSTREAM_MALFORMED,
            f"Unexpected response shape from {upstream}: {exc.error_count()} validation error(s)",
        ) from exc


def parse_upstream_list(adapter: TypeAdapter[list[T]], payload: Any, *, upstream: str) -> list[T]:
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise CosmofyError(
            ErrorCode.UPSTREAM_MALFORMED,
            f"Unexpected response shape from {upstream}: {exc.error_count()} validation error(s)",
        ) from exc


def require_api_key(api_key: str | None, *, message: str, title: str) -> str:
    """Return ``api_key`` or raise CONFIGURATION_MISSING before any fetch."""
    if not api_key:
        raise CosmofyError(ErrorCode.CONFIGURATION_MISSING, message, title=title)
    return api_key
