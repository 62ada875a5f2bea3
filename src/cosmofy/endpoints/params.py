"""Query-string validation shared by the endpoint handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from cosmofy.errors import CosmofyError, ErrorCode

if TYPE_CHECKING:
    from collections.abc import Mapping

InputT = TypeVar("InputT", bound=BaseModel)


def validate_input(
    model: type[InputT],
    params: Mapping[str, Any],
    *,
    title: str = "Invalid request",
    hint: str = "",
) -> InputT:
    """Build ``model`` from query parameters, raising INVALID_INPUT on failure."""
    try:
        return model.model_validate(dict(params))
    except ValidationError as exc:
        fields = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
        message = f"Invalid or missing parameter(s): {', '.join(fields)}."
        if hint:
            message = f"{message} {hint}"
        raise CosmofyError(ErrorCode.INVALID_INPUT, message, title=title) from exc
