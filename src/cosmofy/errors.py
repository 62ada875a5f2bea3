from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    CONFIGURATION_MISSING = "CONFIGURATION_MISSING"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    UPSTREAM_TIMEOUT = "UPSTREAM_TIMEOUT"
    UPSTREAM_REJECTED = "UPSTREAM_REJECTED"
    UPSTREAM_MALFORMED = "UPSTREAM_MALFORMED"
    SERVICE_DISABLED = "SERVICE_DISABLED"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"


_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.CONFIGURATION_MISSING: 503,
    ErrorCode.UPSTREAM_UNAVAILABLE: 503,
    ErrorCode.UPSTREAM_TIMEOUT: 503,
    ErrorCode.UPSTREAM_REJECTED: 503,
    ErrorCode.UPSTREAM_MALFORMED: 500,
    ErrorCode.SERVICE_DISABLED: 503,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.NOT_FOUND: 404,
}

_DEFAULT_TITLES: dict[ErrorCode, str] = {
    ErrorCode.CONFIGURATION_MISSING: "Service not configured",
    ErrorCode.UPSTREAM_UNAVAILABLE: "Upstream service unavailable",
    ErrorCode.UPSTREAM_TIMEOUT: "Upstream service timed out",
    ErrorCode.UPSTREAM_REJECTED: "Upstream service rejected the request",
    ErrorCode.UPSTREAM_MALFORMED: "Unexpected upstream response",
    ErrorCode.SERVICE_DISABLED: "Service unavailable",
    ErrorCode.INVALID_INPUT: "Invalid request",
    ErrorCode.NOT_FOUND: "Not found",
}


class CosmofyError(Exception):
    """Raised by services and endpoint handlers for all expected failures.

    Caught by server.py and serialised into the ``{"error", "message"}``
    response body with the HTTP status that belongs to ``code``. Never catch
    this inside business logic except to translate it into a more specific
    title for the endpoint at hand.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        title: str | None = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.title = title or _DEFAULT_TITLES[code]
        self.recoverable = recoverable

    @property
    def status_code(self) -> int:
        return _STATUS_BY_CODE[self.code]

    def with_title(self, title: str) -> CosmofyError:
        """Return a copy of this error carrying an endpoint-specific title."""
        return CosmofyError(
            self.code,
            self.message,
            title=title,
            recoverable=self.recoverable,
        )

    def to_dict(self) -> dict:
        return {
            "error": self.title,
            "message": self.message,
        }
