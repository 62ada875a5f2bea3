"""Unit tests for cosmofy.errors."""

from __future__ import annotations

import pytest

from cosmofy.errors import CosmofyError, ErrorCode


class TestStatusCodes:
    @pytest.mark.parametrize(
        ("code", "status"),
        [
            (ErrorCode.CONFIGURATION_MISSING, 503),
            (ErrorCode.UPSTREAM_UNAVAILABLE, 503),
            (ErrorCode.UPSTREAM_TIMEOUT, 503),
            (ErrorCode.UPSTREAM_REJECTED, 503),
            (ErrorCode.SERVICE_DISABLED, 503),
            (ErrorCode.UPSTREAM_MALFORMED, 500),
            (ErrorCode.INVALID_INPUT, 400),
            (ErrorCode.NOT_FOUND, 404),
        ],
    )
    def test_status_for_code(self, code: ErrorCode, status: int) -> None:
        assert CosmofyError(code, "boom").status_code == status


class TestBody:
    def test_default_title(self) -> None:
        error = CosmofyError(ErrorCode.UPSTREAM_TIMEOUT, "Timed out after 10s")
        assert error.to_dict() == {
            "error": "Upstream service timed out",
            "message": "Timed out after 10s",
        }

    def test_explicit_title(self) -> None:
        error = CosmofyError(ErrorCode.INVALID_INPUT, "lat missing", title="Invalid coordinates")
        assert error.to_dict()["error"] == "Invalid coordinates"

    def test_with_title_copies(self) -> None:
        original = CosmofyError(ErrorCode.UPSTREAM_UNAVAILABLE, "HTTP 502", recoverable=True)
        retitled = original.with_title("Failed to fetch space news")
        assert retitled is not original
        assert retitled.title == "Failed to fetch space news"
        assert retitled.code == ErrorCode.UPSTREAM_UNAVAILABLE
        assert retitled.message == "HTTP 502"
        assert retitled.recoverable is True
        assert original.title == "Upstream service unavailable"

    def test_str_is_message(self) -> None:
        assert str(CosmofyError(ErrorCode.NOT_FOUND, "no such route")) == "no such route"
