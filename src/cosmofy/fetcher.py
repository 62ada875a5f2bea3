"""Upstream JSON fetcher with a hard timeout and bounded retries.

All outbound network I/O goes through a single Fetcher instance shared by the
services. The Fetcher receives an httpx.AsyncClient via constructor
injection; the app lifespan owns the client lifecycle.

Retry policy, per logical request:
  - 5xx responses and transport-level network failures (connect, read,
    write, protocol) are retried after a fixed backoff,
    at most ``max_retries`` times (so ``1 + max_retries`` attempts in total).
  - A timeout or a 4xx response fails immediately: the request itself is the
    problem, not transient infrastructure.
  - An unusable URL or a redirect loop also fails immediately.
  - When retries run out the last error is raised, never swallowed.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from cosmofy.errors import CosmofyError, ErrorCode

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from cosmofy.config import FetcherSettings

log = structlog.get_logger()


def build_http_client(settings: FetcherSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={
            "User-Agent": settings.user_agent,
            "Accept": "application/json",
        },
        limits=httpx.Limits(
            max_connections=20,
            max_keepalive_connections=10,
        ),
    )


@dataclass
class FetchAttempt:
    """Progress of one logical request across its retries."""

    url: str
    attempts_remaining: int
    timeout_seconds: float
    attempts_made: int = 0


class Fetcher:
    """HTTP GET + JSON decode with timeout and fixed-backoff retries."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: FetcherSettings,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._settings = settings
        self._sleep = sleep

    async def get_json(
        self,
        url: str,
        params: Mapping[str, str | int | float] | None = None,
        *,
        max_retries: int | None = None,
    ) -> Any:
        """Fetch ``url`` and return the decoded JSON body.

        ``params`` are encoded by httpx, so free text is percent-encoded and
        secrets such as API keys never appear in the logged ``url``.
        Raises CosmofyError on timeouts, network errors, non-2xx responses
        and non-JSON bodies.
        """
        attempt = FetchAttempt(
            url=url,
            attempts_remaining=self._settings.max_retries if max_retries is None else max_retries,
            timeout_seconds=self._settings.timeout_seconds,
        )

        while True:
            attempt.attempts_made += 1
            try:
                async with asyncio.timeout(attempt.timeout_seconds):
                    response = await self._client.get(url, params=params)
            except (TimeoutError, httpx.TimeoutException) as exc:
                log.warning(
                    "upstream_timeout",
                    url=url,
                    timeout_seconds=attempt.timeout_seconds,
                    attempts_made=attempt.attempts_made,
                )
                raise CosmofyError(
                    ErrorCode.UPSTREAM_TIMEOUT,
                    f"Timed out after {attempt.timeout_seconds:g}s fetching {url}",
                    recoverable=True,
                ) from exc
            except (httpx.UnsupportedProtocol, httpx.InvalidURL) as exc:
                # A URL that can never be requested; retrying cannot help.
                raise CosmofyError(
                    ErrorCode.UPSTREAM_REJECTED,
                    f"Cannot request {url!r}: {exc}",
                ) from exc
            except httpx.TransportError as exc:
                if attempt.attempts_remaining > 0:
                    await self._backoff(attempt, reason=str(exc) or type(exc).__name__)
                    continue
                raise CosmofyError(
                    ErrorCode.UPSTREAM_UNAVAILABLE,
                    f"Network error fetching {url}: {exc}",
                    recoverable=True,
                ) from exc
            except httpx.DecodingError as exc:
                raise CosmofyError(
                    ErrorCode.UPSTREAM_MALFORMED,
                    f"Response from {url} could not be decoded: {exc}",
                ) from exc
            except httpx.HTTPError as exc:
                # TooManyRedirects and other request-level failures.
                raise CosmofyError(
                    ErrorCode.UPSTREAM_REJECTED,
                    f"Request to {url} failed: {exc}",
                ) from exc

            if response.status_code >= 500:
                if attempt.attempts_remaining > 0:
                    await self._backoff(attempt, reason=f"HTTP {response.status_code}")
                    continue
                raise CosmofyError(
                    ErrorCode.UPSTREAM_UNAVAILABLE,
                    f"HTTP {response.status_code} fetching {url}",
                    recoverable=True,
                )

            if not response.is_success:
                raise CosmofyError(
                    ErrorCode.UPSTREAM_REJECTED,
                    f"HTTP {response.status_code} fetching {url}",
                    recoverable=False,
                )

            try:
                payload = response.json()
            except ValueError as exc:
                raise CosmofyError(
                    ErrorCode.UPSTREAM_MALFORMED,
                    f"Response from {url} is not valid JSON",
                ) from exc

            log.info(
                "fetch_complete",
                url=url,
                status_code=response.status_code,
                attempts_made=attempt.attempts_made,
            )
            return payload

    async def _backoff(self, attempt: FetchAttempt, *, reason: str) -> None:
        attempt.attempts_remaining -= 1
        log.warning(
            "upstream_retry",
            url=attempt.url,
            reason=reason,
            attempts_remaining=attempt.attempts_remaining,
            backoff_seconds=self._settings.retry_backoff_seconds,
        )
        await self._sleep(self._settings.retry_backoff_seconds)
