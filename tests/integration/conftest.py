"""Integration test fixtures.

Provides a fully wired AppState (real services, caches and fetcher) and an
ASGI client for the Starlette app built around it. Outbound upstream
requests go through a real httpx client that tests intercept with respx;
the ASGI client itself is never mocked.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from cosmofy.server import build_app_state, create_app

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from cosmofy.config import Settings
    from cosmofy.state import AppState
    from tests.conftest import FakeClock, RecordingSleep


@pytest.fixture()
def app_state(
    settings: Settings,
    http_client: httpx.AsyncClient,
    clock: FakeClock,
    sleep: RecordingSleep,
) -> AppState:
    return build_app_state(settings, http_client, clock=clock, sleep=sleep)


def _asgi_client(state: AppState) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=create_app(state=state)),
        base_url="http://testserver",
    )


@pytest.fixture()
async def client(app_state: AppState) -> AsyncIterator[httpx.AsyncClient]:
    async with _asgi_client(app_state) as client:
        yield client


@pytest.fixture()
def make_client(
    http_client: httpx.AsyncClient, clock: FakeClock, sleep: RecordingSleep
) -> Callable[[Settings], httpx.AsyncClient]:
    """Factory for clients whose app runs with non-default settings."""

    def factory(settings: Settings) -> httpx.AsyncClient:
        return _asgi_client(build_app_state(settings, http_client, clock=clock, sleep=sleep))

    return factory
