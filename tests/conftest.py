"""Shared test fixtures for the cosmofy test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cosmofy.config import Settings
from cosmofy.fetcher import Fetcher, build_http_client

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx


class FakeClock:
    """Monotonic clock stand-in that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Replacement for asyncio.sleep that returns at once and records each delay."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def settings() -> Settings:
    """Settings with a NASA key and no retry backoff, isolated from the host env."""
    return Settings(
        nasa_api_key="test-nasa-key",
        fetcher={"timeout_seconds": 2.0, "retry_backoff_seconds": 0.0},
    )


@pytest.fixture()
def settings_without_key() -> Settings:
    return Settings(
        nasa_api_key="",
        fetcher={"timeout_seconds": 2.0, "retry_backoff_seconds": 0.0},
    )


# ---------------------------------------------------------------------------
# Upstream payloads
# ---------------------------------------------------------------------------


@pytest.fixture()
def apod_item() -> dict:
    return {
        "date": "2024-03-01",
        "title": "The Horsehead Nebula",
        "url": "https://apod.nasa.gov/apod/image/2403/horsehead_small.jpg",
        "hdurl": "https://apod.nasa.gov/apod/image/2403/horsehead.jpg",
        "media_type": "image",
        "explanation": "A dark nebula in Orion.",
        "copyright": "\nJane Doe\n",
        "service_version": "v1",
    }


@pytest.fixture()
def neo_feed_payload() -> dict:
    def neo(ref: str, name: str, day: str, hazardous: bool = False) -> dict:
        return {
            "id": ref,
            "neo_reference_id": ref,
            "name": name,
            "nasa_jpl_url": f"https://ssd.jpl.nasa.gov/tools/sbdb_lookup.html#/?sstr={ref}",
            "absolute_magnitude_h": 22.1,
            "estimated_diameter": {
                "kilometers": {
                    "estimated_diameter_min": 0.1011,
                    "estimated_diameter_max": 0.2261,
                }
            },
            "is_potentially_hazardous_asteroid": hazardous,
            "close_approach_data": [
                {
                    "close_approach_date": day,
                    "close_approach_date_full": f"{day} 10:15",
                    "epoch_date_close_approach": 1710411300000,
                    "relative_velocity": {
                        "kilometers_per_second": "12.5013",
                        "kilometers_per_hour": "45004.68",
                        "miles_per_hour": "27964.0",
                    },
                    "miss_distance": {
                        "astronomical": "0.0421",
                        "lunar": "16.38",
                        "kilometers": "6298054.1",
                        "miles": "3913398.2",
                    },
                    "orbiting_body": "Earth",
                }
            ],
        }

    no_approach = neo("3000003", "(2024 CC)", "2024-03-14")
    no_approach["close_approach_data"] = []
    return {
        "links": {"self": "https://api.nasa.gov/neo/rest/v1/feed"},
        "element_count": 4,
        "near_earth_objects": {
            "2024-03-16": [neo("3000004", "(2024 DD)", "2024-03-16", hazardous=True)],
            "2024-03-14": [
                neo("3000002", "(2024 BB)", "2024-03-14"),
                neo("3000001", "(2024 AA)", "2024-03-14"),
                no_approach,
            ],
        },
    }


@pytest.fixture()
def iss_now_payload() -> dict:
    return {
        "message": "success",
        "timestamp": 1709251200,
        "iss_position": {"latitude": "48.8566", "longitude": "2.3522"},
    }


@pytest.fixture()
def astros_payload() -> dict:
    return {
        "message": "success",
        "number": 3,
        "people": [
            {"name": "Oleg Kononenko", "craft": "ISS"},
            {"name": "Jasmin Moghbeli", "craft": "ISS"},
            {"name": "Jing Haiping", "craft": "Tiangong"},
        ],
    }


@pytest.fixture()
def iss_passes_payload() -> dict:
    return {
        "message": "success",
        "request": {"latitude": 40.7, "longitude": -74.0, "passes": 2},
        "response": [
            {"duration": 420, "risetime": 1709251200},
            {"duration": 610, "risetime": 1709256800},
        ],
    }


@pytest.fixture()
def article_page_payload() -> dict:
    return {
        "count": 1,
        "next": None,
        "previous": None,
        "results": [
            {
                "id": 23001,
                "title": "Starship completes third flight test",
                "url": "https://example.com/starship",
                "image_url": "https://example.com/starship.jpg",
                "news_site": "SpaceNews",
                "summary": "SpaceX flew Starship again.",
                "published_at": "2024-03-14T13:25:00Z",
                "updated_at": "2024-03-14T14:00:00Z",
                "featured": True,
                "launches": [
                    {"launch_id": "a1b2c3", "provider": "Launch Library 2"},
                ],
                "events": [],
            }
        ],
    }


@pytest.fixture()
def reverse_geocode_payload() -> dict:
    return {
        "display_name": "Paris, Île-de-France, France",
        "address": {"city": "Paris", "state": "Île-de-France", "country": "France"},
    }


# ---------------------------------------------------------------------------
# Outbound HTTP
# ---------------------------------------------------------------------------


@pytest.fixture()
async def http_client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    """The production client configuration; respx intercepts its requests."""
    client = build_http_client(settings.fetcher)
    try:
        yield client
    finally:
        await client.aclose()


@pytest.fixture()
def fetcher(http_client: httpx.AsyncClient, settings: Settings, sleep: RecordingSleep) -> Fetcher:
    return Fetcher(http_client, settings.fetcher, sleep=sleep)
