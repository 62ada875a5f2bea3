"""Application state container.

AppState is created once at server startup (inside the Starlette lifespan
context manager) and handed to every endpoint handler. Each service owns the
TTL cache it was constructed with; nothing here is a module-level singleton.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from cosmofy.config import Settings
    from cosmofy.services.apod import ApodService
    from cosmofy.services.asteroids import AsteroidService
    from cosmofy.services.geocoding import GeocodingService
    from cosmofy.services.iss import IssService
    from cosmofy.services.news import SpaceNewsService


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every endpoint handler."""

    settings: Settings
    http_client: httpx.AsyncClient
    apod: ApodService
    asteroids: AsteroidService
    iss: IssService
    news: SpaceNewsService
    geocoding: GeocodingService
