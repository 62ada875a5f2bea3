"""ASGI application entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the Starlette lifespan context manager
- Register routes and serialise endpoint errors
- Start the HTTP server
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.responses import JSONResponse
from starlette.routing import Route

import cosmofy.endpoints.apod as e_apod
import cosmofy.endpoints.asteroids as e_asteroids
import cosmofy.endpoints.iss as e_iss
import cosmofy.endpoints.location as e_location
import cosmofy.endpoints.news as e_news
import cosmofy.endpoints.sky as e_sky
from cosmofy import __version__
from cosmofy.cache import TTLCache
from cosmofy.config import Settings
from cosmofy.errors import CosmofyError
from cosmofy.fetcher import Fetcher, build_http_client
from cosmofy.services.apod import ApodService
from cosmofy.services.asteroids import AsteroidService
from cosmofy.services.geocoding import GeocodingService
from cosmofy.services.iss import IssService
from cosmofy.services.news import SpaceNewsService
from cosmofy.state import AppState
from cosmofy.transport import CORSMiddleware, run_http_server

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable, Mapping

    import httpx
    from starlette.requests import Request
    from starlette.responses import Response

    Handler = Callable[[Mapping[str, str], AppState], Awaitable[object]]

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        # endpoint_unexpected_error carries exc_info; render it as structured data.
        processors = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# State wiring
# ---------------------------------------------------------------------------


def build_app_state(
    settings: Settings,
    http_client: httpx.AsyncClient,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AppState:
    """Construct the fetcher, one cache per service, and the services."""
    fetcher = Fetcher(http_client, settings.fetcher, sleep=sleep)

    return AppState(
        settings=settings,
        http_client=http_client,
        apod=ApodService(
            fetcher,
            TTLCache(settings.nasa.cache_ttl_seconds, name="apod", clock=clock),
            settings.nasa,
            settings.nasa_key,
        ),
        asteroids=AsteroidService(
            fetcher,
            TTLCache(settings.nasa.neo_cache_ttl_seconds, name="asteroids", clock=clock),
            settings.nasa,
            settings.nasa_key,
        ),
        iss=IssService(
            fetcher,
            TTLCache(settings.iss.position_ttl_seconds, name="iss_position", clock=clock),
            TTLCache(settings.iss.reference_ttl_seconds, name="iss_reference", clock=clock),
            settings.iss,
        ),
        news=SpaceNewsService(
            fetcher,
            TTLCache(settings.news.cache_ttl_seconds, name="news", clock=clock),
            settings.news,
        ),
        geocoding=GeocodingService(
            fetcher,
            TTLCache(settings.geocoding.cache_ttl_seconds, name="geocoding", clock=clock),
            settings.geocoding,
        ),
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: Starlette) -> AsyncGenerator[None, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    if app.state.cosmofy is not None:
        # State injected by the caller (tests); the caller owns its lifecycle.
        yield
        return

    settings: Settings = app.state.settings or Settings()
    _setup_logging(settings)
    log.info("server_starting", version=__version__)

    http_client = build_http_client(settings.fetcher)
    app.state.cosmofy = build_app_state(settings, http_client)

    if settings.nasa_key is None:
        log.warning(
            "nasa_api_key_missing",
            message="APOD and asteroid endpoints will answer 503 until NASA_API_KEY is configured.",
        )
    if not settings.iss.position_url:
        log.warning("iss_live_upstream_disabled", fallback_enabled=settings.iss.fallback_enabled)

    log.info(
        "server_started",
        version=__version__,
        host=settings.server.host,
        port=settings.server.port,
    )

    try:
        yield
    finally:
        await http_client.aclose()
        app.state.cosmofy = None
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


def _endpoint(name: str, handler: Handler) -> Callable[[Request], Awaitable[Response]]:
    """Adapt an endpoint handler to Starlette and serialise its errors."""

    async def endpoint(request: Request) -> Response:
        state: AppState = request.app.state.cosmofy
        params = {**request.query_params, **request.path_params}
        try:
            body = await handler(params, state)
        except CosmofyError as exc:
            log.warning(
                "endpoint_error",
                endpoint=name,
                code=exc.code,
                message=exc.message,
                status_code=exc.status_code,
                recoverable=exc.recoverable,
            )
            return JSONResponse(exc.to_dict(), status_code=exc.status_code)
        except Exception as exc:
            log.error("endpoint_unexpected_error", endpoint=name, exc_info=True)
            return JSONResponse(
                {"error": "Internal server error", "message": str(exc) or type(exc).__name__},
                status_code=500,
            )
        return JSONResponse(body)

    return endpoint


async def _health(request: Request) -> Response:
    return JSONResponse({"status": "ok", "version": __version__})


async def _http_error(request: Request, exc: HTTPException) -> Response:
    return JSONResponse(
        {"error": exc.detail, "message": f"No handler for {request.method} {request.url.path}"},
        status_code=exc.status_code,
    )


ROUTES = [
    Route("/api/apod", _endpoint("apod", e_apod.handle_gallery)),
    Route("/api/apod/today", _endpoint("apod_today", e_apod.handle_today)),
    Route("/api/asteroids/upcoming", _endpoint("asteroids_upcoming", e_asteroids.handle_upcoming)),
    Route("/api/iss/position", _endpoint("iss_position", e_iss.handle_position)),
    Route("/api/iss/passes", _endpoint("iss_passes", e_iss.handle_passes)),
    Route("/api/iss/crew", _endpoint("iss_crew", e_iss.handle_crew)),
    Route("/api/location", _endpoint("location", e_location.handle)),
    Route("/api/sky-conditions", _endpoint("sky_conditions", e_sky.handle)),
    Route("/api/news", _endpoint("news", e_news.handle_latest)),
    Route("/api/news/featured", _endpoint("news_featured", e_news.handle_featured)),
    Route("/api/news/search", _endpoint("news_search", e_news.handle_search)),
    Route("/api/news/launch/{launch_id}", _endpoint("news_launch", e_news.handle_by_launch)),
    Route("/health", _health),
]


def create_app(settings: Settings | None = None, *, state: AppState | None = None) -> Starlette:
    """Build the ASGI app.

    With ``state`` the app serves that pre-wired state and the lifespan
    creates nothing; otherwise the lifespan builds state from ``settings``
    (or from the environment when ``settings`` is None).
    """
    app = Starlette(
        routes=ROUTES,
        middleware=[Middleware(CORSMiddleware)],
        exception_handlers={HTTPException: _http_error},
        lifespan=lifespan,
    )
    app.state.settings = settings if state is None else state.settings
    app.state.cosmofy = state
    return app


app = create_app()


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()
    _setup_logging(settings)
    run_http_server(create_app(settings), settings)


if __name__ == "__main__":
    main()
