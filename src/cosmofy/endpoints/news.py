"""Endpoint handlers for /api/news/*.

Policy: no fallback; upstream failures are 503, malformed payloads 500.
Each article gains a ``publishedAgo`` label computed at response time, so
cached pages never carry a stale age.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from cosmofy.endpoints.params import validate_input
from cosmofy.errors import CosmofyError
from cosmofy.models.inputs import FeaturedInput, LaunchNewsInput, PageInput, SearchInput
from cosmofy.services.news import format_time_ago

if TYPE_CHECKING:
    from collections.abc import Awaitable, Mapping

    from cosmofy.models.news import SpaceNewsPage
    from cosmofy.state import AppState

_UNAVAILABLE = "Failed to fetch space news"


async def _render(pending: Awaitable[SpaceNewsPage]) -> dict:
    try:
        page = await pending
    except CosmofyError as exc:
        raise exc.with_title(_UNAVAILABLE) from exc

    now = datetime.now(UTC)
    body = page.to_json()
    for article, rendered in zip(page.results, body["results"], strict=True):
        rendered["publishedAgo"] = format_time_ago(article.published_at, now)
    return body


async def handle_latest(params: Mapping[str, str], state: AppState) -> dict:
    structlog.get_logger().bind(endpoint="news").info("handler_called")
    validated = validate_input(PageInput, params)
    return await _render(state.news.get_latest_news(validated.limit, validated.offset))


async def handle_featured(params: Mapping[str, str], state: AppState) -> dict:
    structlog.get_logger().bind(endpoint="news_featured").info("handler_called")
    validated = validate_input(FeaturedInput, params)
    return await _render(state.news.get_featured_news(validated.limit))


async def handle_search(params: Mapping[str, str], state: AppState) -> dict:
    structlog.get_logger().bind(endpoint="news_search").info("handler_called")
    validated = validate_input(
        SearchInput,
        params,
        title="Search query is required",
        hint="Provide a non-empty q parameter (max 200 chars).",
    )
    return await _render(state.news.search_news(validated.q, validated.limit))


async def handle_by_launch(params: Mapping[str, str], state: AppState) -> dict:
    structlog.get_logger().bind(endpoint="news_launch").info("handler_called")
    validated = validate_input(LaunchNewsInput, params)
    return await _render(state.news.get_news_by_launch(validated.launch_id, validated.limit))
