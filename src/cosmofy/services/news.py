"""Spaceflight News API client.

Each query is cached for the news TTL (15 minutes by default) under a key
built from the operation name and its parameters, so repeat traffic from the
front end never reaches the upstream inside that window.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from cosmofy.models.news import SpaceNewsPage, UpstreamArticlePage
from cosmofy.services.common import parse_upstream

if TYPE_CHECKING:
    from cosmofy.config import NewsSettings
    from cosmofy.protocols import CacheProtocol, FetcherProtocol

log = structlog.get_logger()

_UPSTREAM = "Spaceflight News API"


class SpaceNewsService:
    def __init__(
        self,
        fetcher: FetcherProtocol,
        cache: CacheProtocol,
        settings: NewsSettings,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._articles_url = f"{settings.base_url.rstrip('/')}/articles/"

    async def get_latest_news(self, limit: int = 10, offset: int = 0) -> SpaceNewsPage:
        return await self._query(
            f"news-{limit}-{offset}",
            {"limit": limit, "offset": offset},
        )

    async def get_featured_news(self, limit: int = 5) -> SpaceNewsPage:
        return await self._query(
            f"featured-news-{limit}",
            {"limit": limit, "featured": "true"},
        )

    async def search_news(self, query: str, limit: int = 10) -> SpaceNewsPage:
        return await self._query(
            f"search-{query}-{limit}",
            {"search": query, "limit": limit},
        )

    async def get_news_by_launch(self, launch_id: str, limit: int = 5) -> SpaceNewsPage:
        return await self._query(
            f"launch-news-{launch_id}-{limit}",
            {"launches": launch_id, "limit": limit},
        )

    async def _query(self, cache_key: str, params: dict[str, str | int]) -> SpaceNewsPage:
        cached = self._cache.get(cache_key)
        if cached is not None:
            log.info("cache_hit", upstream="news", key=cache_key)
            return cached

        log.info("cache_miss_fetching", upstream="news", key=cache_key)
        payload = await self._fetcher.get_json(
            self._articles_url,
            {**params, "ordering": "-published_at"},
        )
        page = SpaceNewsPage.from_upstream(
            parse_upstream(UpstreamArticlePage, payload, upstream=_UPSTREAM)
        )
        self._cache.set(cache_key, page)
        return page


def format_time_ago(published: datetime, now: datetime | None = None) -> str:
    """Human-friendly age of an article, e.g. ``"3 hours ago"``.

    Articles older than 30 days show their publication date instead.
    """
    if published.tzinfo is None:
        published = published.replace(tzinfo=UTC)
    now = now or datetime.now(UTC)
    seconds = int((now - published).total_seconds())

    if seconds < 60:
        return "just now"
    for unit, size, limit in (
        ("minute", 60, 3600),
        ("hour", 3600, 86400),
        ("day", 86400, 2592000),
    ):
        if seconds < limit:
            count = seconds // size
            return f"{count} {unit}{'s' if count > 1 else ''} ago"
    return published.date().isoformat()
