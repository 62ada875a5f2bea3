from __future__ import annotations

from datetime import datetime

from pydantic import AwareDatetime, BaseModel

from cosmofy.models.common import ApiModel


class UpstreamLaunchRef(BaseModel):
    launch_id: str
    provider: str


class UpstreamEventRef(BaseModel):
    event_id: int | str
    provider: str


class UpstreamArticle(BaseModel):
    """One article from the Spaceflight News API v4 ``/articles`` endpoint."""

    id: int
    title: str
    url: str
    image_url: str | None = None
    news_site: str
    summary: str = ""
    published_at: AwareDatetime
    updated_at: AwareDatetime | None = None
    featured: bool = False
    launches: list[UpstreamLaunchRef] = []
    events: list[UpstreamEventRef] = []


class UpstreamArticlePage(BaseModel):
    count: int
    next: str | None = None
    previous: str | None = None
    results: list[UpstreamArticle]


class ArticleRef(ApiModel):
    id: str
    provider: str


class SpaceNewsArticle(ApiModel):
    id: int
    title: str
    url: str
    image_url: str
    news_site: str
    summary: str
    published_at: datetime
    updated_at: datetime
    featured: bool
    launches: list[ArticleRef]
    events: list[ArticleRef]

    @classmethod
    def from_upstream(cls, item: UpstreamArticle) -> SpaceNewsArticle:
        return cls(
            id=item.id,
            title=item.title,
            url=item.url,
            image_url=item.image_url or "",
            news_site=item.news_site,
            summary=item.summary,
            published_at=item.published_at,
            updated_at=item.updated_at or item.published_at,
            featured=item.featured,
            launches=[ArticleRef(id=ref.launch_id, provider=ref.provider) for ref in item.launches],
            events=[ArticleRef(id=str(ref.event_id), provider=ref.provider) for ref in item.events],
        )


class SpaceNewsPage(ApiModel):
    count: int
    next: str | None
    previous: str | None
    results: list[SpaceNewsArticle]

    @classmethod
    def from_upstream(cls, page: UpstreamArticlePage) -> SpaceNewsPage:
        return cls(
            count=page.count,
            next=page.next,
            previous=page.previous,
            results=[SpaceNewsArticle.from_upstream(item) for item in page.results],
        )
