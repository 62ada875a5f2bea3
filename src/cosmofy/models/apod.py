from __future__ import annotations

from pydantic import BaseModel

from cosmofy.models.common import ApiModel


class UpstreamApod(BaseModel):
    """One item of the NASA APOD response (``/planetary/apod``)."""

    date: str
    title: str
    url: str
    media_type: str
    explanation: str = ""
    hdurl: str | None = None
    copyright: str | None = None
    service_version: str | None = None


class ApodImage(ApiModel):
    """Astronomy Picture of the Day, as served to the gallery."""

    id: int
    date: str
    title: str
    explanation: str
    url: str
    hdurl: str
    media_type: str
    copyright: str = "NASA"

    @classmethod
    def from_upstream(cls, item: UpstreamApod, index: int) -> ApodImage:
        # APOD credits often contain embedded newlines and padding.
        credit = " ".join((item.copyright or "").split())
        return cls(
            id=index + 1,
            date=item.date,
            title=item.title,
            explanation=item.explanation,
            url=item.url,
            hdurl=item.hdurl or item.url,
            media_type=item.media_type,
            copyright=credit or "NASA",
        )
