from __future__ import annotations

from cosmofy.models.apod import ApodImage, UpstreamApod
from cosmofy.models.asteroid import Asteroid, UpstreamNeoFeed
from cosmofy.models.cache import CacheEntry
from cosmofy.models.common import ApiModel, Source
from cosmofy.models.iss import CrewMember, IssPass, IssPosition, UpstreamIssNow
from cosmofy.models.location import LocationInfo, UpstreamReverseGeocode
from cosmofy.models.news import SpaceNewsArticle, SpaceNewsPage, UpstreamArticlePage
from cosmofy.models.sky import SkyConditions

__all__ = [
    # common
    "ApiModel",
    "Source",
    # cache
    "CacheEntry",
    # apod
    "UpstreamApod",
    "ApodImage",
    # asteroids
    "UpstreamNeoFeed",
    "Asteroid",
    # iss
    "UpstreamIssNow",
    "IssPosition",
    "IssPass",
    "CrewMember",
    # news
    "UpstreamArticlePage",
    "SpaceNewsArticle",
    "SpaceNewsPage",
    # location
    "UpstreamReverseGeocode",
    "LocationInfo",
    # sky
    "SkyConditions",
]
