"""Validated query parameters for the HTTP endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PageInput(BaseModel):
    limit: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class SearchInput(BaseModel):
    q: str = Field(min_length=1, max_length=200)
    limit: int = Field(default=10, ge=1, le=100)


class LaunchNewsInput(BaseModel):
    launch_id: str = Field(min_length=1, max_length=100)
    limit: int = Field(default=5, ge=1, le=100)


class CoordinatesInput(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class PassesInput(CoordinatesInput):
    n: int = Field(default=5, ge=1, le=20)


class ApodDateInput(BaseModel):
    date: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")


class FeaturedInput(BaseModel):
    limit: int = Field(default=5, ge=1, le=100)


class AsteroidsInput(BaseModel):
    limit: int = Field(default=10, ge=1, le=50)
