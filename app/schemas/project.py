"""Pydantic schemas for project documents."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import OptionalUrl, Slug, UrlOrEmpty


class ProjectLinks(BaseModel):
    """External links shown on a project card."""

    demo: OptionalUrl = Field(default=None, description="Live demo URL.")
    repo: OptionalUrl = Field(default=None, description="Source repository URL.")


class ProjectCreate(BaseModel):
    """Body of ``POST /api/projects``."""

    slug: Slug
    title: str = Field(..., min_length=1, max_length=200)
    summary: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1)
    stack: list[str] = Field(..., min_length=1, description="Technologies used.")
    cover: OptionalUrl = Field(default=None, description="Cover image URL.")
    links: ProjectLinks
    featured: bool | None = None
    order: int | None = Field(default=None, ge=0)
    published_at: datetime | None = Field(
        default=None,
        description="Publication timestamp (ISO-8601). Defaults to now.",
    )


class ProjectUpdate(BaseModel):
    """Body of ``PATCH /api/projects/{slug}``.

    Omitted fields keep their stored value. Fields are not nullable, so an
    explicit ``null`` fails validation instead of being written.
    """

    slug: Slug = None
    title: str = Field(default=None, min_length=1, max_length=200)
    summary: str = Field(default=None, min_length=1, max_length=500)
    description: str = Field(default=None, min_length=1)
    stack: list[str] = Field(default=None, min_length=1)
    cover: UrlOrEmpty = None
    links: ProjectLinks = None
    featured: bool = None
    order: int = Field(default=None, ge=0)
    published_at: datetime = None
