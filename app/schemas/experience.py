"""Pydantic schemas for work experience documents."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import OptionalUrl, Slug, UrlOrEmpty

YearMonth = Annotated[
    str,
    Field(pattern=r"^\d{4}-\d{2}$", description="Period format must be YYYY-MM"),
]


class Period(BaseModel):
    """Employment period; ``to`` is omitted for the current position."""

    model_config = ConfigDict(populate_by_name=True)

    from_: YearMonth = Field(..., alias="from")
    to: YearMonth | None = None


class ExperienceCreate(BaseModel):
    """Body of ``POST /api/experience``."""

    slug: Slug
    company: str = Field(..., min_length=1, max_length=200)
    role: str = Field(..., min_length=1, max_length=200)
    period: Period
    location: str | None = Field(default=None, max_length=200)
    bullets: list[str] = Field(..., min_length=1)
    stack: list[str] = Field(..., min_length=1)
    link: OptionalUrl = None
    order: int | None = Field(default=None, ge=0)


class ExperienceUpdate(BaseModel):
    """Body of ``PATCH /api/experience/{slug}``; omitted fields are kept, ``null`` is rejected."""

    slug: Slug = None
    company: str = Field(default=None, min_length=1, max_length=200)
    role: str = Field(default=None, min_length=1, max_length=200)
    period: Period = None
    location: str = Field(default=None, max_length=200)
    bullets: list[str] = Field(default=None, min_length=1)
    stack: list[str] = Field(default=None, min_length=1)
    link: UrlOrEmpty = None
    order: int = Field(default=None, ge=0)
