"""Pydantic schemas for tech stack entries."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.common import OptionalUrl, SLUG_PATTERN, UrlOrEmpty

TechCategory = Literal[
    "language",
    "frontend",
    "backend",
    "database",
    "devops",
    "tool",
    "other",
]


class TechCreate(BaseModel):
    """Body of ``POST /api/tech``."""

    key: str = Field(
        ...,
        min_length=1,
        max_length=50,
        pattern=SLUG_PATTERN,
        description="Unique identifier, e.g. 'nextjs'.",
    )
    name: str = Field(..., min_length=1, max_length=100, description="Display name.")
    category: TechCategory
    website: OptionalUrl = None
    order: int | None = Field(default=None, ge=0)


class TechUpdate(BaseModel):
    """Body of ``PATCH /api/tech?key=...``; omitted fields are kept, ``null`` is rejected."""

    key: str = Field(default=None, min_length=1, max_length=50, pattern=SLUG_PATTERN)
    name: str = Field(default=None, min_length=1, max_length=100)
    category: TechCategory = None
    website: UrlOrEmpty = None
    order: int = Field(default=None, ge=0)
