"""Pydantic schemas for page sections (hero/about/contact)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SectionKey = Literal["hero", "about", "contact"]
SECTION_KEYS: tuple[str, ...] = ("hero", "about", "contact")


class SectionUpdate(BaseModel):
    """Body of ``PATCH /api/sections``. The section is created if missing.

    Omitted fields are kept; ``null`` is rejected.
    """

    key: SectionKey = Field(..., description="Section to update.")
    title: str = Field(default=None, max_length=200)
    subtitle: str = Field(default=None, max_length=500)
    body: str = None
