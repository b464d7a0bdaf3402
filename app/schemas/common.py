"""Shared field types."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, HttpUrl

SLUG_PATTERN = r"^[a-z0-9-]+$"

Slug = Annotated[
    str,
    Field(
        min_length=1,
        max_length=100,
        pattern=SLUG_PATTERN,
        description="Lowercase alphanumeric with hyphens",
    ),
]

# An absolute http(s) URL, or an empty string meaning "cleared".
OptionalUrl = HttpUrl | Literal[""] | None


# Same as ``OptionalUrl`` minus ``null``; used where omission, not null,
# means "leave unchanged".
UrlOrEmpty = HttpUrl | Literal[""]
