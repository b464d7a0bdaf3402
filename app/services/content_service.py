"""Content services for portfolio collections.

Each service owns one collection of the document store and implements the
persistence and cache-invalidation steps of a write:

1. Check uniqueness / existence of the addressed key
2. Perform the single create/update/delete operation
3. Invalidate the collection tag plus the item tag of the affected key

Authorization, rate limiting and body validation run before these services
are reached (see ``app.api.routes``).
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from app.adapters.storage.base import AbstractDocumentStore, Document, Predicate
from app.core import cache_tags
from app.core.errors import ConflictAppError, NotFoundAppError
from app.utils.tagged_cache import TaggedTTLCache

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_utc_iso(value: datetime | str) -> str:
    """Normalize a datetime (or ISO string) to ISO-8601 UTC; naive means UTC."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


@dataclass(frozen=True)
class Page:
    """A page of documents plus the numbers needed to render pagination."""

    items: list[Document]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_response(self) -> dict[str, Any]:
        return {
            "data": self.items,
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "total_pages": self.total_pages,
            },
        }


def paginate(items: list[Document], page: int, limit: int) -> Page:
    """Slice ``items`` to the requested 1-based page."""
    start = (page - 1) * limit
    return Page(items=items[start : start + limit], page=page, limit=limit, total=len(items))


def clamp_limit(limit: int | None, *, default: int, maximum: int) -> int:
    """Apply the endpoint's default and upper bound to a requested page size."""
    return min(limit or default, maximum)


class CollectionService(ABC):
    """CRUD over one collection addressed by a unique key field.

    Subclasses set the collection name, key field, display label, and
    the cache tags touched by a write.
    """

    collection: str = ""
    key_field: str = "slug"
    label: str = "Document"

    def __init__(self, store: AbstractDocumentStore, cache: TaggedTTLCache) -> None:
        self.store = store
        self.cache = cache

    @abstractmethod
    def tags_for(self, key: str | None = None) -> list[str]:
        """Cache tags a write to ``key`` invalidates."""

    def not_found(self) -> NotFoundAppError:
        return NotFoundAppError(
            code=f"{self.collection}_not_found",
            message=f"{self.label} not found",
        )

    def conflict(self) -> ConflictAppError:
        return ConflictAppError(
            code=f"{self.collection}_conflict",
            message=f"{self.label} with this {self.key_field} already exists",
        )

    def find(self, predicate: Predicate | None = None) -> list[Document]:
        return self.store.find(self.collection, predicate)

    def get(self, key: str) -> Document:
        """Return one document.

        Raises:
            NotFoundAppError: If no document has this key.
        """
        doc = self.store.find_one(self.collection, self.key_field, key)
        if doc is None:
            raise self.not_found()
        return doc

    def create(self, data: Document) -> Document:
        """Insert a new document.

        Raises:
            ConflictAppError: If the key is already taken.
        """
        key = data[self.key_field]
        if self.store.find_one(self.collection, self.key_field, key) is not None:
            logger.info(
                "content.conflict",
                extra={"collection": self.collection, "key": key},
            )
            raise self.conflict()

        doc = self.store.insert(self.collection, self.prepare_create(data))
        logger.info("content.created", extra={"collection": self.collection, "key": key})
        self.invalidate(key)
        return doc

    def update(self, key: str, changes: Document) -> Document:
        """Merge ``changes`` into the document addressed by ``key``.

        Raises:
            NotFoundAppError: If no document has this key.
            ConflictAppError: If ``changes`` renames the key onto an existing one.
        """
        new_key = changes.get(self.key_field)
        if new_key is not None and new_key != key:
            if self.store.find_one(self.collection, self.key_field, new_key) is not None:
                raise self.conflict()

        doc = self.store.update(
            self.collection, self.key_field, key, self.prepare_update(changes)
        )
        if doc is None:
            raise self.not_found()

        logger.info(
            "content.updated",
            extra={
                "collection": self.collection,
                "key": key,
                "fields": sorted(changes),
            },
        )
        self.invalidate(key)
        if new_key is not None and new_key != key:
            self.invalidate(new_key)
        return doc

    def delete(self, key: str) -> Document:
        """Remove the document addressed by ``key``.

        Raises:
            NotFoundAppError: If no document has this key.
        """
        doc = self.store.delete(self.collection, self.key_field, key)
        if doc is None:
            raise self.not_found()

        logger.info("content.deleted", extra={"collection": self.collection, "key": key})
        self.invalidate(key)
        return doc

    def invalidate(self, key: str | None = None) -> None:
        self.cache.invalidate_tags(self.tags_for(key))

    def prepare_create(self, data: Document) -> Document:
        return data

    def prepare_update(self, changes: Document) -> Document:
        return changes


class ProjectService(CollectionService):
    collection = "projects"
    key_field = "slug"
    label = "Project"

    DEFAULT_LIMIT = 10
    MAX_LIMIT = 50

    def tags_for(self, key: str | None = None) -> list[str]:
        return cache_tags.project_tags(key)

    def list(
        self,
        *,
        featured: bool | None = None,
        stack: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> Page:
        """List projects, featured/stack filtered, ``order`` asc then newest first."""

        def matches(doc: Document) -> bool:
            if featured and not doc.get("featured"):
                return False
            if stack and stack not in doc.get("stack", []):
                return False
            return True

        docs = self.find(matches)
        docs.sort(key=lambda d: d.get("published_at") or "", reverse=True)
        docs.sort(key=lambda d: d.get("order", 0))
        return paginate(
            docs, page, clamp_limit(limit, default=self.DEFAULT_LIMIT, maximum=self.MAX_LIMIT)
        )

    def prepare_create(self, data: Document) -> Document:
        now = utc_now_iso()
        published_at = data.get("published_at")
        return {
            **data,
            "featured": bool(data.get("featured") or False),
            "order": data.get("order") or 0,
            "published_at": to_utc_iso(published_at) if published_at else now,
            "updated_at": now,
        }

    def prepare_update(self, changes: Document) -> Document:
        prepared = dict(changes)
        if prepared.get("published_at"):
            prepared["published_at"] = to_utc_iso(prepared["published_at"])
        prepared["updated_at"] = utc_now_iso()
        return prepared


class ExperienceService(CollectionService):
    collection = "experience"
    key_field = "slug"
    label = "Experience"

    DEFAULT_LIMIT = 20
    MAX_LIMIT = 50

    def tags_for(self, key: str | None = None) -> list[str]:
        return cache_tags.experience_tags(key)

    def list(self, *, page: int = 1, limit: int | None = None) -> Page:
        """List entries by ``order`` asc, then most recent start date first."""
        docs = self.find()
        docs.sort(key=lambda d: (d.get("period") or {}).get("from") or "", reverse=True)
        docs.sort(key=lambda d: d.get("order", 0))
        return paginate(
            docs, page, clamp_limit(limit, default=self.DEFAULT_LIMIT, maximum=self.MAX_LIMIT)
        )

    def prepare_create(self, data: Document) -> Document:
        return {**data, "order": data.get("order") or 0, "updated_at": utc_now_iso()}

    def prepare_update(self, changes: Document) -> Document:
        return {**changes, "updated_at": utc_now_iso()}


class TechService(CollectionService):
    collection = "tech"
    key_field = "key"
    label = "Tech"

    def tags_for(self, key: str | None = None) -> list[str]:
        return [cache_tags.TECH]

    def list(self, *, category: str | None = None) -> list[Document]:
        """List tech entries, optionally for one category, by ``order`` then name."""
        docs = self.find(lambda d: category is None or d.get("category") == category)
        docs.sort(key=lambda d: (d.get("order", 0), d.get("name", "")))
        return docs

    def prepare_create(self, data: Document) -> Document:
        return {**data, "order": data.get("order") or 0}
