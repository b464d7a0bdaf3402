"""Page section service (hero/about/contact copy)."""

from __future__ import annotations

import logging

from app.adapters.storage.base import Document
from app.core import cache_tags
from app.services.content_service import CollectionService, utc_now_iso

logger = logging.getLogger(__name__)


class SectionService(CollectionService):
    collection = "sections"
    key_field = "key"
    label = "Section"

    def tags_for(self, key: str | None = None) -> list[str]:
        return cache_tags.section_tags(key)

    def list(self) -> list[Document]:
        return self.find()

    def upsert(self, key: str, changes: Document) -> Document:
        """Update a section, creating it when it does not exist yet."""
        doc = self.store.update(
            self.collection,
            self.key_field,
            key,
            {**changes, "updated_at": utc_now_iso()},
            upsert=True,
        )
        logger.info(
            "content.upserted",
            extra={"collection": self.collection, "key": key, "fields": sorted(changes)},
        )
        self.invalidate(key)
        return doc
