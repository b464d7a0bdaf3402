"""Contact form submissions and the admin inbox."""

from __future__ import annotations

import logging

from app.adapters.storage.base import AbstractDocumentStore, Document
from app.core import cache_tags
from app.schemas.contact import ContactMessageCreate
from app.services.content_service import Page, clamp_limit, paginate, utc_now_iso
from app.utils.tagged_cache import TaggedTTLCache

logger = logging.getLogger(__name__)


class ContactService:
    """Stores contact messages and lists them newest first."""

    collection = "contact_messages"

    DEFAULT_LIMIT = 20
    MAX_LIMIT = 100

    def __init__(self, store: AbstractDocumentStore, cache: TaggedTTLCache) -> None:
        self.store = store
        self.cache = cache

    def submit(self, payload: ContactMessageCreate) -> Document:
        """Persist a validated submission.

        Values are trimmed and the email lower-cased before storing.
        """
        doc = self.store.insert(
            self.collection,
            {
                "name": payload.name.strip(),
                "email": str(payload.email).strip().lower(),
                "message": payload.message.strip(),
                "created_at": utc_now_iso(),
            },
        )
        logger.info(
            "contact.received",
            extra={"message_id": doc["id"], "message_chars": len(doc["message"])},
        )
        self.cache.invalidate_tag(cache_tags.CONTACT)
        return doc

    def list(self, *, page: int = 1, limit: int | None = None) -> Page:
        docs = self.store.find(self.collection)
        docs.sort(key=lambda d: d.get("created_at") or "", reverse=True)
        return paginate(
            docs, page, clamp_limit(limit, default=self.DEFAULT_LIMIT, maximum=self.MAX_LIMIT)
        )
