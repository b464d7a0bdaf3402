"""In-memory document store.

Notes:
- Per-process only: data is lost on restart.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import copy
import threading
import uuid
from typing import Any

from app.adapters.storage.base import AbstractDocumentStore, Document, Predicate


class InMemoryDocumentStore(AbstractDocumentStore):
    """Dict-of-lists store preserving insertion order within a collection."""

    def __init__(self, initial: dict[str, list[Document]] | None = None) -> None:
        self._lock = threading.RLock()
        self._collections: dict[str, list[Document]] = copy.deepcopy(initial or {})

    def find(self, collection: str, predicate: Predicate | None = None) -> list[Document]:
        with self._lock:
            docs = self._collections.get(collection, [])
            return [copy.deepcopy(d) for d in docs if predicate is None or predicate(d)]

    def find_one(self, collection: str, field: str, value: Any) -> Document | None:
        with self._lock:
            doc = self._find_locked(collection, field, value)
            return copy.deepcopy(doc) if doc is not None else None

    def insert(self, collection: str, document: Document) -> Document:
        with self._lock:
            stored = copy.deepcopy(document)
            stored.setdefault("id", uuid.uuid4().hex)
            self._collections.setdefault(collection, []).append(stored)
            self._changed()
            return copy.deepcopy(stored)

    def update(
        self,
        collection: str,
        field: str,
        value: Any,
        changes: Document,
        *,
        upsert: bool = False,
    ) -> Document | None:
        with self._lock:
            doc = self._find_locked(collection, field, value)
            if doc is None:
                if not upsert:
                    return None
                return self.insert(collection, {field: value, **changes})

            doc.update(copy.deepcopy(changes))
            self._changed()
            return copy.deepcopy(doc)

    def delete(self, collection: str, field: str, value: Any) -> Document | None:
        with self._lock:
            docs = self._collections.get(collection, [])
            for index, doc in enumerate(docs):
                if doc.get(field) == value:
                    removed = docs.pop(index)
                    self._changed()
                    return removed
            return None

    def clear(self, collection: str | None = None) -> None:
        with self._lock:
            if collection is None:
                self._collections.clear()
            else:
                self._collections.pop(collection, None)
            self._changed()

    def snapshot(self) -> dict[str, list[Document]]:
        """Deep copy of every collection."""
        with self._lock:
            return copy.deepcopy(self._collections)

    def _find_locked(self, collection: str, field: str, value: Any) -> Document | None:
        for doc in self._collections.get(collection, []):
            if doc.get(field) == value:
                return doc
        return None

    def _changed(self) -> None:
        """Hook called (under the lock) after every write."""
