"""Document store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

Document = dict[str, Any]
Predicate = Callable[[Document], bool]


class AbstractDocumentStore(ABC):
    """Collection-oriented store addressed by a unique key field.

    Every method returns copies, so callers can never mutate stored state
    by accident.
    """

    @abstractmethod
    def find(self, collection: str, predicate: Predicate | None = None) -> list[Document]:
        """Return all documents of ``collection`` matching ``predicate``."""
        raise NotImplementedError

    @abstractmethod
    def find_one(self, collection: str, field: str, value: Any) -> Document | None:
        """Return the first document whose ``field`` equals ``value``."""
        raise NotImplementedError

    @abstractmethod
    def insert(self, collection: str, document: Document) -> Document:
        """Store a new document, assigning it an ``id``."""
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        collection: str,
        field: str,
        value: Any,
        changes: Document,
        *,
        upsert: bool = False,
    ) -> Document | None:
        """Merge ``changes`` into the matching document.

        Returns:
            The updated document, or None when nothing matched and
            ``upsert`` is False.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, collection: str, field: str, value: Any) -> Document | None:
        """Remove the matching document and return it (None if absent)."""
        raise NotImplementedError

    @abstractmethod
    def clear(self, collection: str | None = None) -> None:
        """Drop one collection, or everything when ``collection`` is None."""
        raise NotImplementedError

    def count(self, collection: str, predicate: Predicate | None = None) -> int:
        return len(self.find(collection, predicate))
