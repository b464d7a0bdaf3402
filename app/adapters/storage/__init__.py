"""Document store adapters.

Content is kept in named collections of JSON-like documents. The services
depend on ``AbstractDocumentStore`` only, so the in-memory store used in
tests and the JSON-file store used for small deployments are
interchangeable.
"""

from app.adapters.storage.base import AbstractDocumentStore
from app.adapters.storage.in_memory import InMemoryDocumentStore
from app.adapters.storage.json_file import JsonFileDocumentStore

__all__ = ["AbstractDocumentStore", "InMemoryDocumentStore", "JsonFileDocumentStore"]
