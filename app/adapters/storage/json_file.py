"""JSON-file document store: the in-memory store persisted after every write."""

from __future__ import annotations

import json
import logging
import os
import tempfile

from app.adapters.storage.in_memory import InMemoryDocumentStore
from app.core.errors import StorageAppError

logger = logging.getLogger(__name__)


class JsonFileDocumentStore(InMemoryDocumentStore):
    """In-memory store persisted to a single JSON file after every write."""

    def __init__(self, path: str) -> None:
        super().__init__()
        self._path = path
        self._load()

    @property
    def path(self) -> str:
        return self._path

    def _load(self) -> None:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info("storage.file_missing", extra={"path": self._path})
            return
        except (json.JSONDecodeError, OSError) as e:
            logger.error("storage.load_failed", extra={"path": self._path, "error_msg": str(e)})
            raise StorageAppError(
                code="storage_load_failed",
                message=f"Could not load data file {self._path}",
            ) from e

        if not isinstance(data, dict):
            raise StorageAppError(
                code="storage_load_failed",
                message=f"Data file {self._path} must contain a JSON object",
            )
        self._collections = {name: list(docs) for name, docs in data.items()}
        logger.info(
            "storage.loaded",
            extra={"path": self._path, "collections": sorted(self._collections)},
        )

    def _changed(self) -> None:
        """Atomically write data to disk via temp-file + os.replace."""
        dir_name = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(dir_name, exist_ok=True)
        try:
            fd, tmp = tempfile.mkstemp(dir=dir_name, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._collections, f, indent=2, default=str)
            os.replace(tmp, self._path)
        except OSError as e:
            logger.error("storage.flush_failed", extra={"path": self._path, "error_msg": str(e)})
            raise StorageAppError(
                code="storage_write_failed",
                message="Failed to persist data",
            ) from e
