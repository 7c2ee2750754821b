from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from json_store import atomic_write_json, read_json_bytes

from .document import Collection, Document, is_collection, load_document
from .errors import ParseFailureError, PersistenceFailureError, ResourceNotFoundError
from .interfaces import ResourceStore
from .locks import GLOBAL_PATH_LOCKS

logger = logging.getLogger(__name__)


class DiskResourceStore(ResourceStore):
    """
    Keeps the whole JSON document in memory and mirrors it to a single file.

    - Loaded once, at construction time.
    - Every mutation is followed by flush() while the file lock is still held.
    - Writes are atomic (temp file + replace).
    """

    def __init__(self, path: Path, document: Document):
        self._path = path
        self._document = document
        self._lock = GLOBAL_PATH_LOCKS.lock_for(path)

    @classmethod
    def open(cls, path: Path) -> "DiskResourceStore":
        try:
            raw = read_json_bytes(path)
        except OSError as e:
            raise ParseFailureError(f"failed to parse file: {path}: {e.strerror or e}") from e
        try:
            document = load_document(raw)
        except ParseFailureError as e:
            raise ParseFailureError(f"{e}: {path}") from e
        store = cls(path, document)
        logger.info(
            "STORE LOAD: %s collections=%s singletons=%s",
            path,
            sorted(store.collection_keys()),
            sorted(store.singleton_keys()),
        )
        return store

    @property
    def path(self) -> Path:
        return self._path

    @property
    def document(self) -> Document:
        return self._document

    def collection_keys(self) -> list[str]:
        return [k for k, v in self._document.items() if is_collection(v)]

    def singleton_keys(self) -> list[str]:
        return [k for k, v in self._document.items() if not is_collection(v)]

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    def get(self, key: str) -> tuple[Any, bool]:
        with self._lock:
            if key not in self._document:
                return None, False
            return self._document[key], True

    def replace_collection(self, key: str, collection: Collection) -> None:
        with self._lock:
            current, found = self.get(key)
            if not found or not is_collection(current):
                raise ResourceNotFoundError()
            self._document[key] = collection

    def flush(self) -> None:
        with self._lock:
            try:
                atomic_write_json(self._path, self._document)
            except (OSError, TypeError, ValueError) as e:
                logger.error(
                    "STORE FLUSH: failed to write %s, memory and disk now differ: %r",
                    self._path,
                    e,
                )
                raise PersistenceFailureError() from e
