from __future__ import annotations

import logging
from typing import Any

from .document import ID_FIELD, Collection, Document, Resource, clone, find_index, has_non_finite, is_collection
from .errors import BadRequestError, ResourceNotFoundError
from .identifiers import IdFactory, attach_id, generate_id, has_effective_update, resolve_create_id
from .interfaces import ResourceStore

logger = logging.getLogger(__name__)


class ResourceOperations:
    """
    CRUD contract over a ResourceStore.

    Each public method is one atomic step: the read, the change and the flush
    all happen inside a single store transaction. Results are deep copies, so
    callers can never alias stored state.
    """

    def __init__(self, store: ResourceStore, *, id_factory: IdFactory = generate_id):
        self._store = store
        self._id_factory = id_factory

    @property
    def store(self) -> ResourceStore:
        return self._store

    # ---------------------------------------------------------------
    # Reads
    # ---------------------------------------------------------------
    def snapshot(self) -> Document:
        with self._store.transaction():
            return clone(self._store.document)

    def read(self, key: str) -> Any:
        """Whatever lives under key: a singleton value or a whole collection."""
        with self._store.transaction():
            value, found = self._store.get(key)
            if not found:
                raise ResourceNotFoundError()
            return clone(value)

    def list(self, key: str) -> Collection:
        with self._store.transaction():
            return clone(self._collection(key))

    def get(self, key: str, rid: str) -> Resource:
        with self._store.transaction():
            collection = self._collection(key)
            return clone(collection[self._index(collection, rid)])

    # ---------------------------------------------------------------
    # Writes
    # ---------------------------------------------------------------
    def create(self, key: str, body: Any) -> Resource:
        self._require_body(body)
        with self._store.transaction():
            collection = self._collection(key)
            rid = resolve_create_id(collection, body, id_factory=self._id_factory)
            resource = attach_id(clone(body), rid)
            self._store.replace_collection(key, [*collection, resource])
            self._store.flush()
            logger.info("CREATE %s/%s", key, rid)
            return clone(resource)

    def replace(self, key: str, rid: str, body: Any) -> Resource:
        self._require_body(body)
        with self._store.transaction():
            collection = self._collection(key)
            index = self._index(collection, rid)
            resource = attach_id(clone(body), rid)
            updated = list(collection)
            updated[index] = resource
            self._store.replace_collection(key, updated)
            self._store.flush()
            logger.info("REPLACE %s/%s", key, rid)
            return clone(resource)

    def patch(self, key: str, rid: str, body: Any) -> Resource:
        self._require_body(body)
        if not has_effective_update(body):
            raise BadRequestError()
        with self._store.transaction():
            collection = self._collection(key)
            index = self._index(collection, rid)
            merged = dict(collection[index])
            merged.update(clone(body))
            merged[ID_FIELD] = rid
            updated = list(collection)
            updated[index] = merged
            self._store.replace_collection(key, updated)
            self._store.flush()
            logger.info("PATCH %s/%s fields=%s", key, rid, sorted(k for k in body if k != ID_FIELD))
            return clone(merged)

    def delete(self, key: str, rid: str) -> None:
        with self._store.transaction():
            collection = self._collection(key)
            index = self._index(collection, rid)
            self._store.replace_collection(key, collection[:index] + collection[index + 1 :])
            self._store.flush()
            logger.info("DELETE %s/%s", key, rid)

    # ---------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------
    def _collection(self, key: str) -> Collection:
        value, found = self._store.get(key)
        if not found or not is_collection(value):
            raise ResourceNotFoundError()
        return value

    @staticmethod
    def _index(collection: Collection, rid: str) -> int:
        index = find_index(collection, rid)
        if index is None:
            raise ResourceNotFoundError()
        return index

    @staticmethod
    def _require_body(body: Any) -> None:
        if not isinstance(body, dict) or not body or has_non_finite(body):
            raise BadRequestError()
