from __future__ import annotations

from .document import ID_FIELD, Collection, Document, Resource, load_document, parse_resource_body
from .errors import (
    BadRequestError,
    ParseFailureError,
    PersistenceFailureError,
    ResourceNotFoundError,
    StorageError,
)
from .interfaces import ResourceStore
from .operations import ResourceOperations
from .repositories import AsyncDiskResourceRepository, AsyncResourceRepository
from .store import DiskResourceStore

__all__ = [
    "ID_FIELD",
    "Collection",
    "Document",
    "Resource",
    "load_document",
    "parse_resource_body",
    "StorageError",
    "BadRequestError",
    "ResourceNotFoundError",
    "ParseFailureError",
    "PersistenceFailureError",
    "ResourceStore",
    "DiskResourceStore",
    "ResourceOperations",
    "AsyncResourceRepository",
    "AsyncDiskResourceRepository",
]
