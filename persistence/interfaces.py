from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Protocol

from .document import Collection, Document


class ResourceStore(Protocol):
    """
    A whole JSON document held in memory and persisted as one unit.
    """

    @property
    def document(self) -> Document:
        """The live document. Only touch it inside transaction()."""
        ...

    def get(self, key: str) -> tuple[Any, bool]:
        """Return (value, found) for a top-level key."""
        ...

    def replace_collection(self, key: str, collection: Collection) -> None:
        """Swap the collection stored under key."""
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """Exclusive critical section for a read-modify-write sequence."""
        ...

    def flush(self) -> None:
        """Persist the full document atomically."""
        ...
