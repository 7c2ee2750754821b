from __future__ import annotations


class StorageError(Exception):
    """Base class for every failure the storage engine reports to callers."""

    message = "storage error"
    status_code = 500

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)

    @property
    def error(self) -> str:
        return str(self)


class BadRequestError(StorageError):
    """Mutation payload is malformed, empty, or carries no effective update."""

    message = "bad request"
    status_code = 400


class ResourceNotFoundError(StorageError):
    """Collection key or resource id does not exist."""

    message = "resource not found"
    status_code = 404


class ParseFailureError(StorageError):
    """Backing file is unreadable or not a JSON object. Fatal at startup."""

    message = "failed to parse file"


class PersistenceFailureError(StorageError):
    """
    Backing file could not be rewritten after a mutation.

    The in-memory document already holds the change, so memory and disk have
    diverged until the next successful write.
    """

    message = "failed to persist changes"
