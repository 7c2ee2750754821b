from __future__ import annotations

import asyncio
from typing import Any, Protocol

from .document import Collection, Document, Resource
from .operations import ResourceOperations


class AsyncResourceRepository(Protocol):
    async def snapshot(self) -> Document: ...
    async def read(self, key: str) -> Any: ...

    async def list(self, key: str) -> Collection: ...
    async def get(self, key: str, rid: str) -> Resource: ...

    async def create(self, key: str, body: Any) -> Resource: ...
    async def replace(self, key: str, rid: str, body: Any) -> Resource: ...
    async def patch(self, key: str, rid: str, body: Any) -> Resource: ...
    async def delete(self, key: str, rid: str) -> None: ...


class AsyncDiskResourceRepository(AsyncResourceRepository):
    """
    Async wrapper around ResourceOperations.
    Uses asyncio.to_thread so the store lock and the file write never block
    the event loop.
    """

    def __init__(self, operations: ResourceOperations) -> None:
        self._ops = operations

    @property
    def operations(self) -> ResourceOperations:
        return self._ops

    async def snapshot(self) -> Document:
        return await asyncio.to_thread(self._ops.snapshot)

    async def read(self, key: str) -> Any:
        return await asyncio.to_thread(self._ops.read, key)

    async def list(self, key: str) -> Collection:
        return await asyncio.to_thread(self._ops.list, key)

    async def get(self, key: str, rid: str) -> Resource:
        return await asyncio.to_thread(self._ops.get, key, rid)

    async def create(self, key: str, body: Any) -> Resource:
        return await asyncio.to_thread(self._ops.create, key, body)

    async def replace(self, key: str, rid: str, body: Any) -> Resource:
        return await asyncio.to_thread(self._ops.replace, key, rid, body)

    async def patch(self, key: str, rid: str, body: Any) -> Resource:
        return await asyncio.to_thread(self._ops.patch, key, rid, body)

    async def delete(self, key: str, rid: str) -> None:
        await asyncio.to_thread(self._ops.delete, key, rid)
