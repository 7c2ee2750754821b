from __future__ import annotations

import uuid
from typing import Callable, Iterable

from .document import ID_FIELD, Collection, Resource, resource_id

IdFactory = Callable[[], str]


def generate_id() -> str:
    return uuid.uuid4().hex


def used_ids(collection: Iterable[Resource]) -> set[str]:
    return {rid for rid in (resource_id(r) for r in collection) if rid is not None}


def resolve_create_id(collection: Collection, body: Resource, *, id_factory: IdFactory = generate_id) -> str:
    """
    Pick the id for a new resource.

    A string id supplied in the body is kept when no resource in the same
    collection already uses it. Anything else (missing, wrong type, colliding)
    gets a freshly generated id that is checked against the collection too.
    """
    taken = used_ids(collection)
    requested = body.get(ID_FIELD)
    if isinstance(requested, str) and requested not in taken:
        return requested
    while True:
        candidate = id_factory()
        if candidate not in taken:
            return candidate


def attach_id(body: Resource, rid: str) -> Resource:
    """Return a copy of body whose id is rid, whatever the body said."""
    out: Resource = {ID_FIELD: rid}
    out.update((k, v) for k, v in body.items() if k != ID_FIELD)
    return out


def has_effective_update(body: Resource) -> bool:
    # {} and {"id": ...} change nothing once the id is re-attached.
    return any(k != ID_FIELD for k in body)
