from __future__ import annotations

import copy
import math
from typing import Any

from pydantic import JsonValue, TypeAdapter, ValidationError

from .errors import BadRequestError, ParseFailureError

Resource = dict[str, JsonValue]
Collection = list[Resource]
Singleton = JsonValue
# Collections are JSON arrays, so both classifications fit one value type.
Document = dict[str, JsonValue]

ID_FIELD = "id"

_OBJECT_ADAPTER: TypeAdapter[dict[str, JsonValue]] = TypeAdapter(dict[str, JsonValue])


def load_document(raw: bytes | str) -> Document:
    """
    Parse the backing file contents into a Document.

    The top level must be a JSON object. Array values become Collections and
    every other value is a Singleton; the classification is fixed from here on.
    """
    try:
        document = _OBJECT_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise ParseFailureError(f"failed to parse file: {_first_error(e)}") from e
    if has_non_finite(document):
        raise ParseFailureError("failed to parse file: NaN or Infinity is not valid JSON")
    return document


def parse_resource_body(raw: bytes | str) -> Resource:
    """Parse a request body that must be a JSON object."""
    if not raw.strip():
        raise BadRequestError()
    try:
        body = _OBJECT_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise BadRequestError() from e
    # 1e999, NaN and Infinity parse as floats but cannot be written back as JSON.
    if has_non_finite(body):
        raise BadRequestError()
    return body


def has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(has_non_finite(v) for v in value.values())
    if isinstance(value, list):
        return any(has_non_finite(v) for v in value)
    return False


def is_collection(value: Any) -> bool:
    return isinstance(value, list)


def resource_id(resource: Any) -> str | None:
    if not isinstance(resource, dict):
        return None
    rid = resource.get(ID_FIELD)
    return rid if isinstance(rid, str) else None


def find_index(collection: Collection, rid: str) -> int | None:
    for i, resource in enumerate(collection):
        if resource_id(resource) == rid:
            return i
    return None


def clone(value: Any) -> Any:
    return copy.deepcopy(value)


def _first_error(e: ValidationError) -> str:
    errors = e.errors()
    if not errors:
        return "invalid JSON"
    return str(errors[0].get("msg", "invalid JSON"))
