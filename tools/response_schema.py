"""Describe the fields of a sample agent reply."""

from collections.abc import Mapping
from typing import Any

from models.response import ResponseField
from tools.text_utils import truncate

SAMPLE_VALUE_CHARS = 100
MAX_FIELD_DEPTH = 5


def field_type(value: Any) -> str:
    """JSON type name of a value: string, number, boolean, array, object, null or unknown."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return "unknown"


def _sample(value: Any) -> str:
    kind = field_type(value)
    if kind == "array":
        return f"[{len(value)} items]"
    if kind == "object":
        return f"{{{len(value)} keys}}"
    if kind == "null":
        return "null"
    if kind == "boolean":
        return "true" if value else "false"
    return truncate(str(value), SAMPLE_VALUE_CHARS)


def detect_fields(value: Any, path: str = "", max_depth: int = MAX_FIELD_DEPTH) -> list[ResponseField]:
    """List the fields of a mapping, descending into objects and the first array element.

    Nesting below ``max_depth`` levels is not described.
    """
    if not isinstance(value, Mapping) or max_depth <= 0:
        return []

    fields = []
    for name, item in value.items():
        item_path = f"{path}.{name}" if path else str(name)
        kind = field_type(item)
        children: list[ResponseField] = []
        if kind == "object":
            children = detect_fields(item, item_path, max_depth - 1)
        elif kind == "array" and item and isinstance(item[0], Mapping):
            children = detect_fields(item[0], f"{item_path}[0]", max_depth - 1)
        fields.append(ResponseField(
            name=str(name),
            type=kind,
            sample_value=_sample(item),
            path=item_path,
            is_array=kind == "array",
            children=children,
        ))
    return fields
