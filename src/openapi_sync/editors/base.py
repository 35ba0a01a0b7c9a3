"""Shared helpers for the section editors.

Every editor is pure: it takes the current slice of the document and
returns a new slice. When an edit would not change anything the input
object itself is returned, so callers can skip re-serializing with an
identity check.
"""

from collections.abc import Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from openapi_sync.errors import InvalidValueError, StructuralEditError

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")

FieldPath = str | Sequence[Any]


def normalize_path(field_path: FieldPath) -> tuple:
    """Accept either a bare field name or a sequence of path segments."""
    if isinstance(field_path, str):
        return (field_path,)
    if not isinstance(field_path, Sequence):
        raise StructuralEditError(f"Field path must be a name or a sequence, got {field_path!r}")
    return tuple(field_path)


def replace_field(model: M, field: str, value: Any) -> M:
    """Return `model` with `field` set to `value`, or `model` itself if equal."""
    if getattr(model, field) == value:
        return model
    return model.model_copy(update={field: value})


def text_value(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise InvalidValueError(f"{field} must be a string, got {type(value).__name__}")
    return value


def item_at(items: Sequence[T], index: Any, what: str) -> T:
    """Look up `items[index]`, rejecting stale or negative indexes."""
    if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(items):
        raise StructuralEditError(f"{what} index {index!r} out of range (have {len(items)})")
    return items[index]


def replace_item(items: list[T], index: int, new_item: T) -> list[T]:
    """Return a copy of `items` with one element swapped, or `items` if unchanged."""
    if items[index] is new_item:
        return items
    result = list(items)
    result[index] = new_item
    return result


def remove_item(items: list[T], index: Any, what: str) -> list[T]:
    item_at(items, index, what)
    return items[:index] + items[index + 1:]


def next_free_name(prefix: str, taken: set[str], start: int) -> str:
    """First of `prefix<start>`, `prefix<start+1>`, ... not already in `taken`."""
    n = start
    while f"{prefix}{n}" in taken:
        n += 1
    return f"{prefix}{n}"
