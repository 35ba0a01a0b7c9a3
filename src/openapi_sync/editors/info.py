"""API information editor (title, description, version)."""

from typing import Any

from openapi_sync.errors import StructuralEditError
from openapi_sync.parser.base import Info

from .base import FieldPath, normalize_path, replace_field, text_value

INFO_FIELDS = ("title", "description", "version")


def apply(info: Info, field_path: FieldPath, value: Any) -> Info:
    """Set one info field."""
    path = normalize_path(field_path)
    if len(path) != 1 or path[0] not in INFO_FIELDS:
        raise StructuralEditError(f"Unknown info field: {path!r}")
    field = path[0]
    return replace_field(info, field, text_value(value, field))
