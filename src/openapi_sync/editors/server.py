"""Server configuration editor."""

from typing import Any

from openapi_sync.errors import StructuralEditError
from openapi_sync.parser.base import Server

from .base import FieldPath, normalize_path, replace_field, text_value

SERVER_FIELDS = ("url", "description")


def apply(server: Server, field_path: FieldPath, value: Any) -> Server:
    path = normalize_path(field_path)
    if len(path) != 1 or path[0] not in SERVER_FIELDS:
        raise StructuralEditError(f"Unknown server field: {path!r}")
    field = path[0]
    return replace_field(server, field, text_value(value, field))
