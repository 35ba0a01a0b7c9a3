"""Path list editor.

Field paths are `(i, field)` where field is one of `path`, `method`,
`summary`, `operationId` or `requestBody`. A request body value is a
schema name; None or "" removes the body. When `schema_names` is given
the name must be one of them.

Switching an operation to a method that carries no body (get, delete)
drops its request body. The model does not stop two entries from using
the same path and method.
"""

from collections.abc import Collection
from typing import Any

from openapi_sync.errors import InvalidValueError, StructuralEditError
from openapi_sync.parser.base import (
    BODY_METHODS,
    HTTP_METHODS,
    InlineObject,
    Operation,
    PathEntry,
    RequestBody,
    Response,
)

from .base import FieldPath, item_at, normalize_path, remove_item, replace_field, replace_item, text_value

PATH_FIELDS = ("path", "method", "summary", "operationId", "requestBody")

NEW_PATH = "/new-path"


def new_path_entry() -> PathEntry:
    """The entry appended by `add_path`."""
    return PathEntry(
        path=NEW_PATH,
        method="get",
        operation=Operation(
            summary="New Operation",
            operation_id="newOperation",
            responses={
                "200": Response(
                    description="Successful response",
                    content_schema=InlineObject(properties=[]),
                ),
            },
        ),
    )


def add_path(paths: list[PathEntry]) -> list[PathEntry]:
    return [*paths, new_path_entry()]


def remove_path(paths: list[PathEntry], index: int) -> list[PathEntry]:
    return remove_item(paths, index, "path")


def apply(
    paths: list[PathEntry],
    field_path: FieldPath,
    value: Any,
    schema_names: Collection[str] | None = None,
) -> list[PathEntry]:
    path = normalize_path(field_path)
    if len(path) != 2 or path[1] not in PATH_FIELDS:
        raise StructuralEditError(f"Unknown path field path: {path!r}")
    index, field = path
    entry = item_at(paths, index, "path")

    if field == "path":
        new_entry = replace_field(entry, "path", text_value(value, "path"))
    elif field == "method":
        new_entry = _set_method(entry, value)
    elif field == "summary":
        new_entry = _set_operation(entry, replace_field(entry.operation, "summary", text_value(value, field)))
    elif field == "operationId":
        new_entry = _set_operation(
            entry, replace_field(entry.operation, "operation_id", text_value(value, field))
        )
    else:
        new_entry = _set_operation(entry, _set_request_body(entry, value, schema_names))

    return replace_item(paths, index, new_entry)


def _set_operation(entry: PathEntry, operation: Operation) -> PathEntry:
    return replace_field(entry, "operation", operation)


def _set_method(entry: PathEntry, value: Any) -> PathEntry:
    if value not in HTTP_METHODS:
        raise InvalidValueError(
            f"Unsupported method {value!r} (expected one of {', '.join(HTTP_METHODS)})"
        )
    if value == entry.method:
        return entry
    operation = entry.operation
    if value not in BODY_METHODS:
        operation = replace_field(operation, "request_body", None)
    return entry.model_copy(update={"method": value, "operation": operation})


def _set_request_body(entry: PathEntry, value: Any, schema_names: Collection[str] | None) -> Operation:
    if value is None or value == "":
        return replace_field(entry.operation, "request_body", None)
    if entry.method not in BODY_METHODS:
        raise InvalidValueError(f"{entry.method} operations do not take a request body")
    schema_name = text_value(value, "requestBody")
    if schema_names is not None and schema_name not in schema_names:
        raise InvalidValueError(f"Unknown schema {schema_name!r} for request body")
    return replace_field(entry.operation, "request_body", RequestBody(required=True, schema_ref=schema_name))
