"""Schema list editor.

Field paths:

    (i, "name")                          rename schema i
    (i, "properties", j, "name")         rename property j of schema i
    (i, "properties", j, "type")         change its type
    (i, "properties", j, "format")       change its format ("" or None clears it)

Renaming a schema does not update path request bodies or responses that
reference the old name.
"""

from typing import Any

from openapi_sync.errors import InvalidValueError, StructuralEditError
from openapi_sync.parser.base import PROPERTY_TYPES, Property, Schema

from .base import (
    FieldPath,
    item_at,
    next_free_name,
    normalize_path,
    remove_item,
    replace_field,
    replace_item,
    text_value,
)

PROPERTY_FIELDS = ("name", "type", "format")


def apply(schemas: list[Schema], field_path: FieldPath, value: Any) -> list[Schema]:
    path = normalize_path(field_path)
    if len(path) == 2 and path[1] == "name":
        return _rename_schema(schemas, path[0], value)
    if len(path) == 4 and path[1] == "properties" and path[3] in PROPERTY_FIELDS:
        return _update_property(schemas, path[0], path[2], path[3], value)
    raise StructuralEditError(f"Unknown schema field path: {path!r}")


def add_schema(schemas: list[Schema]) -> list[Schema]:
    """Append an empty schema named NewSchema<n+1>."""
    taken = {s.name for s in schemas}
    name = next_free_name("NewSchema", taken, len(schemas) + 1)
    return [*schemas, Schema(name=name, properties=[])]


def remove_schema(schemas: list[Schema], index: int) -> list[Schema]:
    return remove_item(schemas, index, "schema")


def add_property(schemas: list[Schema], schema_index: int) -> list[Schema]:
    """Append a string property named newProperty<n+1> to a schema."""
    schema = item_at(schemas, schema_index, "schema")
    taken = {p.name for p in schema.properties}
    name = next_free_name("newProperty", taken, len(schema.properties) + 1)
    new_schema = schema.model_copy(
        update={"properties": [*schema.properties, Property(name=name, type="string")]}
    )
    return replace_item(schemas, schema_index, new_schema)


def remove_property(schemas: list[Schema], schema_index: int, property_index: int) -> list[Schema]:
    schema = item_at(schemas, schema_index, "schema")
    properties = remove_item(schema.properties, property_index, "property")
    return replace_item(schemas, schema_index, schema.model_copy(update={"properties": properties}))


def _rename_schema(schemas: list[Schema], index: Any, value: Any) -> list[Schema]:
    schema = item_at(schemas, index, "schema")
    name = text_value(value, "name")
    if name == schema.name:
        return schemas
    if not name:
        raise InvalidValueError("Schema name must not be empty")
    if any(other.name == name for other in schemas):
        raise InvalidValueError(f"Schema '{name}' already exists")
    return replace_item(schemas, index, replace_field(schema, "name", name))


def _update_property(
    schemas: list[Schema], schema_index: Any, property_index: Any, field: str, value: Any
) -> list[Schema]:
    schema = item_at(schemas, schema_index, "schema")
    prop = item_at(schema.properties, property_index, "property")

    if field == "name":
        name = text_value(value, "name")
        if name != prop.name and any(p.name == name for p in schema.properties):
            raise InvalidValueError(f"Property '{name}' already exists in schema '{schema.name}'")
        new_prop = replace_field(prop, "name", name)
    elif field == "type":
        if value not in PROPERTY_TYPES:
            raise InvalidValueError(
                f"Unsupported property type {value!r} (expected one of {', '.join(PROPERTY_TYPES)})"
            )
        new_prop = replace_field(prop, "type", value)
    else:
        fmt = None if value is None else text_value(value, "format")
        new_prop = replace_field(prop, "format", fmt or None)

    if new_prop is prop:
        return schemas
    properties = replace_item(schema.properties, property_index, new_prop)
    return replace_item(schemas, schema_index, schema.model_copy(update={"properties": properties}))
