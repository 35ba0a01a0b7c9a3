"""Canonical YAML serialization of a `Document`.

Output is deterministic: keys are emitted in a fixed order and every
list in the model keeps its order. When two path entries share a route
template, the later one replaces the earlier one under that key.
"""

import yaml

from openapi_sync.parser.base import (
    BODY_METHODS,
    SCHEMA_REF_PREFIX,
    Document,
    InlineObject,
    Operation,
    PathEntry,
    Property,
    Response,
    SchemaRef,
)

OPENAPI_VERSION = "3.0.0"


def serialize(document: Document) -> str:
    """Render a document as canonical OpenAPI YAML."""
    return yaml.safe_dump(to_dict(document), sort_keys=False, allow_unicode=True)


def to_dict(document: Document) -> dict:
    """Build the plain mapping that `serialize` dumps."""
    schemas = {
        schema.name: {"type": "object", "properties": _properties(schema.properties)}
        for schema in document.schemas
    }

    paths: dict[str, dict] = {}
    for entry in document.paths:
        paths[entry.path] = {entry.method: _operation(entry)}

    return {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": document.info.title,
            "description": document.info.description,
            "version": document.info.version,
        },
        "servers": [
            {"url": document.server.url, "description": document.server.description},
        ],
        "components": {"schemas": schemas},
        "paths": paths,
    }


def _properties(properties: list[Property]) -> dict:
    result = {}
    for prop in properties:
        spec = {"type": prop.type}
        if prop.format:
            spec["format"] = prop.format
        result[prop.name] = spec
    return result


def _operation(entry: PathEntry) -> dict:
    operation: Operation = entry.operation
    result: dict = {
        "summary": operation.summary,
        "operationId": operation.operation_id,
    }
    body = operation.request_body
    if entry.method in BODY_METHODS and body is not None and body.schema_ref:
        result["requestBody"] = {
            "required": body.required,
            "content": {"application/json": {"schema": _ref(body.schema_ref)}},
        }
    result["responses"] = {
        status_code: _response(response) for status_code, response in operation.responses.items()
    }
    return result


def _response(response: Response) -> dict:
    result: dict = {"description": response.description}
    content = response.content_schema
    if isinstance(content, SchemaRef):
        result["content"] = {"application/json": {"schema": _ref(content.ref)}}
    elif isinstance(content, InlineObject):
        result["content"] = {
            "application/json": {
                "schema": {"type": "object", "properties": _properties(content.properties)},
            },
        }
    return result


def _ref(schema_name: str) -> dict:
    return {"$ref": f"{SCHEMA_REF_PREFIX}{schema_name}"}
