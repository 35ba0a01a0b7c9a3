"""OpenAPI YAML text parser.

Turns editor text into a `Document`. Parsing is total: `parse` always
returns a document and never raises. Problems are collected as messages
which callers read through `validate` or `parse_document`.

Missing sections and fields fall back to defaults silently. The parse is
lossy in a few documented ways:

- keys the model does not cover are dropped;
- only the first entry of `servers` is read;
- only the first method under each path is read;
- `requestBody` is read only for post, put and patch operations.
"""

from typing import Any

import yaml
from pydantic import BaseModel

from openapi_sync.errors import ParseError

from .base import (
    BODY_METHODS,
    HTTP_METHODS,
    PROPERTY_TYPES,
    SCHEMA_REF_PREFIX,
    DEFAULT_DESCRIPTION,
    DEFAULT_SERVER_DESCRIPTION,
    DEFAULT_SERVER_URL,
    DEFAULT_TITLE,
    DEFAULT_VERSION,
    Document,
    InlineObject,
    Info,
    Operation,
    PathEntry,
    Property,
    RequestBody,
    Response,
    Schema,
    SchemaRef,
    Server,
)
from .node import NodeKind, as_mapping, as_sequence, get_mapping, get_text, kind_of, scalar_text


class ParseResult(BaseModel):
    """A parsed document together with every problem found on the way."""

    document: Document
    errors: list[str] = []

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_document(text: str) -> ParseResult:
    """Parse YAML text into a document, collecting errors instead of raising."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        return ParseResult(document=Document(), errors=[f"YAMLError: {e}"])

    kind = kind_of(data)
    if kind is NodeKind.NULL:
        return ParseResult(document=Document())
    if kind is not NodeKind.MAPPING:
        return ParseResult(
            document=Document(),
            errors=[f"Document root must be a mapping, got {kind.value}"],
        )

    errors: list[str] = []
    document = Document(
        info=_parse_info(data.get("info")),
        server=_parse_server(data.get("servers")),
        schemas=_parse_schemas(get_mapping(data, "components", "schemas"), errors),
        paths=_parse_paths(as_mapping(data.get("paths")), errors),
    )
    return ParseResult(document=document, errors=errors)


def parse(text: str) -> Document:
    """Parse text into a document. Never raises; see `validate` for problems."""
    return parse_document(text).document


def validate(text: str) -> str | None:
    """Return an error message for `text`, or None when it parses cleanly."""
    result = parse_document(text)
    if result.ok:
        return None
    return "; ".join(result.errors)


def parse_strict(text: str) -> Document:
    """Parse text into a document, raising ParseError on any problem."""
    result = parse_document(text)
    if not result.ok:
        raise ParseError(result.errors)
    return result.document


def _key_text(key: Any) -> str:
    return scalar_text(key) or ""


def _parse_info(node: Any) -> Info:
    info = as_mapping(node)
    return Info(
        title=get_text(info, "title", DEFAULT_TITLE),
        description=get_text(info, "description", DEFAULT_DESCRIPTION),
        version=get_text(info, "version", DEFAULT_VERSION),
    )


def _parse_server(node: Any) -> Server:
    servers = as_sequence(node)
    first = as_mapping(servers[0]) if servers else {}
    return Server(
        url=get_text(first, "url", DEFAULT_SERVER_URL),
        description=get_text(first, "description", DEFAULT_SERVER_DESCRIPTION),
    )


def _parse_schemas(schemas: dict, errors: list[str]) -> list[Schema]:
    result = []
    for name, schema in schemas.items():
        name = _key_text(name)
        properties = as_mapping(schema).get("properties")
        result.append(
            Schema(
                name=name,
                properties=_parse_properties(properties, f"components.schemas.{name}", errors),
            )
        )
    return result


def _parse_properties(node: Any, where: str, errors: list[str]) -> list[Property]:
    result = []
    for name, spec in as_mapping(node).items():
        name = _key_text(name)
        spec = as_mapping(spec)
        prop_type = get_text(spec, "type", "string")
        if prop_type not in PROPERTY_TYPES:
            errors.append(f"{where}.properties.{name}: unsupported type '{prop_type}'")
            continue
        result.append(
            Property(
                name=name,
                type=prop_type,
                format=scalar_text(spec.get("format")) or None,
            )
        )
    return result


def _parse_paths(paths: dict, errors: list[str]) -> list[PathEntry]:
    result = []
    for path, item in paths.items():
        path = _key_text(path)
        methods = as_mapping(item)
        if not methods:
            errors.append(f"paths.{path}: no operation declared")
            continue

        # Only the first operation under a path is modelled.
        method, operation = next(iter(methods.items()))
        method = _key_text(method)
        if method not in HTTP_METHODS:
            errors.append(
                f"paths.{path}: unsupported method '{method}' "
                f"(expected one of {', '.join(HTTP_METHODS)})"
            )
            continue

        result.append(
            PathEntry(
                path=path,
                method=method,
                operation=_parse_operation(
                    as_mapping(operation), method, f"paths.{path}.{method}", errors
                ),
            )
        )
    return result


def _parse_operation(operation: dict, method: str, where: str, errors: list[str]) -> Operation:
    request_body = None
    if method in BODY_METHODS:
        request_body = _parse_request_body(as_mapping(operation.get("requestBody")))

    return Operation(
        summary=get_text(operation, "summary", ""),
        operation_id=get_text(operation, "operationId", ""),
        request_body=request_body,
        responses=_parse_responses(as_mapping(operation.get("responses")), where, errors),
    )


def _parse_request_body(body: dict) -> RequestBody | None:
    schema = get_mapping(body, "content", "application/json", "schema")
    ref = get_text(schema, "$ref", "")
    if not ref:
        return None
    return RequestBody(required=body.get("required") is True, schema_ref=_schema_name(ref))


def _parse_responses(responses: dict, where: str, errors: list[str]) -> dict[str, Response]:
    result = {}
    for status_code, resp in responses.items():
        status_code = _key_text(status_code)
        resp = as_mapping(resp)
        schema = get_mapping(resp, "content", "application/json").get("schema")

        content_schema: SchemaRef | InlineObject | None = None
        if kind_of(schema) is NodeKind.MAPPING:
            if "$ref" in schema:
                content_schema = SchemaRef(ref=_schema_name(get_text(schema, "$ref", "")))
            else:
                content_schema = InlineObject(
                    properties=_parse_properties(
                        schema.get("properties"), f"{where}.responses.{status_code}", errors
                    )
                )

        result[status_code] = Response(
            description=get_text(resp, "description", ""),
            content_schema=content_schema,
        )
    return result


def _schema_name(ref: str) -> str:
    """`#/components/schemas/v1/User` -> `v1/User`.

    Refs outside local components keep only their last segment.
    """
    if ref.startswith(SCHEMA_REF_PREFIX):
        return ref.removeprefix(SCHEMA_REF_PREFIX)
    return ref.rsplit("/", 1)[-1]
