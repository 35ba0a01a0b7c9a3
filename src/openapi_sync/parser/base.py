"""Structured data models for an editable OpenAPI document.

The parser builds these from YAML text, the section editors produce
updated copies of them, and the serializer turns them back into the
canonical text.
"""

from typing import Literal

from pydantic import BaseModel, Field

PropertyType = Literal["string", "integer", "number", "boolean", "array", "object"]
HttpMethod = Literal["get", "post", "put", "delete", "patch"]

PROPERTY_TYPES: tuple[str, ...] = ("string", "integer", "number", "boolean", "array", "object")
HTTP_METHODS: tuple[str, ...] = ("get", "post", "put", "delete", "patch")
BODY_METHODS: tuple[str, ...] = ("post", "put", "patch")

SCHEMA_REF_PREFIX = "#/components/schemas/"

DEFAULT_TITLE = "Sample API"
DEFAULT_DESCRIPTION = "Optional multiline or single-line description"
DEFAULT_VERSION = "0.1.0"
DEFAULT_SERVER_URL = "http://api.example.com/v1"
DEFAULT_SERVER_DESCRIPTION = "Production server"


class Info(BaseModel):
    """The `info` block: title, description and version."""

    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    version: str = DEFAULT_VERSION


class Server(BaseModel):
    """The single server entry kept by the model."""

    url: str = DEFAULT_SERVER_URL
    description: str = DEFAULT_SERVER_DESCRIPTION


class Property(BaseModel):
    """A schema property. `format` is None when absent or empty."""

    name: str
    type: PropertyType = "string"
    format: str | None = None


class Schema(BaseModel):
    """A named object schema under `components.schemas`."""

    name: str
    properties: list[Property] = []


class RequestBody(BaseModel):
    required: bool = True
    schema_ref: str  # schema name, not the full $ref pointer


class SchemaRef(BaseModel):
    """Response content pointing at a named schema."""

    kind: Literal["ref"] = "ref"
    ref: str


class InlineObject(BaseModel):
    """Response content declared inline as an object with properties."""

    kind: Literal["inline"] = "inline"
    properties: list[Property] = []


class Response(BaseModel):
    description: str = ""
    content_schema: SchemaRef | InlineObject | None = None


class Operation(BaseModel):
    summary: str = ""
    operation_id: str = ""
    request_body: RequestBody | None = None
    responses: dict[str, Response] = {}  # {status_code: Response}


class PathEntry(BaseModel):
    """One route template with the single operation the model tracks for it."""

    path: str
    method: HttpMethod = "get"
    operation: Operation


class Document(BaseModel):
    """The whole editable document."""

    info: Info = Field(default_factory=Info)
    server: Server = Field(default_factory=Server)
    schemas: list[Schema] = []
    paths: list[PathEntry] = []
