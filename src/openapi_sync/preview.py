"""Read-only JSON rendering of the editor text."""

import json

import yaml
from pydantic import BaseModel

from openapi_sync.parser.base import Document


class PreviewResult(BaseModel):
    content: str | None = None
    error: str | None = None


def render_preview(text: str) -> PreviewResult:
    """Render YAML text as indented JSON, or report why it cannot be loaded."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        return PreviewResult(error=str(e))
    return PreviewResult(content=json.dumps(data, indent=2, ensure_ascii=False, default=str))


class JsonPreview:
    """Preview surface that keeps the latest rendering in memory."""

    def __init__(self):
        self.result = PreviewResult()
        self.document: Document | None = None

    def show_document(self, document: Document, text: str) -> None:
        self.document = document
        self.result = render_preview(text)

    def show_error(self, message: str) -> None:
        self.result = PreviewResult(error=message)
