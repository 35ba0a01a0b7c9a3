"""Interfaces for the collaborators the sync engine talks to."""

from typing import Protocol

from openapi_sync.parser.base import Document


class TextSurface(Protocol):
    """A raw text editor. It reports user edits through `SyncEngine.on_text_changed`."""

    def set_text(self, text: str) -> None: ...


class PreviewSurface(Protocol):
    """A read-only view of the current state."""

    def show_document(self, document: Document, text: str) -> None: ...

    def show_error(self, message: str) -> None: ...


class RecordingTextSurface:
    """Text surface that remembers every text it was given."""

    def __init__(self):
        self.texts: list[str] = []

    @property
    def text(self) -> str | None:
        return self.texts[-1] if self.texts else None

    def set_text(self, text: str) -> None:
        self.texts.append(text)
