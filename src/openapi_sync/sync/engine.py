"""Keeps the document model and its YAML text in step.

A `SyncEngine` is one editing session. User edits reach it from two
places:

- the raw text surface calls `on_text_changed`. The text is parsed into
  the model but never rewritten, since the user's text is authoritative;
- the section editors go through `apply_edit` and the add/remove
  helpers. These end in `on_model_edit`, which serializes the model and
  pushes the new text to the text surface.

Every update runs to completion with `source` set to the side that
started it. A text change that arrives while an update is in progress,
or that only echoes text the engine produced itself, is not parsed
again. This is what stops text -> model -> text loops.
"""

import logging
from enum import Enum
from typing import Any, Callable

from openapi_sync.config import DEFAULT_TEXT, STORAGE_KEY
from openapi_sync.editors import info, paths, schemas, server
from openapi_sync.errors import EditError
from openapi_sync.parser.base import Document
from openapi_sync.parser.document import parse_document
from openapi_sync.serializer import serialize
from openapi_sync.storage import KeyValueStore

from .surfaces import PreviewSurface, TextSurface

logger = logging.getLogger(__name__)

SECTION_EDITORS: dict[str, Callable[[Any, Any, Any], Any]] = {
    "info": info.apply,
    "server": server.apply,
    "schemas": schemas.apply,
    "paths": paths.apply,
}


class Source(str, Enum):
    TEXT = "text"
    MODEL = "model"


class SyncEngine:
    """One editing session over a document and its text."""

    def __init__(
        self,
        text: str = DEFAULT_TEXT,
        text_surface: TextSurface | None = None,
        preview: PreviewSurface | None = None,
        store: KeyValueStore | None = None,
        storage_key: str = STORAGE_KEY,
    ):
        self.text_surface = text_surface
        self.preview = preview
        self.store = store
        self.storage_key = storage_key

        self.source: Source | None = None
        self.last_error: str | None = None
        self.last_edit_error: str | None = None
        self._emitted_text: str | None = None

        result = parse_document(text)
        self.current_text = text
        self.current_document = result.document
        if not result.ok:
            self.last_error = "; ".join(result.errors)
            logger.warning("Initial text has errors: %s", self.last_error)

    @classmethod
    def open(
        cls,
        store: KeyValueStore,
        text_surface: TextSurface | None = None,
        preview: PreviewSurface | None = None,
        storage_key: str = STORAGE_KEY,
    ) -> "SyncEngine":
        """Start a session from the stored text, or from the default text if none."""
        text = store.get(storage_key)
        if text is None:
            logger.info("No stored text under %r, starting from the default document", storage_key)
            text = DEFAULT_TEXT
        return cls(text, text_surface=text_surface, preview=preview, store=store, storage_key=storage_key)

    def publish(self) -> None:
        """Push the current state to the surfaces, e.g. right after opening."""
        if self.text_surface is not None:
            self.text_surface.set_text(self.current_text)
        if self.preview is None:
            return
        if self.last_error is not None:
            self.preview.show_error(self.last_error)
        else:
            self.preview.show_document(self.current_document, self.current_text)

    # -- text side -----------------------------------------------------------

    def on_text_changed(self, new_text: str) -> None:
        """Handle raw text typed or pasted by the user."""
        if self.source is not None:
            logger.debug("Ignoring text change raised during a %s update", self.source.value)
            return
        if self._emitted_text is not None and new_text == self._emitted_text:
            logger.debug("Ignoring echo of serialized text")
            return
        self._emitted_text = None

        result = parse_document(new_text)
        if not result.ok:
            self._reject(new_text, "; ".join(result.errors))
            return

        self._commit(result.document, new_text, Source.TEXT)

    # -- model side ----------------------------------------------------------

    def on_model_edit(self, edited_document: Document) -> None:
        """Replace the document with an edited one and regenerate the text."""
        if edited_document == self.current_document and self.last_error is None:
            return
        self._commit(edited_document, serialize(edited_document), Source.MODEL)

    def reformat(self) -> None:
        """Rewrite the text in canonical form from the current document."""
        self._commit(self.current_document, serialize(self.current_document), Source.MODEL)

    def apply_edit(self, section: str, field_path: Any, value: Any) -> bool:
        """Run a section editor on the current document.

        Returns True when the document changed. Stale or invalid edits are
        logged and leave everything as it was.
        """
        editor = SECTION_EDITORS.get(section)
        if editor is None:
            self.last_edit_error = f"Unknown section: {section!r}"
            logger.warning("Ignoring edit on unknown section %r", section)
            return False
        if section == "paths":
            schema_names = [s.name for s in self.current_document.schemas]
            return self._edit(section, editor, field_path, value, schema_names=schema_names)
        return self._edit(section, editor, field_path, value)

    def add_schema(self) -> bool:
        return self._edit("schemas", schemas.add_schema)

    def remove_schema(self, index: int) -> bool:
        return self._edit("schemas", schemas.remove_schema, index)

    def add_property(self, schema_index: int) -> bool:
        return self._edit("schemas", schemas.add_property, schema_index)

    def remove_property(self, schema_index: int, property_index: int) -> bool:
        return self._edit("schemas", schemas.remove_property, schema_index, property_index)

    def add_path(self) -> bool:
        return self._edit("paths", paths.add_path)

    def remove_path(self, index: int) -> bool:
        return self._edit("paths", paths.remove_path, index)

    # -- internals -----------------------------------------------------------

    def _edit(self, section: str, editor: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
        current = getattr(self.current_document, section)
        self.last_edit_error = None
        try:
            updated = editor(current, *args, **kwargs)
        except EditError as e:
            self.last_edit_error = str(e)
            logger.warning("Ignoring %s edit: %s", section, e)
            return False
        if updated is current:
            return False
        self.on_model_edit(self.current_document.model_copy(update={section: updated}))
        return True

    def _commit(self, document: Document, text: str, source: Source) -> None:
        previous = self.source
        self.source = source
        try:
            if document != self.current_document:
                self.current_document = document
            self.current_text = text
            self.last_error = None

            if source is Source.MODEL:
                self._emitted_text = text
                if self.text_surface is not None:
                    self.text_surface.set_text(text)
            if self.preview is not None:
                self.preview.show_document(self.current_document, text)
            # A nested update during the preview call may have moved the text on.
            self._persist(self.current_text)
        finally:
            self.source = previous

    def _reject(self, text: str, error: str) -> None:
        """Record unparseable user text while keeping the last good document."""
        previous = self.source
        self.source = Source.TEXT
        try:
            self.current_text = text
            self.last_error = error
            logger.info("Keeping last good document: %s", error)
            if self.preview is not None:
                self.preview.show_error(error)
        finally:
            self.source = previous

    def _persist(self, text: str) -> None:
        if self.store is None:
            return
        try:
            self.store.set(self.storage_key, text)
        except OSError as e:
            logger.error("Could not persist document text: %s", e)
