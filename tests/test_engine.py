from unittest.mock import MagicMock, patch

from openapi_sync.config import DEFAULT_TEXT
from openapi_sync.parser.base import Document
from openapi_sync.parser.document import parse, parse_document
from openapi_sync.serializer import serialize
from openapi_sync.storage import MemoryStore
from openapi_sync.sync.engine import Source, SyncEngine
from openapi_sync.sync.surfaces import RecordingTextSurface

USER_TEXT = "components:\n  schemas:\n    User:\n      properties:\n        id: {type: integer}\n"


class EchoingSurface(RecordingTextSurface):
    """A text widget that fires its change handler whenever its text is set."""

    def __init__(self):
        super().__init__()
        self.engine: SyncEngine | None = None
        self.sources: list[Source | None] = []

    def set_text(self, text: str) -> None:
        super().set_text(text)
        self.sources.append(self.engine.source)
        self.engine.on_text_changed(text)


def _engine(text: str = DEFAULT_TEXT):
    surface = MagicMock()
    preview = MagicMock()
    store = MemoryStore()
    engine = SyncEngine(text, text_surface=surface, preview=preview, store=store, storage_key="yaml")
    return engine, surface, preview, store


class TestOpen:
    def test_empty_store_uses_default_text(self):
        engine = SyncEngine.open(MemoryStore())
        assert engine.current_text == DEFAULT_TEXT
        assert engine.current_document.schemas[0].name == "User"
        assert engine.last_error is None

    def test_stored_text_seeds_document(self):
        engine = SyncEngine.open(MemoryStore({"yaml": USER_TEXT}))
        assert engine.current_text == USER_TEXT
        assert engine.current_document.schemas[0].properties[0].type == "integer"

    def test_custom_storage_key(self):
        store = MemoryStore({"draft": "info:\n  title: Draft\n"})
        engine = SyncEngine.open(store, storage_key="draft")
        assert engine.current_document.info.title == "Draft"

    def test_broken_stored_text(self):
        engine = SyncEngine.open(MemoryStore({"yaml": "key: [invalid\n"}))
        assert engine.current_document == Document()
        assert engine.last_error.startswith("YAMLError")

    def test_publish(self):
        surface, preview = MagicMock(), MagicMock()
        engine = SyncEngine.open(MemoryStore(), text_surface=surface, preview=preview)
        engine.publish()
        surface.set_text.assert_called_once_with(DEFAULT_TEXT)
        preview.show_document.assert_called_once_with(engine.current_document, DEFAULT_TEXT)


class TestTextChanged:
    def test_valid_text_updates_model_only(self):
        engine, surface, preview, store = _engine()
        engine.on_text_changed(USER_TEXT)

        assert engine.current_document == parse(USER_TEXT)
        assert engine.current_text == USER_TEXT
        surface.set_text.assert_not_called()
        preview.show_document.assert_called_once_with(engine.current_document, USER_TEXT)
        assert store.get("yaml") == USER_TEXT

    def test_parse_error_keeps_last_good_document(self):
        engine, surface, preview, store = _engine()
        before = engine.current_document
        engine.on_text_changed("key: [invalid\n")

        assert engine.current_document is before
        assert engine.last_error is not None
        preview.show_error.assert_called_once_with(engine.last_error)
        preview.show_document.assert_not_called()
        surface.set_text.assert_not_called()
        assert store.get("yaml") is None

    def test_text_change_from_error_display_is_ignored(self):
        engine, _, preview, _ = _engine()
        before = engine.current_document
        preview.show_error.side_effect = lambda error: engine.on_text_changed(USER_TEXT)

        with patch("openapi_sync.sync.engine.parse_document", wraps=parse_document) as spy:
            engine.on_text_changed("key: [invalid\n")

        spy.assert_called_once()
        assert engine.current_document is before
        assert engine.current_text == "key: [invalid\n"
        assert engine.source is None

    def test_recovery_clears_error(self):
        engine, _, _, _ = _engine()
        engine.on_text_changed("paths:\n  /x:\n    fetch: {}\n")
        assert engine.last_error is not None
        engine.on_text_changed(USER_TEXT)
        assert engine.last_error is None

    def test_equal_document_is_not_replaced(self):
        engine, _, _, _ = _engine()
        before = engine.current_document
        engine.on_text_changed(DEFAULT_TEXT + "\n# trailing comment\n")
        assert engine.current_document is before

    def test_serialized_text_produces_no_outbound_update(self):
        engine, surface, _, _ = _engine()
        engine.on_text_changed(serialize(engine.current_document))
        surface.set_text.assert_not_called()
        assert engine.source is None


class TestModelEdit:
    def test_model_edit_pushes_text(self):
        engine, surface, preview, store = _engine()
        edited = parse(USER_TEXT)
        engine.on_model_edit(edited)

        expected = serialize(edited)
        assert engine.current_document == edited
        assert engine.current_text == expected
        surface.set_text.assert_called_once_with(expected)
        preview.show_document.assert_called_once_with(edited, expected)
        assert store.get("yaml") == expected

    def test_unchanged_document_is_noop(self):
        engine, surface, _, _ = _engine()
        engine.on_model_edit(engine.current_document.model_copy(deep=True))
        surface.set_text.assert_not_called()

    def test_apply_edit(self):
        engine, surface, _, _ = _engine()
        assert engine.apply_edit("info", "title", "Pets API") is True
        assert engine.current_document.info.title == "Pets API"
        assert "title: Pets API" in surface.set_text.call_args[0][0]

    def test_apply_edit_same_value(self):
        engine, surface, _, _ = _engine()
        assert engine.apply_edit("server", "url", "http://api.example.com/v1") is False
        surface.set_text.assert_not_called()

    def test_stale_edit_is_noop(self):
        engine, surface, preview, _ = _engine()
        before = engine.current_document
        assert engine.apply_edit("schemas", (5, "name"), "Ghost") is False
        assert engine.remove_path(0) is False
        assert engine.current_document is before
        assert "out of range" in engine.last_edit_error
        surface.set_text.assert_not_called()
        preview.show_document.assert_not_called()

    def test_invalid_value_is_noop(self):
        engine, _, _, _ = _engine()
        assert engine.apply_edit("schemas", (0, "properties", 0, "type"), "uuid") is False
        assert "Unsupported property type" in engine.last_edit_error

    def test_unknown_section(self):
        engine, _, _, _ = _engine()
        assert engine.apply_edit("security", "x", "y") is False

    def test_malformed_field_path_is_noop(self):
        engine, _, _, _ = _engine()
        assert engine.apply_edit("info", 5, "x") is False
        assert engine.last_edit_error is not None

    def test_request_body_needs_existing_schema(self):
        engine, _, _, _ = _engine()
        engine.add_path()
        engine.apply_edit("paths", (0, "method"), "post")
        assert engine.apply_edit("paths", (0, "requestBody"), "Ghost") is False
        assert "Unknown schema" in engine.last_edit_error
        assert engine.apply_edit("paths", (0, "requestBody"), "User") is True
        assert engine.current_document.paths[0].operation.request_body.schema_ref == "User"

    def test_add_remove_schema_symmetry(self):
        engine, _, _, _ = _engine()
        before = list(engine.current_document.schemas)
        engine.add_schema()
        assert engine.current_document.schemas[-1].name == "NewSchema2"
        engine.remove_schema(len(before))
        assert engine.current_document.schemas == before

    def test_add_path_scenario(self):
        engine, surface, _, _ = _engine("openapi: 3.0.0\npaths: {}\n")
        engine.add_path()
        assert len(engine.current_document.paths) == 1
        assert engine.current_document.paths[0].path == "/new-path"
        assert "paths:\n  /new-path:\n    get:\n      summary: New Operation" in engine.current_text

    def test_property_helpers(self):
        engine, _, _, _ = _engine()
        engine.add_property(0)
        assert engine.current_document.schemas[0].properties[-1].name == "newProperty4"
        engine.remove_property(0, 3)
        assert len(engine.current_document.schemas[0].properties) == 3

    def test_persist_failure_is_logged(self):
        store = MagicMock()
        store.set.side_effect = OSError("disk full")
        engine = SyncEngine(DEFAULT_TEXT, store=store)
        assert engine.apply_edit("info", "version", "2.0.0") is True
        assert engine.current_document.info.version == "2.0.0"


class TestLoopPrevention:
    def test_echoing_surface_does_not_reparse(self):
        surface = EchoingSurface()
        engine = SyncEngine(DEFAULT_TEXT, text_surface=surface)
        surface.engine = engine

        with patch("openapi_sync.sync.engine.parse_document", wraps=parse_document) as spy:
            engine.apply_edit("info", "title", "Echo")
        spy.assert_not_called()
        assert surface.texts == [engine.current_text]
        assert surface.sources == [Source.MODEL]
        assert engine.source is None

    def test_late_echo_is_ignored_until_user_types(self):
        engine, _, _, _ = _engine()
        engine.apply_edit("info", "title", "Echo")
        emitted = engine.current_text

        with patch("openapi_sync.sync.engine.parse_document", wraps=parse_document) as spy:
            engine.on_text_changed(emitted)
            spy.assert_not_called()
            engine.on_text_changed(USER_TEXT)
            spy.assert_called_once()

    def test_model_edit_from_preview_during_text_update(self):
        engine, surface, preview, _ = _engine()

        def rerender(document, text):
            preview.show_document.side_effect = None
            engine.apply_edit("info", "title", "From form")

        preview.show_document.side_effect = rerender
        engine.on_text_changed(USER_TEXT)

        # The nested model edit wrote text once; the echo did not loop back.
        assert surface.set_text.call_count == 1
        assert engine.current_document.info.title == "From form"
        assert engine.source is None

    def test_independent_sessions(self):
        a = SyncEngine(DEFAULT_TEXT)
        b = SyncEngine(DEFAULT_TEXT)
        a.apply_edit("info", "title", "A")
        assert b.current_document.info.title == "Sample API"
