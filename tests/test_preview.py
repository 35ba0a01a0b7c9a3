import json

from openapi_sync.parser.base import Document
from openapi_sync.preview import JsonPreview, render_preview


class TestPreview:
    def test_render_json(self):
        result = render_preview("info:\n  title: Pets\n")
        assert result.error is None
        assert json.loads(result.content) == {"info": {"title": "Pets"}}

    def test_render_error(self):
        result = render_preview("key: [invalid\n")
        assert result.content is None
        assert result.error

    def test_dates_are_rendered_as_text(self):
        result = render_preview("released: 2024-01-31\n")
        assert json.loads(result.content) == {"released": "2024-01-31"}

    def test_json_preview_keeps_last_document_on_error(self):
        view = JsonPreview()
        doc = Document()
        view.show_document(doc, "openapi: 3.0.0\n")
        view.show_error("bad")
        assert view.document is doc
        assert view.result.error == "bad"
