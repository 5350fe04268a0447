# tests/test_document_loading.py
import json

import pytest

from core.exceptions import DocumentLoadError, ReqGraphError, create_error_context, handle_document_error
from utils import load_document, load_documents, merge_documents, write_json_file


class TestLoadDocument:
    def test_parses_file(self, tmp_path) -> None:
        path = tmp_path / "00_civics.txt"
        path.write_text("civic_a = { possible = { } }\n", encoding="utf-8")
        assert load_document(path) == {"civic_a": {"possible": []}}

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(DocumentLoadError, match="Document not found") as exc_info:
            load_document(tmp_path / "missing.txt")
        assert exc_info.value.details["error_type"] == "FileNotFoundError"

    def test_invalid_utf8(self, tmp_path) -> None:
        path = tmp_path / "latin1.txt"
        path.write_bytes(b"name = \"\xe9t\xe9\"\n")
        with pytest.raises(DocumentLoadError, match="not valid UTF-8"):
            load_document(path)

    def test_later_files_override_earlier_entries(self, tmp_path) -> None:
        base = tmp_path / "00_civics.txt"
        patch = tmp_path / "01_civics.txt"
        base.write_text("civic_a = { v = 1 } civic_b = { v = 1 }", encoding="utf-8")
        patch.write_text("civic_b = { v = 2 } civic_c = { v = 2 }", encoding="utf-8")
        merged = load_documents([base, patch])
        assert merged == {"civic_a": {"v": 1}, "civic_b": {"v": 2}, "civic_c": {"v": 2}}

    def test_merge_documents_empty(self) -> None:
        assert merge_documents([]) == {}


class TestWriteJsonFile:
    def test_creates_parent_directories(self, tmp_path) -> None:
        target = tmp_path / "out" / "nested" / "graph.json"
        write_json_file(target, {"civics": {"civic_ä": {"yes": {}, "no": {}}}}, indent=1)
        text = target.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert "civic_ä" in text
        assert json.loads(text) == {"civics": {"civic_ä": {"yes": {}, "no": {}}}}


class TestExceptions:
    def test_str_includes_details(self) -> None:
        error = ReqGraphError("boom", details={"path": "x"})
        assert str(error) == "boom (Details: {'path': 'x'})"
        assert str(ReqGraphError("plain")) == "plain"

    def test_create_error_context_drops_none(self) -> None:
        assert create_error_context(a=1, b=None) == {"a": 1}

    def test_handle_document_error_generic(self) -> None:
        error = handle_document_error("f.txt", PermissionError("denied"), collection="civics")
        assert isinstance(error, DocumentLoadError)
        assert error.message == "Failed to read document: f.txt"
        assert error.details["collection"] == "civics"
