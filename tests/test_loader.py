"""Tests for loading record exports."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pdfmeta.models import FileField, FileItem, ReferenceField, ValueField
from pdfmeta.storage.loader import RecordLoadError, RecordStore, load_records, parse_records

EXPORT = {
    "records": [
        {
            "id": 1,
            "type": "node",
            "bundle": "article",
            "attributes": {"title": "Quarterly Results"},
            "fields": {
                "field_tags": {"kind": "value", "values": ["finance", "q3"]},
                "field_summary": {"kind": "value", "values": "Short"},
                "field_media": {
                    "kind": "reference",
                    "targets": ["media/5", {"uri": "public://loose.pdf", "mime_type": "application/pdf"}],
                    "third_party_settings": {"pdf_metadata": {"enabled": True}},
                },
            },
        },
        {
            "id": "5",
            "type": "media",
            "attributes": {"name": "Wrapper"},
            "fields": {
                "field_media_document": {
                    "kind": "file",
                    "files": [{"uri": "public://wrapped.pdf", "mime_type": "application/pdf", "filename": "w.pdf"}],
                    "third_party_settings": {"pdf_metadata": {"reference_enabled": True}},
                }
            },
        },
    ]
}


class TestParseRecords:
    """Test parse_records."""

    def test_records_and_fields(self) -> None:
        """Should build records with typed fields."""
        store = parse_records(EXPORT)

        assert len(store) == 2
        node = store.get("node", "1")
        assert node.bundle == "article"
        assert node.attributes["title"] == "Quarterly Results"
        assert list(node.fields) == ["field_tags", "field_summary", "field_media"]
        assert isinstance(node.fields["field_tags"], ValueField)
        assert node.fields["field_summary"].values == ["Short"]

        media = store.get("media", "5")
        document = media.fields["field_media_document"]
        assert isinstance(document, FileField)
        assert document.files == [FileItem("public://wrapped.pdf", "application/pdf", "w.pdf")]
        assert document.get_third_party_settings("pdf_metadata") == {"reference_enabled": True}

    def test_references_linked(self) -> None:
        """Should resolve reference targets after loading."""
        store = parse_records(EXPORT)

        field = store.get("node", "1").fields["field_media"]
        assert isinstance(field, ReferenceField)
        assert field.targets[0] is store.get("media", "5")
        assert field.targets[1] == FileItem("public://loose.pdf", "application/pdf")

    def test_unknown_target(self) -> None:
        """Should reject references to records not in the export."""
        export = {"records": [{"id": 1, "type": "node", "fields": {"f": {"kind": "reference", "targets": ["media/9"]}}}]}

        with pytest.raises(RecordLoadError, match="media/9"):
            parse_records(export)

    def test_unknown_kind(self) -> None:
        """Should reject unknown field kinds."""
        export = {"records": [{"id": 1, "type": "node", "fields": {"f": {"kind": "image"}}}]}

        with pytest.raises(RecordLoadError, match="unknown kind"):
            parse_records(export)

    def test_missing_keys(self) -> None:
        """Should report records and files missing required keys."""
        with pytest.raises(RecordLoadError, match="'type'"):
            parse_records({"records": [{"id": 1}]})
        with pytest.raises(RecordLoadError, match="'mime_type'"):
            parse_records(
                {"records": [{"id": 1, "type": "node", "fields": {"f": {"kind": "file", "files": [{"uri": "a"}]}}}]}
            )

    def test_no_records_list(self) -> None:
        """Should require a records list."""
        with pytest.raises(RecordLoadError):
            parse_records({})
        with pytest.raises(RecordLoadError):
            parse_records([{"id": 1, "type": "node"}])

    def test_record_not_an_object(self) -> None:
        """Should reject record entries that are not objects."""
        with pytest.raises(RecordLoadError, match="Record entry must be an object"):
            parse_records({"records": [1]})

    def test_fields_not_an_object(self) -> None:
        """Should reject a fields value that is not an object."""
        with pytest.raises(RecordLoadError, match="Fields of"):
            parse_records({"records": [{"id": 1, "type": "node", "fields": ["field_pdf"]}]})

    def test_field_not_an_object(self) -> None:
        """Should reject field entries that are not objects."""
        with pytest.raises(RecordLoadError, match="Field 'field_pdf'"):
            parse_records({"records": [{"id": 1, "type": "node", "fields": {"field_pdf": "public://a.pdf"}}]})

    def test_file_not_an_object(self) -> None:
        """Should reject file entries that are not objects."""
        with pytest.raises(RecordLoadError, match="File entry must be an object"):
            parse_records(
                {"records": [{"id": 1, "type": "node", "fields": {"f": {"kind": "file", "files": ["public://a.pdf"]}}}]}
            )


class TestRecordStore:
    """Test RecordStore."""

    def test_lookup(self) -> None:
        """Should find records by type/id."""
        store = parse_records(EXPORT)

        assert store.lookup("media/5").attributes["name"] == "Wrapper"
        with pytest.raises(RecordLoadError):
            store.lookup("media")
        with pytest.raises(RecordLoadError):
            store.lookup("user/1")

    def test_empty(self) -> None:
        """Should start empty."""
        assert list(RecordStore()) == []


class TestLoadRecords:
    """Test load_records."""

    def test_load(self, tmp_path: Path) -> None:
        """Should read an export from disk."""
        path = tmp_path / "records.json"
        path.write_text(json.dumps(EXPORT), encoding="utf-8")

        assert len(load_records(path)) == 2

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Should report invalid JSON."""
        path = tmp_path / "records.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(RecordLoadError, match="Invalid JSON"):
            load_records(path)
