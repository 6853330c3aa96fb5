"""Shared fixtures for pdfmeta tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict

import fitz  # PyMuPDF
import pytest

from pdfmeta.models import FileField, FileItem, Record, ReferenceField, ValueField

XMP_PACKET = """<?xpacket begin="\ufeff" id="W5M0MpCehiHzreSzNTczkc9d"?>
<x:xmpmeta xmlns:x="adobe:ns:meta/">
  <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">
    <rdf:Description rdf:about=""
        xmlns:dc="http://purl.org/dc/elements/1.1/"
        xmlns:xmp="http://ns.adobe.com/xap/1.0/"
        xmlns:pdf="http://ns.adobe.com/pdf/1.3/"
        pdf:Keywords="old, legacy">
      <dc:title><rdf:Alt><rdf:li xml:lang="x-default">Old title</rdf:li></rdf:Alt></dc:title>
      <dc:subject><rdf:Bag><rdf:li>old</rdf:li></rdf:Bag></dc:subject>
      <xmp:CreatorTool>Report Builder</xmp:CreatorTool>
    </rdf:Description>
  </rdf:RDF>
</x:xmpmeta>
<?xpacket end="w"?>"""


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    """Root of the ``public://`` stream wrapper."""
    root = tmp_path / "files"
    root.mkdir()
    return root


@pytest.fixture
def make_pdf(files_dir: Path) -> Callable[..., Path]:
    """Create a one page PDF under ``files_dir``."""

    def _make(name: str = "doc.pdf", metadata: Dict[str, str] | None = None, xmp: str | None = None) -> Path:
        path = files_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        doc = fitz.open()
        doc.new_page()
        if metadata:
            doc.set_metadata(metadata)
        if xmp:
            doc.set_xml_metadata(xmp)
        doc.save(str(path))
        doc.close()
        return path

    return _make


@pytest.fixture
def read_info() -> Callable[[Path], Dict[str, str]]:
    """Read the document information dictionary through PyMuPDF."""

    def _read(path: Path) -> Dict[str, str]:
        doc = fitz.open(path)
        try:
            return dict(doc.metadata or {})
        finally:
            doc.close()

    return _read


def pdf_settings(**overrides) -> Dict[str, Dict]:
    settings = {
        "enabled": True,
        "reference_enabled": False,
        "meta_types": {
            "title": "[node:title]",
            "author": "Acme",
            "subject": "",
            "keywords": "[node:title]",
        },
    }
    settings.update(overrides)
    return {"pdf_metadata": settings}


@pytest.fixture
def report_node() -> Record:
    """The 'Annual Report' node with one PDF in ``field_pdf``."""
    return Record(
        id="1",
        entity_type_id="node",
        bundle="report",
        attributes={"title": "Annual Report"},
        fields={
            "body": ValueField("body", values=["Summary of the year"]),
            "field_pdf": FileField(
                "field_pdf",
                pdf_settings(),
                files=[FileItem("public://report.pdf", "application/pdf", "report.pdf")],
            ),
        },
    )


@pytest.fixture
def media_with_pdf() -> Record:
    """A media record whose document field accepts metadata by reference."""
    return Record(
        id="5",
        entity_type_id="media",
        bundle="document",
        attributes={"name": "Media wrapper"},
        fields={
            "name": ValueField("name", values=["Media wrapper"]),
            "field_media_document": FileField(
                "field_media_document",
                pdf_settings(
                    enabled=False,
                    reference_enabled=True,
                    meta_types={
                        "title": "[node:title]",
                        "author": "[node:field_author]",
                        "subject": "[media:name:value]",
                        "keywords": "[node:field_tags]",
                    },
                ),
                files=[FileItem("public://media/wrapped.pdf", "application/pdf")],
            ),
        },
    )


@pytest.fixture
def referencing_node(media_with_pdf: Record) -> Record:
    """A node that only references the media record."""
    return Record(
        id="2",
        entity_type_id="node",
        bundle="article",
        attributes={"title": "Quarterly Results"},
        fields={
            "field_author": ValueField("field_author", values=["Jane Roe"]),
            "field_tags": ValueField("field_tags", values=["finance", "q3"]),
            "field_media": ReferenceField(
                "field_media",
                {"pdf_metadata": {"enabled": True, "reference_enabled": False, "meta_types": {}}},
                targets=[media_with_pdf],
            ),
        },
    )
