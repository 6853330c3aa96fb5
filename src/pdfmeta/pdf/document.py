"""Read and write the document information tags of a PDF.

Uses PyMuPDF (fitz). Tags are read from the trailer's ``/Info`` dictionary and
written back key by key, so entries this module does not manage are left
exactly as they were.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List

import fitz  # PyMuPDF

from pdfmeta.pdf.tags import (
    MANAGED_TAGS,
    MULTI_VALUED_TAGS,
    PDF_NAMESPACE,
    MetadataBag,
    MultiValue,
    TagEntry,
    read_value,
    tag_key,
    tag_namespace,
)
from pdfmeta.pdf.xmp import read_xmp, update_xmp

LOGGER = logging.getLogger(__name__)


class PdfMetadataError(Exception):
    """Base error for PDF metadata handling."""


class MetadataWriteError(PdfMetadataError):
    """Raised when a tag set cannot be opened, changed or saved."""


class PdfMetadataDocument:
    """Tag set of one PDF file, open for reading and modification.

    Use as a context manager; the underlying document is closed on exit
    whether or not ``write_back`` was called.
    """

    def __init__(
        self,
        path: Path,
        doc: fitz.Document,
        *,
        keyword_separator: str = ",",
        sync_xmp: bool = True,
    ) -> None:
        self.path = Path(path)
        self.keyword_separator = keyword_separator
        self.sync_xmp = sync_xmp
        self._doc = doc
        self.metadata = self._read_tags()

    @classmethod
    def open(cls, path: Path, **kwargs) -> "PdfMetadataDocument":
        try:
            doc = fitz.open(path)
        except Exception as exc:
            raise MetadataWriteError(f"Failed to open PDF {path}: {exc}") from exc

        if not doc.is_pdf or doc.needs_pass:
            reason = "is not a PDF" if not doc.is_pdf else "is encrypted"
            doc.close()
            raise MetadataWriteError(f"{path} {reason}")
        return cls(path, doc, **kwargs)

    def __enter__(self) -> "PdfMetadataDocument":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._doc.is_closed

    def close(self) -> None:
        if not self._doc.is_closed:
            self._doc.close()

    def get(self, tag: str) -> TagEntry | None:
        return self.metadata.get(tag)

    def add(self, entry: TagEntry) -> None:
        self.metadata.add(entry)

    def _info_xref(self, *, create: bool = False) -> int:
        kind, value = self._doc.xref_get_key(-1, "Info")
        if kind == "xref":
            return int(value.split()[0])
        if not create:
            return 0
        xref = self._doc.get_new_xref()
        # A direct /Info dictionary is moved into the new object with its keys.
        self._doc.update_object(xref, value if kind == "dict" else "<<>>")
        self._doc.xref_set_key(-1, "Info", f"{xref} 0 R")
        return xref

    def _read_tags(self) -> MetadataBag:
        entries: List[TagEntry] = []
        xref = self._info_xref()
        if not xref:
            return MetadataBag()
        for key in self._doc.xref_get_keys(xref):
            kind, value = self._doc.xref_get_key(xref, key)
            if kind in ("null", "dict", "array", "xref"):
                continue
            tag = f"{PDF_NAMESPACE}:{key}"
            entries.append(TagEntry(tag, read_value(tag, value, separator=self.keyword_separator)))
        return MetadataBag(entries)

    def managed_values(self) -> Dict[str, object]:
        """Current values of the managed tags, as written to XMP."""
        values: Dict[str, object] = {}
        for tag in MANAGED_TAGS:
            entry = self.metadata.get(tag)
            name = tag_key(tag).lower()
            if entry is None:
                values[name] = [] if tag in MULTI_VALUED_TAGS else ""
            elif isinstance(entry.value, MultiValue):
                values[name] = entry.value.as_list()
            else:
                values[name] = entry.value.value
        return values

    def write_back(self) -> List[str]:
        """Write changed tags into the file in place and close the document.

        The new file is saved next to the original and moved over it, so
        readers never see a half written file. Returns the changed tags.
        """
        changed = [entry for entry in self.metadata.changed() if tag_namespace(entry.tag) == PDF_NAMESPACE]
        try:
            if changed:
                xref = self._info_xref(create=True)
                for entry in changed:
                    text = entry.value.as_text(self.keyword_separator)
                    # Empty strings are written as "()" rather than removing the key.
                    self._doc.xref_set_key(xref, entry.key, fitz.get_pdf_str(text))

                if self.sync_xmp and any(entry.tag in MANAGED_TAGS for entry in changed):
                    packet = self._doc.get_xml_metadata()
                    if packet:
                        self._sync_xmp(packet)

            self._save()
        except PdfMetadataError:
            raise
        except Exception as exc:
            raise MetadataWriteError(f"Failed to write metadata to {self.path}: {exc}") from exc
        finally:
            self.close()

        LOGGER.debug("Wrote %s to %s", ", ".join(entry.tag for entry in changed), self.path)
        return [entry.tag for entry in changed]

    def _sync_xmp(self, packet: str) -> None:
        try:
            updated = update_xmp(packet, self.managed_values())
        except ET.ParseError as exc:
            LOGGER.warning("Unreadable XMP packet in %s, leaving it unchanged: %s", self.path, exc)
            return
        self._doc.set_xml_metadata(updated)

    def xmp_values(self) -> Dict[str, object]:
        """Managed properties found in the XMP packet, empty when there is none."""
        packet = self._doc.get_xml_metadata()
        if not packet:
            return {}
        try:
            return dict(read_xmp(packet))
        except ET.ParseError as exc:
            LOGGER.warning("Unreadable XMP packet in %s: %s", self.path, exc)
            return {}

    def _save(self) -> None:
        handle, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        os.close(handle)
        tmp_path = Path(tmp_name)
        try:
            self._doc.save(str(tmp_path), encryption=fitz.PDF_ENCRYPT_KEEP)
            self._doc.close()
            shutil.copymode(self.path, tmp_path)
            os.replace(tmp_path, self.path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise


def read_tags(path: Path) -> MetadataBag:
    """Return the tag set of the PDF at ``path``."""
    with PdfMetadataDocument.open(path) as document:
        return document.metadata


def read_xmp_values(path: Path) -> Dict[str, object]:
    """Return the managed XMP properties of the PDF at ``path``."""
    with PdfMetadataDocument.open(path) as document:
        return document.xmp_values()
