"""Write resolved metadata into PDF files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from pdfmeta.models import FileItem, ResolvedMetadata, SelectedFile
from pdfmeta.pdf.document import PdfMetadataDocument
from pdfmeta.pdf.tags import AUTHOR, KEYWORDS, MANAGED_TAGS, SUBJECT, TITLE, MonoValue, MultiValue, TagEntry
from pdfmeta.utils.files import FileSystem

LOGGER = logging.getLogger(__name__)


class RewriteOutcome(str, Enum):
    WRITTEN = "written"
    MISSING = "missing"
    FAILED = "failed"


@dataclass(slots=True)
class RewriteStats:
    written: int = 0
    missing: int = 0
    failed: int = 0
    processed_files: list[tuple[str, RewriteOutcome]] = field(default_factory=list)

    def increment(self, outcome: RewriteOutcome, uri: str) -> None:
        if outcome is RewriteOutcome.WRITTEN:
            self.written += 1
        elif outcome is RewriteOutcome.MISSING:
            self.missing += 1
        else:
            self.failed += 1
        self.processed_files.append((uri, outcome))


class MetadataRewriter:
    """Replaces the managed tags of PDF files, one file at a time."""

    def __init__(
        self,
        filesystem: FileSystem,
        *,
        keyword_separator: str = ",",
        sync_xmp: bool = True,
    ) -> None:
        self.filesystem = filesystem
        self.keyword_separator = keyword_separator
        self.sync_xmp = sync_xmp

    def rewrite(self, file: FileItem, metadata: ResolvedMetadata) -> RewriteOutcome:
        """Rewrite one file. Failures are logged, never raised."""
        uri = file.get_file_uri()
        if not self.filesystem.exists(uri):
            LOGGER.error("Error reading file from %s.", uri)
            return RewriteOutcome.MISSING

        # Catch all in case of issues opening, converting or saving.
        try:
            file_path = self.filesystem.realpath(uri)
            with PdfMetadataDocument.open(
                file_path, keyword_separator=self.keyword_separator, sync_xmp=self.sync_xmp
            ) as document:
                # Clear previous values that might be in an old format.
                for tag in MANAGED_TAGS:
                    entry = document.get(tag)
                    if entry is not None:
                        entry.get_value().set("")

                document.add(TagEntry(AUTHOR, MonoValue(metadata.author)))
                document.add(TagEntry(TITLE, MonoValue(metadata.title)))
                document.add(TagEntry(SUBJECT, MonoValue(metadata.subject)))
                document.add(TagEntry(KEYWORDS, MultiValue(list(metadata.keywords))))

                document.write_back()
        except Exception as exc:
            LOGGER.error("Error setting / writing metadata to PDF to %s. See %s.", uri, exc)
            return RewriteOutcome.FAILED

        LOGGER.info("Wrote metadata to %s", uri)
        return RewriteOutcome.WRITTEN

    def rewrite_all(self, files: Iterable[SelectedFile]) -> RewriteStats:
        stats = RewriteStats()
        for item in files:
            stats.increment(self.rewrite(item.file, item.metadata), item.file.get_file_uri())
        return stats
