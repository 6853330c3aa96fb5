"""Metadata pipeline run for a changed record."""

from __future__ import annotations

import logging
from typing import Any, List

from pdfmeta.config import AppConfig
from pdfmeta.models import SelectedFile
from pdfmeta.pdf.rewriter import MetadataRewriter, RewriteStats
from pdfmeta.pipeline.classifier import classify_fields, expand_references
from pdfmeta.pipeline.selector import select_files
from pdfmeta.tokens.engine import TokenEngine
from pdfmeta.utils.files import FileSystem

LOGGER = logging.getLogger(__name__)


class MetadataService:
    """Coordinates field classification, file selection and rewriting."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        engine: TokenEngine | None = None,
        filesystem: FileSystem | None = None,
        rewriter: MetadataRewriter | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.engine = engine or TokenEngine()
        self.filesystem = filesystem or FileSystem(self.config.stream_wrappers)
        self.rewriter = rewriter or MetadataRewriter(
            self.filesystem,
            keyword_separator=self.config.keyword_separator,
            sync_xmp=self.config.sync_xmp,
        )

    def collect_files(self, entity: Any) -> List[SelectedFile]:
        """Return the PDFs of ``entity`` with the metadata to write into each."""
        namespace = self.config.settings_namespace
        fields = classify_fields(entity, namespace)
        file_fields = expand_references(fields.reference_fields, namespace)
        return select_files(
            fields.file_fields + file_fields,
            self.engine,
            mime_type=self.config.pdf_mime_type,
            keyword_separator=self.config.keyword_separator,
        )

    def process(self, entity: Any) -> RewriteStats:
        files = self.collect_files(entity)
        if not files:
            LOGGER.debug("No PDF files with metadata enabled on %r", entity)
            return RewriteStats()
        return self.rewriter.rewrite_all(files)

    def append_metadata(self, entity: Any) -> None:
        """Write metadata to every eligible PDF of ``entity``.

        Errors never propagate to the caller; they are only logged.
        """
        try:
            stats = self.process(entity)
        except Exception:
            LOGGER.exception("Failed to append PDF metadata for %r", entity)
            return
        if stats.missing or stats.failed:
            LOGGER.warning(
                "PDF metadata for %r: %d written, %d missing, %d failed",
                entity,
                stats.written,
                stats.missing,
                stats.failed,
            )
