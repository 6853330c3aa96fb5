"""Pick the PDF files of eligible fields and resolve their metadata."""

from __future__ import annotations

import logging
from typing import Iterable, List

from pdfmeta.config import PDF_MIME_TYPE
from pdfmeta.models import FileFieldDescriptor, FileItem, SelectedFile
from pdfmeta.pipeline.templates import resolve_metadata
from pdfmeta.tokens.engine import TokenEngine

LOGGER = logging.getLogger(__name__)


def select_files(
    file_fields: Iterable[FileFieldDescriptor],
    engine: TokenEngine,
    *,
    mime_type: str = PDF_MIME_TYPE,
    keyword_separator: str = ",",
) -> List[SelectedFile]:
    """Pair every PDF held by ``file_fields`` with its resolved metadata."""
    files: List[SelectedFile] = []
    for item in file_fields:
        for file in item.field.referenced_entities():
            if not isinstance(file, FileItem) or file.get_mime_type() != mime_type:
                LOGGER.debug("Skipping non-PDF file in %s: %s", item.field.name, file)
                continue

            files.append(
                SelectedFile(
                    file=file,
                    metadata=resolve_metadata(
                        item.token_entity,
                        item.settings.meta_types,
                        engine,
                        keyword_separator=keyword_separator,
                    ),
                )
            )
    return files
