"""Render metadata templates against a record."""

from __future__ import annotations

import logging
from typing import Dict

from pdfmeta.models import META_TYPES, MetaTypes, Record, ResolvedMetadata
from pdfmeta.tokens.engine import TokenEngine
from pdfmeta.utils.text import normalize_whitespace, split_keywords

LOGGER = logging.getLogger(__name__)


def replace_tokens(record: Record, meta_types: MetaTypes, engine: TokenEngine) -> Dict[str, str]:
    """Replace tokens in each template, clearing the ones that do not resolve."""
    token_data = {record.get_entity_type_id(): record}
    templates = meta_types.as_dict()
    return {
        name: normalize_whitespace(engine.replace(templates[name], token_data, clear=True))
        for name in META_TYPES
    }


def resolve_metadata(
    record: Record,
    meta_types: MetaTypes,
    engine: TokenEngine,
    *,
    keyword_separator: str = ",",
) -> ResolvedMetadata:
    """Resolve the four templates into concrete metadata for ``record``."""
    values = replace_tokens(record, meta_types, engine)
    metadata = ResolvedMetadata(
        title=values["title"],
        author=values["author"],
        subject=values["subject"],
        keywords=tuple(split_keywords(values["keywords"], separator=keyword_separator)),
    )
    LOGGER.debug("Resolved metadata for %r: %s", record, metadata)
    return metadata
