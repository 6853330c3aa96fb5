"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

SETTINGS_NAMESPACE = "pdf_metadata"
PDF_MIME_TYPE = "application/pdf"


def _get_default_stream_wrappers() -> Dict[str, Path]:
    """Default locations for ``public://`` and ``private://`` uris."""
    return {
        "public": Path("sites/default/files"),
        "private": Path("private"),
    }


@dataclass(slots=True)
class AppConfig:
    settings_namespace: str = SETTINGS_NAMESPACE
    pdf_mime_type: str = PDF_MIME_TYPE
    keyword_separator: str = ","
    sync_xmp: bool = True
    stream_wrappers: Dict[str, Path] = field(default_factory=_get_default_stream_wrappers)

    def resolve_stream_wrappers(self, base_dir: Path | None = None) -> Dict[str, Path]:
        """Return stream wrapper roots, relative ones joined onto ``base_dir``."""
        resolved: Dict[str, Path] = {}
        for scheme, root in self.stream_wrappers.items():
            root = Path(root)
            if root.is_absolute() or base_dir is None:
                resolved[scheme] = root
            else:
                resolved[scheme] = base_dir / root
        return resolved
