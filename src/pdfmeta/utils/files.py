"""Utility helpers for working with files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, Mapping


def iter_pdf_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield PDF paths from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_pdf_paths(sorted(child for child in item.rglob("*.pdf")))
        elif item.is_file() and item.suffix.lower() == ".pdf":
            yield item


def split_uri(uri: str) -> tuple[str | None, str]:
    """Split ``scheme://target`` into its parts; plain paths have no scheme."""
    scheme, sep, target = uri.partition("://")
    if not sep or not scheme or os.sep in scheme or "/" in scheme:
        return None, uri
    return scheme, target


class FileSystem:
    """Maps host file uris to local paths."""

    def __init__(self, stream_wrappers: Mapping[str, Path] | None = None) -> None:
        self.stream_wrappers = {k: Path(v) for k, v in (stream_wrappers or {}).items()}

    def realpath(self, uri: str) -> Path:
        scheme, target = split_uri(uri)
        if scheme is None:
            return Path(target).resolve()
        if scheme not in self.stream_wrappers:
            raise ValueError(f"No stream wrapper registered for scheme {scheme!r}")
        return (self.stream_wrappers[scheme] / target).resolve()

    def exists(self, uri: str) -> bool:
        try:
            path = self.realpath(uri)
        except ValueError:
            return False
        return path.is_file()
