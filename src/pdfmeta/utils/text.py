"""Text helpers for rendered metadata values."""

from __future__ import annotations

from typing import Iterable, List


def split_keywords(text: str, *, separator: str = ",") -> List[str]:
    """Split a rendered keywords string into its items.

    Items are trimmed, empty items dropped and order preserved.
    """
    if not text:
        return []
    return [item.strip() for item in text.split(separator) if item.strip()]


def join_keywords(keywords: Iterable[str], *, separator: str = ",") -> str:
    return f"{separator} ".join(keywords)


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces."""
    return " ".join(text.split())
