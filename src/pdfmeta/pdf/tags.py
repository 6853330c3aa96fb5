"""Tag values and the in-memory tag set of a PDF document.

A tag is addressed as ``<namespace>:<name>``, e.g. ``PDF:Title``. Values are
either single strings (``MonoValue``) or ordered lists of strings
(``MultiValue``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Sequence, Union

from pdfmeta.utils.text import join_keywords, split_keywords

PDF_NAMESPACE = "PDF"

TITLE = "PDF:Title"
AUTHOR = "PDF:Author"
SUBJECT = "PDF:Subject"
KEYWORDS = "PDF:Keywords"

MANAGED_TAGS = (TITLE, AUTHOR, SUBJECT, KEYWORDS)
MULTI_VALUED_TAGS = frozenset({KEYWORDS})


def tag_key(tag: str) -> str:
    """Return the dictionary key of a tag, ``PDF:Title`` -> ``Title``."""
    return tag.split(":", 1)[-1]


def tag_namespace(tag: str) -> str:
    return tag.split(":", 1)[0] if ":" in tag else ""


@dataclass(slots=True)
class MonoValue:
    value: str = ""
    modified: bool = field(default=False, compare=False)

    def set(self, value: str) -> None:
        self.value = value
        self.modified = True

    def as_text(self, separator: str = ",") -> str:
        return self.value

    def as_list(self) -> List[str]:
        return [self.value]


@dataclass(slots=True)
class MultiValue:
    values: List[str] = field(default_factory=list)
    modified: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        self.values = list(self.values)

    def set(self, value: Union[str, Sequence[str]]) -> None:
        if isinstance(value, str):
            self.values = [value] if value else []
        else:
            self.values = list(value)
        self.modified = True

    def as_text(self, separator: str = ",") -> str:
        return join_keywords(self.values, separator=separator)

    def as_list(self) -> List[str]:
        return list(self.values)


TagValue = Union[MonoValue, MultiValue]


@dataclass(slots=True)
class TagEntry:
    tag: str
    value: TagValue

    @property
    def key(self) -> str:
        return tag_key(self.tag)

    def get_value(self) -> TagValue:
        return self.value


class MetadataBag:
    """Ordered tag set, at most one entry per tag."""

    def __init__(self, entries: Iterable[TagEntry] = ()) -> None:
        self._entries: Dict[str, TagEntry] = {}
        self._added: set[str] = set()
        for entry in entries:
            self._entries[entry.tag] = entry

    def get(self, tag: str) -> TagEntry | None:
        return self._entries.get(tag)

    def add(self, entry: TagEntry) -> None:
        """Add ``entry``, replacing any entry held for the same tag."""
        self._entries[entry.tag] = entry
        self._added.add(entry.tag)

    def changed(self) -> List[TagEntry]:
        """Entries added or modified since the bag was read."""
        return [
            entry
            for tag, entry in self._entries.items()
            if tag in self._added or entry.value.modified
        ]

    def as_dict(self) -> Dict[str, Union[str, List[str]]]:
        return {
            tag: entry.value.as_list() if isinstance(entry.value, MultiValue) else entry.value.value
            for tag, entry in self._entries.items()
        }

    def __contains__(self, tag: object) -> bool:
        return tag in self._entries

    def __iter__(self) -> Iterator[TagEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)


def read_value(tag: str, text: str, *, separator: str = ",") -> TagValue:
    """Build the value object for a tag read from the document."""
    if tag in MULTI_VALUED_TAGS:
        return MultiValue(split_keywords(text, separator=separator))
    return MonoValue(text)
