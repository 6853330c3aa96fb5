"""Token replacement for metadata templates.

Tokens look like ``[type:name:name...]``. ``type`` picks a record from the
replacement data (keyed by entity type id) and each following name walks one
step: a record attribute or field, a value index, a referenced record or a
file property. Examples::

    [node:title]
    [media:name:value]
    [node:field_tags:1]
    [node:field_media:entity:name]
    [node:field_pdf:filename]
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Mapping, Sequence

from pdfmeta.models import FileField, FileItem, Record, ReferenceField, ValueField

LOGGER = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\[([^\s\[\]:]+):([^\[\]]+)\]")

FILE_PROPERTIES = {
    "uri": lambda item: item.uri,
    "url": lambda item: item.uri,
    "filename": lambda item: item.filename or item.uri.rsplit("/", 1)[-1],
    "mime": lambda item: item.mime_type,
    "mime_type": lambda item: item.mime_type,
}


class _Unresolved(Exception):
    """Raised internally when a token chain cannot be followed."""


class TokenEngine:
    """Replaces tokens in text with values from records."""

    def replace(self, text: str, data: Mapping[str, Any], *, clear: bool = False) -> str:
        """Replace every token in ``text``.

        Tokens that cannot be resolved are removed when ``clear`` is set and
        left untouched otherwise.
        """
        if not text:
            return ""

        def _substitute(match: re.Match[str]) -> str:
            token_type, chain = match.group(1), match.group(2)
            try:
                return self.resolve(token_type, chain.split(":"), data)
            except _Unresolved:
                LOGGER.debug("Unresolved token %s", match.group(0))
                return "" if clear else match.group(0)

        return TOKEN_PATTERN.sub(_substitute, text)

    def resolve(self, token_type: str, names: Sequence[str], data: Mapping[str, Any]) -> str:
        if token_type not in data or data[token_type] is None:
            raise _Unresolved(token_type)
        return self._render(self._walk(data[token_type], list(names)))

    def _walk(self, current: Any, names: List[str]) -> Any:
        while names:
            name = names.pop(0)
            if isinstance(current, Record):
                current = self._record_step(current, name)
            elif isinstance(current, ValueField):
                current = self._value_step(current, name)
            elif isinstance(current, ReferenceField):
                current = self._reference_step(current, name)
            elif isinstance(current, FileField):
                current = self._file_field_step(current, name)
            elif isinstance(current, FileItem):
                current = self._file_step(current, name)
            elif name == "value" and isinstance(current, (str, int, float)):
                continue
            else:
                raise _Unresolved(name)
        return current

    def _record_step(self, record: Record, name: str) -> Any:
        if name in ("id", "nid", "mid"):
            return record.id
        if name == "bundle":
            return record.bundle
        if name in record.attributes:
            return record.attributes[name]
        if name in record.fields:
            return record.fields[name]
        raise _Unresolved(name)

    def _value_step(self, item: ValueField, name: str) -> Any:
        if name == "value":
            return _index(item.values, 0)
        if name.isdigit():
            return _index(item.values, int(name))
        raise _Unresolved(name)

    def _reference_step(self, item: ReferenceField, name: str) -> Any:
        if name == "target_id":
            return ", ".join(str(getattr(target, "id", "")) for target in item.targets)
        if name.isdigit():
            return _index(item.targets, int(name))
        target = _index(item.targets, 0)
        if name == "entity":
            return target
        return self._walk(target, [name])

    def _file_field_step(self, item: FileField, name: str) -> Any:
        if name.isdigit():
            return _index(item.files, int(name))
        target = _index(item.files, 0)
        if name == "entity":
            return target
        return self._file_step(target, name)

    def _file_step(self, item: FileItem, name: str) -> Any:
        if name in FILE_PROPERTIES:
            return FILE_PROPERTIES[name](item)
        raise _Unresolved(name)

    def _render(self, value: Any) -> str:
        if value is None:
            raise _Unresolved("empty value")
        if isinstance(value, Record):
            return value.label()
        if isinstance(value, ValueField):
            return ", ".join(str(v) for v in value.values)
        if isinstance(value, ReferenceField):
            return ", ".join(self._render(target) for target in value.targets)
        if isinstance(value, FileField):
            return ", ".join(FILE_PROPERTIES["filename"](item) for item in value.files)
        if isinstance(value, FileItem):
            return FILE_PROPERTIES["filename"](value)
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return str(value)


def _index(items: Sequence[Any], position: int) -> Any:
    if position >= len(items):
        raise _Unresolved(str(position))
    return items[position]
