"""Load records from a JSON export of the host content store.

Expected layout::

    {
      "records": [
        {
          "id": "1",
          "type": "node",
          "bundle": "report",
          "attributes": {"title": "Annual Report"},
          "fields": {
            "field_pdf": {
              "kind": "file",
              "files": [{"uri": "public://report.pdf", "mime_type": "application/pdf"}],
              "third_party_settings": {"pdf_metadata": {"enabled": true, "meta_types": {...}}}
            },
            "field_media": {"kind": "reference", "targets": ["media/5"]},
            "field_tags": {"kind": "value", "values": ["finance", "2024"]}
          }
        }
      ]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Tuple

from pdfmeta.models import Field, FileField, FileItem, Record, ReferenceField, ValueField

LOGGER = logging.getLogger(__name__)


class RecordLoadError(ValueError):
    """Raised when a record export cannot be understood."""


class RecordStore:
    """Records loaded from an export, addressable by ``type/id``."""

    def __init__(self, records: List[Record] | None = None) -> None:
        self._records: Dict[Tuple[str, str], Record] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: Record) -> None:
        self._records[(record.entity_type_id, str(record.id))] = record

    def get(self, entity_type_id: str, record_id: str) -> Record | None:
        return self._records.get((entity_type_id, str(record_id)))

    def lookup(self, key: str) -> Record:
        """Return the record for a ``type/id`` key."""
        entity_type_id, sep, record_id = key.partition("/")
        record = self.get(entity_type_id, record_id) if sep else None
        if record is None:
            raise RecordLoadError(f"Unknown record {key!r}")
        return record

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)


def _build_file(data: Mapping[str, Any]) -> FileItem:
    if not isinstance(data, Mapping):
        raise RecordLoadError(f"File entry must be an object, got {data!r}")
    try:
        return FileItem(uri=data["uri"], mime_type=data["mime_type"], filename=data.get("filename"))
    except KeyError as exc:
        raise RecordLoadError(f"File entry is missing {exc.args[0]!r}") from exc


def _build_field(name: str, data: Mapping[str, Any]) -> Field:
    kind = data.get("kind", "value")
    settings = dict(data.get("third_party_settings") or {})
    if kind == "file":
        return FileField(name, settings, files=[_build_file(item) for item in data.get("files", [])])
    if kind == "reference":
        # Targets are linked once every record is loaded.
        return ReferenceField(name, settings)
    if kind == "value":
        values = data.get("values", [])
        return ValueField(name, settings, values=list(values) if isinstance(values, list) else [values])
    raise RecordLoadError(f"Field {name!r} has unknown kind {kind!r}")


def parse_records(document: Mapping[str, Any]) -> RecordStore:
    """Build a ``RecordStore`` from an already decoded export."""
    items = document.get("records") if isinstance(document, Mapping) else None
    if not isinstance(items, list):
        raise RecordLoadError("Export must contain a 'records' list")

    store = RecordStore()
    pending: List[Tuple[ReferenceField, List[Any]]] = []
    for item in items:
        if not isinstance(item, Mapping):
            raise RecordLoadError(f"Record entry must be an object, got {item!r}")
        try:
            record = Record(
                id=str(item["id"]),
                entity_type_id=item["type"],
                bundle=item.get("bundle", ""),
                attributes=dict(item.get("attributes") or {}),
            )
        except KeyError as exc:
            raise RecordLoadError(f"Record is missing {exc.args[0]!r}") from exc

        fields = item.get("fields") or {}
        if not isinstance(fields, Mapping):
            raise RecordLoadError(f"Fields of {record!r} must be an object")
        for name, field_data in fields.items():
            if not isinstance(field_data, Mapping):
                raise RecordLoadError(f"Field {name!r} of {record!r} must be an object")
            field = _build_field(name, field_data)
            record.fields[name] = field
            if isinstance(field, ReferenceField):
                pending.append((field, list(field_data.get("targets", []))))
        store.add(record)

    for field, targets in pending:
        for target in targets:
            if isinstance(target, Mapping):
                field.targets.append(_build_file(target))
            else:
                field.targets.append(store.lookup(str(target)))

    LOGGER.debug("Loaded %d records", len(store))
    return store


def load_records(path: Path) -> RecordStore:
    """Load a record export from ``path``."""
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RecordLoadError(f"Invalid JSON in {path}: {exc}") from exc
    return parse_records(document)
