"""Core pdfmeta data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple, Union

META_TYPES = ("title", "author", "subject", "keywords")


@dataclass(slots=True)
class FileItem:
    """A managed file as stored by the host."""

    uri: str
    mime_type: str
    filename: str | None = None

    def get_file_uri(self) -> str:
        return self.uri

    def get_mime_type(self) -> str:
        return self.mime_type


@dataclass(slots=True, eq=False)
class Field:
    """Base class for record fields.

    ``third_party_settings`` keeps the host's per-module settings blocks as-is,
    keyed by namespace.
    """

    name: str
    third_party_settings: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def get_third_party_settings(self, namespace: str) -> Dict[str, Any]:
        return dict(self.third_party_settings.get(namespace) or {})

    def referenced_entities(self) -> List[Any]:
        return []


@dataclass(slots=True, eq=False)
class FileField(Field):
    files: List[FileItem] = field(default_factory=list)

    def referenced_entities(self) -> List[FileItem]:
        return list(self.files)


@dataclass(slots=True, eq=False)
class ReferenceField(Field):
    targets: List[Union["Record", FileItem]] = field(default_factory=list)

    def referenced_entities(self) -> List[Union["Record", FileItem]]:
        return list(self.targets)


@dataclass(slots=True, eq=False)
class ValueField(Field):
    """Plain values (text, numbers). Only ever read by tokens."""

    values: List[Any] = field(default_factory=list)


@dataclass(slots=True, eq=False)
class Record:
    """A content item owned by the host content store."""

    id: str
    entity_type_id: str
    bundle: str = ""
    attributes: Dict[str, Any] = field(default_factory=dict)
    fields: Dict[str, Field] = field(default_factory=dict)

    def get_fields(self) -> Dict[str, Field]:
        return self.fields

    def get_entity_type_id(self) -> str:
        return self.entity_type_id

    def label(self) -> str:
        return str(self.attributes.get("title") or self.attributes.get("name") or self.id)

    def __repr__(self) -> str:
        return f"Record({self.entity_type_id}/{self.id})"


@dataclass(slots=True, frozen=True)
class MetaTypes:
    """Token templates, one per managed tag."""

    title: str = ""
    author: str = ""
    subject: str = ""
    keywords: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "MetaTypes":
        data = data or {}
        return cls(**{name: str(data.get(name) or "") for name in META_TYPES})

    def as_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in META_TYPES}


@dataclass(slots=True, frozen=True)
class FieldConfig:
    enabled: bool = False
    reference_enabled: bool = False
    meta_types: MetaTypes = field(default_factory=MetaTypes)

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "FieldConfig":
        """Build a config from the host's settings block."""
        return cls(
            enabled=bool(settings.get("enabled", False)),
            reference_enabled=bool(settings.get("reference_enabled", False)),
            meta_types=MetaTypes.from_mapping(settings.get("meta_types")),
        )


@dataclass(slots=True, frozen=True)
class ResolvedMetadata:
    title: str = ""
    author: str = ""
    subject: str = ""
    keywords: Tuple[str, ...] = ()


@dataclass(slots=True)
class FileFieldDescriptor:
    """A file field eligible for metadata.

    ``parent_entity`` is set when the field was reached through a reference;
    tokens are then resolved against it instead of ``entity``.
    """

    entity: Record
    field: FileField
    settings: FieldConfig
    parent_entity: Record | None = None

    @property
    def token_entity(self) -> Record:
        return self.parent_entity if self.parent_entity is not None else self.entity


@dataclass(slots=True)
class ReferenceFieldDescriptor:
    field: ReferenceField
    settings: FieldConfig
    parent_entity: Record


@dataclass(slots=True)
class ClassifiedFields:
    file_fields: List[FileFieldDescriptor] = field(default_factory=list)
    reference_fields: List[ReferenceFieldDescriptor] = field(default_factory=list)


@dataclass(slots=True)
class SelectedFile:
    file: FileItem
    metadata: ResolvedMetadata


def default_field_settings(entity_type_id: str) -> Dict[str, Any]:
    """Settings the host's field form proposes before anything is saved."""
    token_default = (
        f"[{entity_type_id}:title]" if entity_type_id == "node" else f"[{entity_type_id}:name:value]"
    )
    return {
        "enabled": False,
        "reference_enabled": False,
        "meta_types": {
            "title": token_default,
            "author": "",
            "subject": "",
            "keywords": token_default,
        },
        "type": entity_type_id,
    }

