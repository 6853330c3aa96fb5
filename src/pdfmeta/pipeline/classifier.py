"""Find the fields of a record that take part in metadata writing."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List

from pdfmeta.config import SETTINGS_NAMESPACE
from pdfmeta.models import (
    ClassifiedFields,
    Field,
    FieldConfig,
    FileField,
    FileFieldDescriptor,
    Record,
    ReferenceField,
    ReferenceFieldDescriptor,
)

LOGGER = logging.getLogger(__name__)


def get_field_config(field: Field, namespace: str = SETTINGS_NAMESPACE) -> FieldConfig | None:
    """Return the field's metadata config, or None when it has none."""
    settings = field.get_third_party_settings(namespace)
    if not settings:
        return None
    return FieldConfig.from_settings(settings)


def classify_fields(entity: Any, namespace: str = SETTINGS_NAMESPACE) -> ClassifiedFields:
    """Split the enabled fields of ``entity`` into file and reference fields."""
    fields = ClassifiedFields()
    if not isinstance(entity, Record):
        return fields

    for name, field in entity.get_fields().items():
        config = get_field_config(field, namespace)
        if config is None or not config.enabled:
            continue

        if isinstance(field, ReferenceField):
            fields.reference_fields.append(
                ReferenceFieldDescriptor(field=field, settings=config, parent_entity=entity)
            )
        elif isinstance(field, FileField):
            fields.file_fields.append(
                FileFieldDescriptor(entity=entity, field=field, settings=config)
            )
        else:
            LOGGER.debug("Field %s on %r has metadata enabled but holds no files", name, entity)

    return fields


def expand_references(
    references: Iterable[ReferenceFieldDescriptor], namespace: str = SETTINGS_NAMESPACE
) -> List[FileFieldDescriptor]:
    """Collect file fields of referenced records that accept metadata by reference."""
    file_fields: List[FileFieldDescriptor] = []
    for reference in references:
        for ref_entity in reference.field.referenced_entities():
            if not isinstance(ref_entity, Record):
                continue
            for ref_field in ref_entity.get_fields().values():
                if not isinstance(ref_field, FileField):
                    continue
                config = get_field_config(ref_field, namespace)
                # Only fields with 'reference_enabled' accept metadata from referencing records.
                if config is None or not config.reference_enabled:
                    continue
                file_fields.append(
                    FileFieldDescriptor(
                        entity=ref_entity,
                        field=ref_field,
                        settings=config,
                        parent_entity=reference.parent_entity,
                    )
                )
    return file_fields
