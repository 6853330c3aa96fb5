"""Entry points called by the host when records are saved."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from pdfmeta.pipeline.service import MetadataService

LOGGER = logging.getLogger(__name__)

ENTITY_INSERT = "entity.insert"
ENTITY_UPDATE = "entity.update"


class EntityEventSubscriber:
    """Runs the metadata pipeline on record insert and update."""

    def __init__(self, service: MetadataService) -> None:
        self.service = service

    def get_subscribed_events(self) -> Dict[str, Callable[[Any], None]]:
        return {
            ENTITY_UPDATE: self.on_entity_update,
            ENTITY_INSERT: self.on_entity_insert,
        }

    def on_entity_insert(self, entity: Any) -> None:
        self.service.append_metadata(entity)

    def on_entity_update(self, entity: Any) -> None:
        self.service.append_metadata(entity)

    def dispatch(self, event_name: str, entity: Any) -> None:
        handler = self.get_subscribed_events().get(event_name)
        if handler is None:
            LOGGER.debug("Ignoring event %s", event_name)
            return
        handler(entity)
