"""Translate EG1 push payloads into canonical entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from whereis.domain.errors import TrackingError, TrackingValidationError
from whereis.domain.model import (
    Entity,
    EntityType,
    Event,
    IngestionMode,
    TrackingID,
    UpdateMethod,
    make_event_id,
)
from whereis.domain.model.event import utcnow

from .schema import PushEvent, PushItem, PushPayload

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import datetime

    from whereis.domain.model import Catalog

log = getLogger(__name__)


@dataclass(slots=True)
class PushTranslator:
    """Builds entities from a push body, skipping items and events it cannot read."""

    catalog: Catalog
    operator: str
    validate_tracking_num: Callable[[str], None]
    clock: Callable[[], datetime] = field(default=utcnow)

    def translate(self, payload: object) -> list[Entity]:
        try:
            body = PushPayload.model_validate(payload)
        except ValidationError as exc:
            raise TrackingValidationError("400-08", detail="missing entities attribute") from exc

        now = self.clock()
        entities: list[Entity] = []
        for index, raw_item in enumerate(body.entities):
            try:
                item = PushItem.model_validate(raw_item)
                tracking_id = self._tracking_id(item.entity.id)
            except (ValidationError, TrackingError) as exc:
                log.warning("Skipping push item %s: %s", index, exc)
                continue
            entities.append(self._build_entity(tracking_id, item, now=now))
        return entities

    def _tracking_id(self, raw_id: str) -> TrackingID:
        operator, sep, tracking_num = raw_id.strip().partition("-")
        if not sep or not tracking_num:
            raise TrackingValidationError("400-05", detail=raw_id)
        if operator.lower() != self.operator:
            raise TrackingValidationError("400-04", detail=f"OPERATOR_CODE[{operator}]")
        self.validate_tracking_num(tracking_num)
        return TrackingID(operator=self.operator, tracking_num=tracking_num)

    def _build_entity(self, tracking_id: TrackingID, item: PushItem, *, now: datetime) -> Entity:
        header = item.entity
        entity = Entity(
            tracking_id=tracking_id,
            ingestion_mode=IngestionMode.PUSH,
            params=dict(header.params),
            additional=dict(header.additional),
        )
        if header.uuid is not None:
            entity.uuid = header.uuid
        if header.type in EntityType:
            entity.type = EntityType(header.type)

        for raw_event in item.events:
            event = self._build_event(tracking_id, raw_event, now=now)
            if event is not None and not entity.add_event(event):
                log.debug("Dropped duplicate event %s", event.event_id)
        return entity

    def _build_event(
        self,
        tracking_id: TrackingID,
        raw: Mapping[str, Any],
        *,
        now: datetime,
    ) -> Event | None:
        try:
            pushed = PushEvent.model_validate(raw)
        except ValidationError as exc:
            log.warning("Skipping push event for %s: %s errors", tracking_id, exc.error_count())
            return None

        extra = pushed.additional
        return Event(
            event_id=make_event_id(tracking_id, pushed.when, pushed.status),
            status=pushed.status,
            what=pushed.what or self.catalog.status_description(pushed.status),
            when=pushed.when,
            where=pushed.where,
            whom=pushed.whom,
            notes=pushed.notes,
            operator_code=tracking_id.operator,
            tracking_num=tracking_id.tracking_num,
            data_provider=extra.data_provider or pushed.whom,
            exception_code=extra.exception_code,
            exception_desc=extra.exception_desc,
            notification_code=extra.notification_code,
            notification_desc=extra.notification_desc,
            update_method=UpdateMethod.PUSH,
            updated_at=now,
            source_data=dict(pushed.source_data),
        )
