"""Translate SFEX route lists into canonical entities."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final

from whereis.domain.model import Entity, Event, IngestionMode, StatusCode, make_event_id
from whereis.domain.model.event import utcnow
from whereis.domain.normalization import (
    FixedStatus,
    RuleStatus,
    StatusMap,
    clean_notes,
    missing_after_trigger,
    resolve_status,
    supplement_missing_events,
)

from .schema import Route

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime, tzinfo

    from whereis.domain.model import Catalog, TrackingID, UpdateMethod
    from whereis.domain.normalization import RawEvent

log = getLogger(__name__)

SFEX_PROVIDER: Final = "SF Express"
TRANSIT_PREFIX: Final = "快件途经"

_SORTED = re.compile(r"完成分拣")
_LEFT = re.compile(r"快件离开")
_CLEARING = re.compile(r"清关中")
_CLEARED = re.compile(r"已清关")
_OUT_FOR_DELIVERY = re.compile(r"派送中")

# opCode fallback for secondaryStatusCode 201 when the remark is not conclusive
_IN_TRANSIT_OP_CODES: Final[Mapping[str, int]] = MappingProxyType(
    {
        "30": StatusCode.LOGISTICS_IN_PROGRESS,
        "31": StatusCode.ARRIVED_IN_TRANSIT,
        "36": StatusCode.DEPARTED_IN_TRANSIT,
        "105": StatusCode.IN_TRANSIT,
        "106": StatusCode.ARRIVED_AT_DESTINATION,
        "310": StatusCode.ARRIVED_IN_TRANSIT,
    }
)

POST_ARRIVAL_STATUSES: Final = frozenset({3002, 3003, 3004, 3350, 3400, 3500})
POST_IMPORT_RELEASE_STATUSES: Final = frozenset({3004, 3450, 3500})


def _text(raw: RawEvent, key: str) -> str:
    value = raw.get(key)
    return "" if value is None else str(value)


def _in_transit(_entity: Entity, raw: RawEvent) -> int | None:
    remark = _text(raw, "remark")
    if _SORTED.search(remark):
        return StatusCode.SCANNED_IN_TRANSIT
    if _LEFT.search(remark):
        return StatusCode.DEPARTED_IN_TRANSIT
    return _IN_TRANSIT_OP_CODES.get(_text(raw, "opCode").strip())


def _status_name_rule(pattern: re.Pattern[str], status: int) -> RuleStatus:
    def rule(_entity: Entity, raw: RawEvent) -> int | None:
        return status if pattern.search(_text(raw, "secondaryStatusName")) else None

    return RuleStatus(rule)


SFEX_STATUS_MAP: Final = StatusMap(
    phase_field="secondaryStatusCode",
    event_field="opCode",
    phases=MappingProxyType(
        {
            "101": {"50": FixedStatus(3100), "54": FixedStatus(3100)},
            "201": RuleStatus(_in_transit),
            "204": _status_name_rule(_CLEARING, StatusCode.IMPORT_CLEARANCE_IN_PROGRESS),
            "205": _status_name_rule(_CLEARED, StatusCode.IMPORT_RELEASED),
            "301": _status_name_rule(_OUT_FOR_DELIVERY, StatusCode.FINAL_DELIVERY_IN_PROGRESS),
            "1301": {"70": FixedStatus(3300)},
            "401": {"80": FixedStatus(3500)},
        }
    ),
)

SFEX_MISSING_EVENT_RULES: Final = (
    missing_after_trigger(
        StatusCode.ARRIVED_AT_DESTINATION,
        trigger=StatusCode.IN_TRANSIT,
        implied_by=POST_ARRIVAL_STATUSES,
        requires_where=True,
    ),
    missing_after_trigger(
        StatusCode.IMPORT_RELEASED,
        trigger=StatusCode.IMPORT_CLEARANCE_IN_PROGRESS,
        implied_by=POST_IMPORT_RELEASE_STATUSES,
        requires_where=True,
    ),
)


def route_location(route: Route) -> str:
    remark = route.remark.strip()
    if remark.startswith(TRANSIT_PREFIX):
        return remark[len(TRANSIT_PREFIX) :].strip()
    return route.accept_address.strip()


@dataclass(slots=True)
class SfexTranslator:
    catalog: Catalog
    source_timezone: tzinfo
    clock: Callable[[], datetime] = field(default=utcnow)

    def translate(
        self,
        tracking_id: TrackingID,
        routes: Sequence[Mapping[str, Any]],
        params: Mapping[str, str],
        update_method: UpdateMethod,
    ) -> Entity:
        entity = Entity(
            tracking_id=tracking_id,
            ingestion_mode=IngestionMode.PULL,
            params=dict(params),
        )
        now = self.clock()
        for raw in routes:
            event = self.translate_route(entity, raw, update_method, now=now)
            if not entity.add_event(event):
                log.debug("Dropped duplicate event %s", event.event_id)

        supplement_missing_events(entity, SFEX_MISSING_EVENT_RULES, self.catalog, now=now)
        return entity

    def translate_route(
        self,
        entity: Entity,
        raw: Mapping[str, Any],
        update_method: UpdateMethod,
        *,
        now: datetime,
    ) -> Event:
        route = Route.model_validate(raw)
        when = route.accepted_at(self.source_timezone)
        status = resolve_status(SFEX_STATUS_MAP, entity, raw, when=when, now=now)
        what = self.catalog.status_description(status)
        return Event(
            event_id=make_event_id(entity.tracking_id, when, status),
            status=status,
            what=what,
            when=when,
            where=route_location(route),
            whom=SFEX_PROVIDER,
            notes=clean_notes(route.remark, what),
            operator_code=entity.tracking_id.operator,
            tracking_num=entity.tracking_id.tracking_num,
            data_provider=SFEX_PROVIDER,
            update_method=update_method,
            updated_at=now,
            source_data=dict(raw),
        )
