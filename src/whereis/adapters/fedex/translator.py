"""Translate FDX tracking payloads into canonical entities."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final

from whereis.domain.model import Entity, Event, IngestionMode, StatusCode, make_event_id
from whereis.domain.model.catalog import GENERIC_EXCEPTION_CODE
from whereis.domain.model.event import utcnow
from whereis.domain.normalization import (
    FixedStatus,
    RuleStatus,
    StatusMap,
    clean_notes,
    missing_before_later_status,
    resolve_status,
    supplement_missing_events,
)

from .schema import ScanEvent, ScanLocation

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import datetime

    from whereis.domain.model import Catalog, TrackingID, UpdateMethod
    from whereis.domain.normalization import RawEvent

    from .schema import TrackResult

log = getLogger(__name__)

FEDEX_PROVIDER: Final = "FedEx"
CUSTOMER_LOCATION: Final = "Customer location"

_DEPARTED_HUB = re.compile(r"Departed FedEx hub", re.IGNORECASE)
_DESTINATION = re.compile(r"destination", re.IGNORECASE)
_EXPORT = re.compile(r"Export", re.IGNORECASE)
_IMPORT = re.compile(r"Import", re.IGNORECASE)


def _text(raw: RawEvent, key: str) -> str:
    value = raw.get(key)
    return "" if value is None else str(value)


def _departed(_entity: Entity, raw: RawEvent) -> int:
    if _text(raw, "locationType") == "ORIGIN_FEDEX_FACILITY":
        return StatusCode.RECEIVED_BY_CARRIER
    if _DEPARTED_HUB.search(_text(raw, "eventDescription")):
        return StatusCode.IN_TRANSIT
    return StatusCode.DEPARTED_IN_TRANSIT


def _arrived(_entity: Entity, raw: RawEvent) -> int:
    location_type = _text(raw, "locationType")
    if location_type == "SORT_FACILITY" and _DESTINATION.search(_text(raw, "eventDescription")):
        return StatusCode.ARRIVED_AT_DESTINATION
    if location_type == "ORIGIN_FEDEX_FACILITY":
        return StatusCode.RECEIVED_BY_CARRIER
    if location_type == "DESTINATION_FEDEX_FACILITY":
        return StatusCode.ARRIVED_AT_DESTINATION
    return StatusCode.ARRIVED_IN_TRANSIT


def _in_transit(_entity: Entity, raw: RawEvent) -> int:
    if _text(raw, "exceptionCode") == "67":
        return StatusCode.FINAL_DELIVERY_IN_PROGRESS
    return StatusCode.LOGISTICS_IN_PROGRESS


def _clearance(_entity: Entity, raw: RawEvent) -> int | None:
    description = _text(raw, "eventDescription")
    if _EXPORT.search(description):
        return StatusCode.EXPORT_RELEASED
    if _IMPORT.search(description):
        return StatusCode.IMPORT_RELEASED
    return None


def _clearance_delay(_entity: Entity, raw: RawEvent) -> int:
    if _IMPORT.search(_text(raw, "eventDescription")):
        return StatusCode.IMPORT_CLEARANCE_IN_PROGRESS
    return StatusCode.EXPORT_CLEARANCE_IN_PROGRESS


FEDEX_STATUS_MAP: Final = StatusMap(
    phase_field="derivedStatusCode",
    event_field="eventType",
    phases=MappingProxyType(
        {
            "IN": {"OC": FixedStatus(3000)},
            "IT": {
                "DR": FixedStatus(3250),
                "DP": RuleStatus(_departed),
                "AR": RuleStatus(_arrived),
                "IT": RuleStatus(_in_transit),
                "AF": FixedStatus(3001),
                "CC": RuleStatus(_clearance),
                "OD": FixedStatus(3450),
                "RR": FixedStatus(3450),
            },
            "CD": {"CD": RuleStatus(_clearance_delay)},
            "PU": {"PU": FixedStatus(3050)},
            "DL": {"DL": FixedStatus(3500)},
            "DE": {"DE": FixedStatus(3450)},
            "CA": {"CA": FixedStatus(3009)},
        }
    ),
)

# FDX exception code -> canonical exception code; anything else is generic
FEDEX_EXCEPTION_CODES: Final[Mapping[str, int]] = MappingProxyType({"08": 907, "29": 909})
_NO_EXCEPTION: Final = frozenset({"", "71"})

FEDEX_MISSING_EVENT_RULES: Final = (
    missing_before_later_status(StatusCode.RECEIVED_BY_CARRIER),
)


def map_exception_code(code: str) -> int | None:
    code = code.strip()
    if code in _NO_EXCEPTION:
        return None
    return FEDEX_EXCEPTION_CODES.get(code, GENERIC_EXCEPTION_CODE)


def format_location(location: ScanLocation, location_type: str = "") -> str:
    """Scan location text; customer scans without an address read "Customer location"."""

    return location.describe() or (CUSTOMER_LOCATION if location_type == "CUSTOMER" else "")


@dataclass(slots=True)
class FedexTranslator:
    catalog: Catalog
    clock: Callable[[], datetime] = field(default=utcnow)

    def translate(
        self,
        tracking_id: TrackingID,
        track_result: TrackResult,
        update_method: UpdateMethod,
    ) -> Entity:
        entity = Entity(tracking_id=tracking_id, ingestion_mode=IngestionMode.PULL)
        if track_result.shipper_information is not None:
            entity.additional["origin"] = track_result.shipper_information.address.describe()
        if track_result.recipient_information is not None:
            entity.additional["destination"] = (
                track_result.recipient_information.address.describe()
            )

        now = self.clock()
        # FDX lists scans newest first
        for raw in reversed(track_result.scan_events):
            event = self.translate_scan(entity, raw, update_method, now=now)
            if not entity.add_event(event):
                log.debug("Dropped duplicate event %s", event.event_id)

        supplement_missing_events(entity, FEDEX_MISSING_EVENT_RULES, self.catalog, now=now)
        return entity

    def translate_scan(
        self,
        entity: Entity,
        raw: Mapping[str, Any],
        update_method: UpdateMethod,
        *,
        now: datetime,
    ) -> Event:
        scan = ScanEvent.model_validate(raw)
        status = resolve_status(FEDEX_STATUS_MAP, entity, raw, when=scan.date, now=now)
        what = self.catalog.status_description(status)

        exception_code = map_exception_code(scan.exception_code)
        exception_desc = (
            self.catalog.exception_description(exception_code)
            if exception_code is not None
            else None
        )

        notes = scan.event_description
        if scan.exception_description:
            notes = f"{notes}: {scan.exception_description}"

        return Event(
            event_id=make_event_id(entity.tracking_id, scan.date, status),
            status=status,
            what=what,
            when=scan.date,
            where=format_location(scan.scan_location, scan.location_type),
            whom=FEDEX_PROVIDER,
            notes=clean_notes(notes, what),
            operator_code=entity.tracking_id.operator,
            tracking_num=entity.tracking_id.tracking_num,
            data_provider=FEDEX_PROVIDER,
            exception_code=exception_code,
            exception_desc=exception_desc,
            update_method=update_method,
            updated_at=now,
            source_data=dict(raw),
        )
