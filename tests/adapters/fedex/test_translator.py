from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from tests.helpers.carriers import fedex_scan as scan
from whereis.adapters.fedex.schema import ScanLocation, TrackResult
from whereis.adapters.fedex.translator import (
    FedexTranslator,
    format_location,
    map_exception_code,
)
from whereis.domain.model import Catalog, Entity, TrackingID, UpdateMethod

if TYPE_CHECKING:
    from collections.abc import Callable

TRACKING_ID = TrackingID(operator="fdx", tracking_num="779879860040")


def _translate(
    catalog: Catalog,
    clock: Callable[[], datetime],
    scan_events: list[dict[str, Any]],
) -> Entity:
    translator = FedexTranslator(catalog=catalog, clock=clock)
    result = TrackResult.model_validate({"scanEvents": scan_events})
    return translator.translate(TRACKING_ID, result, UpdateMethod.MANUAL_PULL)


def test_translate_orders_events_and_infers_received(
    catalog: Catalog,
    clock: Callable[[], datetime],
    scan_events: list[dict[str, Any]],
) -> None:
    entity = _translate(catalog, clock, scan_events)

    assert [event.status for event in entity.events] == [3000, 3100, 3250, 3300, 3500]
    supplement = entity.events[1]
    assert supplement.when == entity.events[2].when - timedelta(seconds=1)
    assert supplement.data_provider == "Whereis"
    assert entity.completed


def test_translate_maps_fields(
    catalog: Catalog,
    clock: Callable[[], datetime],
    scan_events: list[dict[str, Any]],
) -> None:
    entity = _translate(catalog, clock, scan_events)
    created, *_, delivered = entity.events

    assert created.where == "Customer location"
    assert created.notes == "Shipment information sent to FedEx"
    assert delivered.where == "MEMPHIS TN United States"
    assert delivered.what == "Delivered"
    assert delivered.notes == ""
    assert delivered.whom == "FedEx"
    assert delivered.update_method is UpdateMethod.MANUAL_PULL
    assert delivered.source_data["eventType"] == "DL"
    assert delivered.when.utcoffset() == timedelta(hours=-5)


def test_translate_keeps_exception_details(
    catalog: Catalog,
    clock: Callable[[], datetime],
) -> None:
    entity = _translate(
        catalog,
        clock,
        [
            scan(
                "2024-05-02T08:00:00-05:00",
                "DE",
                "DE",
                "Delivery exception",
                exceptionCode="08",
                exceptionDescription="Recipient not in",
            )
        ],
    )

    event = entity.events[-1]
    assert event.status == 3450
    assert event.exception_code == 907
    assert event.exception_desc == "Recipient, Not Available"
    assert event.notes == "Delivery exception: Recipient not in"


def test_future_scan_is_information_received(catalog: Catalog) -> None:
    now = datetime(2024, 5, 1, 0, 0, tzinfo=UTC)
    entity = _translate(
        catalog,
        lambda: now,
        [scan("2024-05-03T10:00:00-05:00", "DL", "DL", "Delivered")],
    )

    assert [event.status for event in entity.events] == [3005]


def test_status_rules(catalog: Catalog, clock: Callable[[], datetime]) -> None:
    entity = _translate(
        catalog,
        clock,
        [
            scan(
                "2024-05-01T10:00:00Z",
                "DP",
                "IT",
                "Left FedEx origin facility",
                location_type="ORIGIN_FEDEX_FACILITY",
            ),
            scan("2024-05-01T11:00:00Z", "CC", "IT", "International shipment release - Import"),
            scan("2024-05-01T12:00:00Z", "CD", "CD", "Clearance delay - Import"),
            scan("2024-05-01T13:00:00Z", "IT", "IT", "On FedEx vehicle", exceptionCode="67"),
            scan("2024-05-01T14:00:00Z", "XX", "IT", "Unmapped"),
        ],
    )

    statuses = {event.when.hour: event.status for event in entity.events}
    assert statuses == {10: 3100, 11: 3400, 12: 3350, 13: 3450, 14: 3001}


def test_exception_code_mapping() -> None:
    assert map_exception_code("") is None
    assert map_exception_code("71") is None
    assert map_exception_code("29") == 909
    assert map_exception_code("99") == 900


def test_format_location() -> None:
    location = ScanLocation.model_validate({"city": "PARIS", "countryName": "France"})

    assert format_location(location) == "PARIS France"
    assert format_location(location, "CUSTOMER") == "PARIS France"
    assert format_location(ScanLocation(), "CUSTOMER") == "Customer location"
    assert format_location(ScanLocation()) == ""
