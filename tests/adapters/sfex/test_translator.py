from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from tests.helpers.carriers import sfex_route
from whereis.adapters.sfex.schema import Route
from whereis.adapters.sfex.translator import SfexTranslator, route_location
from whereis.config import parse_utc_offset
from whereis.domain.model import Catalog, Entity, TrackingID, UpdateMethod

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

TRACKING_ID = TrackingID(operator="sfex", tracking_num="SF3122082959115")
CHINA = parse_utc_offset("+08:00")


def _translate(
    catalog: Catalog,
    clock: Callable[[], datetime],
    routes: list[dict[str, Any]],
) -> Entity:
    translator = SfexTranslator(catalog=catalog, source_timezone=CHINA, clock=clock)
    return translator.translate(
        TRACKING_ID, routes, {"phonenum": "5115"}, UpdateMethod.AUTO_PULL
    )


def test_translate_maps_statuses_and_fills_gaps(
    catalog: Catalog,
    clock: Callable[[], datetime],
    routes: list[dict[str, Any]],
) -> None:
    entity = _translate(catalog, clock, routes)

    assert [event.status for event in entity.events] == [3100, 3250, 3300, 3350, 3400, 3500]
    assert entity.params == {"phonenum": "5115"}
    assert entity.completed
    arrival = entity.events[2]
    assert arrival.when == entity.events[3].when - timedelta(seconds=1)
    assert arrival.where == "Los Angeles"
    assert arrival.whom == entity.events[3].whom


def test_accept_time_is_local_to_carrier(
    catalog: Catalog,
    clock: Callable[[], datetime],
    routes: list[dict[str, Any]],
) -> None:
    received = _translate(catalog, clock, routes).events[0]

    assert received.when.utcoffset() == timedelta(hours=8)
    assert received.when.isoformat() == "2024-05-01T10:00:00+08:00"
    assert received.whom == "SF Express"
    assert received.source_data["opCode"] == "50"


def test_transit_location_comes_from_remark(
    catalog: Catalog,
    clock: Callable[[], datetime],
    routes: list[dict[str, Any]],
) -> None:
    transit = _translate(catalog, clock, routes).events[1]

    assert transit.where == "深圳华侨城集散中心"


def test_in_transit_rules(catalog: Catalog, clock: Callable[[], datetime]) -> None:
    entity = _translate(
        catalog,
        clock,
        [
            sfex_route("2024-05-01 10:00:00", "201", "30", "快件在深圳完成分拣"),
            sfex_route("2024-05-01 11:00:00", "201", "30", "快件离开深圳"),
            sfex_route("2024-05-01 12:00:00", "201", "31", "快件到达"),
            sfex_route("2024-05-01 13:00:00", "201", "999", "其他"),
        ],
    )

    assert [event.status for event in entity.events] == [3003, 3004, 3002, 3001]


def test_arrival_before_transit_is_not_supplemented_again(
    catalog: Catalog,
    clock: Callable[[], datetime],
) -> None:
    entity = _translate(
        catalog,
        clock,
        [
            sfex_route("2024-05-01 10:00:00", "1301", "70", "快件到达目的地"),
            sfex_route("2024-05-01 20:00:00", "201", "105", "快件途经 深圳华侨城集散中心"),
            sfex_route("2024-05-02 09:00:00", "401", "80", "已签收"),
        ],
    )

    assert [event.status for event in entity.events] == [3300, 3250, 3500]


def test_no_supplement_without_base_location(
    catalog: Catalog,
    clock: Callable[[], datetime],
) -> None:
    entity = _translate(
        catalog,
        clock,
        [
            sfex_route("2024-05-01 20:00:00", "201", "105", "快件途经 深圳华侨城集散中心"),
            sfex_route("2024-05-02 09:00:00", "401", "80", "已签收", accept_address=""),
        ],
    )

    assert [event.status for event in entity.events] == [3250, 3500]

def test_route_location_falls_back_to_address() -> None:
    route = Route.model_validate(sfex_route("2024-05-01 10:00:00", "101", "50", "已收取快件"))

    assert route_location(route) == "深圳市"
