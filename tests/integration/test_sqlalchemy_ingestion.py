"""End-to-end ingestion through real connectors into SQLite."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from tests.helpers.carriers import fedex_scan, sfex_route, sfex_service_response
from tests.helpers.http import make_client_factory
from whereis.adapters.eg1 import Eg1Connector
from whereis.adapters.fedex import FedexClient, FedexConnector
from whereis.adapters.sfex import SfexClient, SfexConnector
from whereis.config import FedexConfig, SfexConfig
from whereis.domain.errors import TrackingValidationError
from whereis.domain.gateway import IngestionGateway
from whereis.domain.model import Catalog, TrackingID, UpdateMethod
from whereis.domain.reconciliation import ReconcileAction, ReconciliationEngine
from whereis.domain.registry import ConnectorRegistry
from whereis.domain.scheduler import BatchDispatcher
from whereis.domain.tracking import TrackingService

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from whereis.adapters.sqlalchemy import SqlAlchemyTrackingStore

FEDEX_TRACK = {
    "output": {
        "completeTrackResults": [
            {
                "trackingNumber": "779879860040",
                "trackResults": [
                    {
                        "scanEvents": [
                            fedex_scan("2024-05-02T08:00:00-05:00", "DR", "IT", "In transit"),
                            fedex_scan(
                                "2024-05-01T07:00:00-05:00",
                                "PU",
                                "PU",
                                "Picked up",
                                location_type="PICKUP_LOCATION",
                            ),
                        ]
                    }
                ],
            }
        ]
    }
}


def _fedex_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/oauth/token"):
        return httpx.Response(200, json={"access_token": "token", "expires_in": 3600})
    return httpx.Response(200, json=FEDEX_TRACK)


@pytest.fixture
def sfex_payload() -> dict[str, Any]:
    return sfex_service_response(
        [
            sfex_route("2024-05-01 10:00:00", "101", "50", "顺丰速运 已收取快件"),
            sfex_route("2024-05-01 20:00:00", "201", "105", "快件途经 深圳华侨城集散中心"),
        ]
    )


@pytest.fixture
def registry(
    catalog: Catalog,
    clock: Callable[[], datetime],
    sfex_payload: dict[str, Any],
) -> ConnectorRegistry:
    fedex = FedexConnector(
        FedexClient(
            FedexConfig(client_id="id", client_secret="secret"),
            client_factory=make_client_factory(_fedex_handler),
            clock=clock,
        ),
        catalog,
        clock=clock,
    )
    sfex = SfexConnector(
        SfexClient(
            SfexConfig(partner_id="partner", check_word="check"),
            client_factory=make_client_factory(
                lambda _request: httpx.Response(200, json=sfex_payload)
            ),
        ),
        catalog,
        clock=clock,
    )
    return ConnectorRegistry(catalog, [fedex, sfex, Eg1Connector(catalog, clock=clock)])


def test_reingesting_the_same_payload_is_idempotent(
    registry: ConnectorRegistry,
    sqlite_store: SqlAlchemyTrackingStore,
) -> None:
    gateway = IngestionGateway(registry)
    engine = ReconciliationEngine(sqlite_store)
    tracking_id = TrackingID.parse("fdx-779879860040", registry)

    first = asyncio.run(gateway.pull("fdx", [tracking_id], {}, UpdateMethod.MANUAL_PULL))[0]
    second = asyncio.run(gateway.pull("fdx", [tracking_id], {}, UpdateMethod.AUTO_PULL))[0]

    assert engine.reconcile(first, UpdateMethod.MANUAL_PULL, insert_if_absent=True).action is (
        ReconcileAction.INSERTED
    )
    assert engine.reconcile(second, UpdateMethod.AUTO_PULL).action is ReconcileAction.UNCHANGED
    event_ids = sqlite_store.query_event_ids(tracking_id)
    assert len(event_ids) == len(set(event_ids)) == 3


def test_tracking_id_examples(registry: ConnectorRegistry) -> None:
    assert TrackingID.parse("sfex-SF3122082959115", registry) == TrackingID(
        operator="sfex", tracking_num="SF3122082959115"
    )
    for raw, code in (("sfex-SF123", "400-02"), ("", "400-01"), ("bogus-123", "400-04")):
        with pytest.raises(TrackingValidationError) as excinfo:
            TrackingID.parse(raw, registry)
        assert excinfo.value.code == code


def test_where_is_then_scheduled_sync(
    catalog: Catalog,
    registry: ConnectorRegistry,
    sqlite_store: SqlAlchemyTrackingStore,
) -> None:
    gateway = IngestionGateway(registry)
    engine = ReconciliationEngine(sqlite_store)
    service = TrackingService(
        store=sqlite_store,
        gateway=gateway,
        registry=registry,
        engine=engine,
        catalog=catalog,
    )
    request = service.parse_request("whereis", "sfex-SF3122082959115", {"phonenum": "5115"})

    entity = asyncio.run(service.where_is(request.tracking_id, request.params))
    summary = asyncio.run(BatchDispatcher(sqlite_store, gateway, registry, engine).run_once())

    assert [event.status for event in entity.events] == [3100, 3250]
    assert sqlite_store.get_in_processing_tracking_nums() == {
        "sfex-SF3122082959115": {"phonenum": "5115"}
    }
    assert summary.batches == 1
    assert summary.entities == 1
    assert summary.updated == 0
