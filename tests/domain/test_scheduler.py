from __future__ import annotations

import asyncio

import pytest

from tests.helpers.tracking import FakeConnector, FakeTrackingStore, make_entity
from whereis.domain.errors import CarrierConfigurationError, UpstreamError
from whereis.domain.gateway import IngestionGateway
from whereis.domain.model import Catalog, UpdateMethod
from whereis.domain.reconciliation import ReconciliationEngine
from whereis.domain.registry import ConnectorRegistry
from whereis.domain.scheduler import BatchDispatcher, group_by_operator, split_batches


def _dispatcher(
    catalog: Catalog,
    store: FakeTrackingStore,
    *connectors: FakeConnector,
) -> BatchDispatcher:
    registry = ConnectorRegistry(catalog, connectors)
    return BatchDispatcher(
        store,
        IngestionGateway(registry),
        registry,
        ReconciliationEngine(store),
    )


def test_group_by_operator() -> None:
    groups = group_by_operator({"fdx-1": {}, "sfex-SF1": {}, "FDX-2": {}})

    assert groups == {"fdx": ["fdx-1", "FDX-2"], "sfex": ["sfex-SF1"]}


def test_split_batches() -> None:
    assert split_batches(list(range(5)), 2) == [[0, 1], [2, 3], [4]]
    with pytest.raises(ValueError, match="positive"):
        split_batches([1], 0)


def test_run_once_updates_changed_entities(catalog: Catalog) -> None:
    stored = make_entity(statuses=(3100,))
    store = FakeTrackingStore([stored])
    fresh = make_entity(statuses=(3100, 3250))
    dispatcher = _dispatcher(catalog, store, FakeConnector("fdx", [fresh]))

    summary = asyncio.run(dispatcher.run_once())

    assert summary.batches == 1
    assert summary.entities == 1
    assert summary.updated == 1
    assert summary.failed == 0
    assert store.updates[0][1] is UpdateMethod.AUTO_PULL
    assert store.entities[stored.id].event_ids() == fresh.event_ids()


def test_run_once_splits_by_batch_size(catalog: Catalog) -> None:
    stored = [make_entity(f"fdx-{index:012d}", statuses=(3100,)) for index in range(12)]
    connector = FakeConnector("fdx", stored)
    dispatcher = _dispatcher(catalog, FakeTrackingStore(stored), connector)

    summary = asyncio.run(dispatcher.run_once())

    assert summary.batches == 2
    assert [len(ids) for ids, _ in connector.pulls] == [10, 2]
    assert summary.updated == 0


def test_single_entity_batches_carry_stored_params(catalog: Catalog) -> None:
    stored = make_entity("sfex-SF3122082959115", statuses=(3100,), params={"phonenum": "5115"})
    connector = FakeConnector("sfex", [stored])
    dispatcher = _dispatcher(catalog, FakeTrackingStore([stored]), connector)

    asyncio.run(dispatcher.run_once())

    assert connector.pulls == [(["sfex-SF3122082959115"], {"phonenum": "5115"})]


def test_failing_batch_does_not_stop_other_operators(catalog: Catalog) -> None:
    fedex = make_entity(statuses=(3100,))
    sfex = make_entity("sfex-SF3122082959115", statuses=(3100,))
    sfex_fresh = make_entity("sfex-SF3122082959115", statuses=(3100, 3250))
    store = FakeTrackingStore([fedex, sfex])
    dispatcher = _dispatcher(
        catalog,
        store,
        FakeConnector("fdx", error=UpstreamError(detail="fdx - HTTP 503")),
        FakeConnector("sfex", [sfex_fresh]),
    )

    summary = asyncio.run(dispatcher.run_once())

    assert summary.failed == 1
    assert summary.updated == 1
    assert store.entities[sfex.id].event_ids() == sfex_fresh.event_ids()


def test_inactive_operators_and_completed_entities_are_skipped(catalog: Catalog) -> None:
    done = make_entity(statuses=(3100, 3500))
    inactive = make_entity("sfex-SF3122082959115", statuses=(3100,))
    connector = FakeConnector("fdx", [done])
    dispatcher = _dispatcher(catalog, FakeTrackingStore([done, inactive]), connector)

    summary = asyncio.run(dispatcher.run_once())

    assert summary.batches == 0
    assert connector.pulls == []


def test_unparseable_ids_are_skipped(catalog: Catalog) -> None:
    broken = make_entity("fdx-12-34", statuses=(3100,))
    good = make_entity(statuses=(3100,))
    connector = FakeConnector("fdx", [good])
    dispatcher = _dispatcher(catalog, FakeTrackingStore([broken, good]), connector)

    summary = asyncio.run(dispatcher.run_once())

    assert connector.pulls == [([good.id], {})]
    assert summary.entities == 1


def test_handle_error_logs_server_errors(
    catalog: Catalog,
    caplog: pytest.LogCaptureFixture,
) -> None:
    dispatcher = _dispatcher(catalog, FakeTrackingStore())

    dispatcher.handle_error(CarrierConfigurationError(detail="fdx - CLIENT_ID"), "fdx-1")

    assert "500-01" in caplog.text


def test_run_forever_stops_on_event(catalog: Catalog) -> None:
    store = FakeTrackingStore([make_entity(statuses=(3100,))])
    connector = FakeConnector("fdx", [make_entity(statuses=(3100,))])
    dispatcher = _dispatcher(catalog, store, connector)

    async def scenario() -> None:
        stop = asyncio.Event()
        task = asyncio.create_task(dispatcher.run_forever(0.01, stop))
        await asyncio.sleep(0.05)
        stop.set()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(scenario())

    assert len(connector.pulls) >= 2
