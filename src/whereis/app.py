"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from whereis.adapters.eg1 import Eg1Connector
from whereis.adapters.fedex import FedexClient, FedexConnector
from whereis.adapters.sfex import SfexClient, SfexConnector
from whereis.adapters.sqlalchemy import SqlAlchemyTrackingStore
from whereis.adapters.sqlalchemy.unit_of_work import is_started, startup
from whereis.config import (
    MissingConfigurationError,
    get_fedex_config,
    get_schedule_config,
    get_sfex_config,
)
from whereis.domain.gateway import IngestionGateway
from whereis.domain.model import default_catalog
from whereis.domain.model.event import utcnow
from whereis.domain.reconciliation import ReconciliationEngine
from whereis.domain.registry import ConnectorRegistry
from whereis.domain.scheduler import BatchDispatcher, DispatchSummary
from whereis.domain.tracking import PushResult, TrackingService

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import datetime

    from whereis.config import FedexConfig, SfexConfig
    from whereis.domain.model import Catalog
    from whereis.domain.ports import CarrierConnector, TrackingStore

log = getLogger(__name__)


@dataclass(slots=True)
class Runtime:
    """Everything wired once at startup and shared by the entry points."""

    catalog: Catalog
    registry: ConnectorRegistry
    store: TrackingStore
    gateway: IngestionGateway
    engine: ReconciliationEngine
    service: TrackingService
    dispatcher: BatchDispatcher


def _load_optional[T](loader: Callable[[], T], operator: str) -> T | None:
    try:
        return loader()
    except MissingConfigurationError as exc:
        log.info("Operator %s disabled: %s", operator, exc)
        return None


def build_connector_registry(
    catalog: Catalog,
    *,
    fedex_config: FedexConfig | None = None,
    sfex_config: SfexConfig | None = None,
    load_from_env: bool = True,
    clock: Callable[[], datetime] = utcnow,
) -> ConnectorRegistry:
    """Register every carrier whose credentials are available."""

    connectors: list[CarrierConnector] = [Eg1Connector(catalog, clock=clock)]

    if fedex_config is None and load_from_env:
        fedex_config = _load_optional(get_fedex_config, "fdx")
    if fedex_config is not None:
        connectors.append(FedexConnector(FedexClient(fedex_config), catalog, clock=clock))

    if sfex_config is None and load_from_env:
        sfex_config = _load_optional(get_sfex_config, "sfex")
    if sfex_config is not None:
        connectors.append(SfexConnector(SfexClient(sfex_config), catalog, clock=clock))

    registry = ConnectorRegistry(catalog, connectors)
    log.info("Active operators: %s", ", ".join(registry.active_operators))
    return registry


def build_runtime(
    *,
    store: TrackingStore | None = None,
    catalog: Catalog | None = None,
    registry: ConnectorRegistry | None = None,
    database_uri: str | None = None,
) -> Runtime:
    effective_catalog = catalog or default_catalog()
    effective_registry = registry or build_connector_registry(effective_catalog)
    if store is None:
        if not is_started():
            startup(database_uri=database_uri)
        store = SqlAlchemyTrackingStore()

    gateway = IngestionGateway(effective_registry)
    engine = ReconciliationEngine(store)
    service = TrackingService(
        store=store,
        gateway=gateway,
        registry=effective_registry,
        engine=engine,
        catalog=effective_catalog,
    )
    dispatcher = BatchDispatcher(store, gateway, effective_registry, engine)
    return Runtime(
        catalog=effective_catalog,
        registry=effective_registry,
        store=store,
        gateway=gateway,
        engine=engine,
        service=service,
        dispatcher=dispatcher,
    )


def sync_tracking_once(runtime: Runtime) -> DispatchSummary:
    """Pull every shipment in progress once."""

    log.info("Starting tracking sync")
    return asyncio.run(runtime.dispatcher.run_once())


def run_scheduler(runtime: Runtime, *, interval_minutes: float | None = None) -> None:
    """Pull shipments in progress forever, every ``interval_minutes``."""

    interval = interval_minutes or get_schedule_config().pull_interval_minutes
    log.info("Starting scheduler, pulling every %s minutes", interval)
    asyncio.run(runtime.dispatcher.run_forever(interval * 60))


def where_is(
    runtime: Runtime,
    raw_id: str,
    query: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    request = runtime.service.parse_request("whereis", raw_id, query)
    entity = asyncio.run(
        runtime.service.where_is(request.tracking_id, request.params, refresh=request.refresh)
    )
    return entity.to_dict(full_data=request.full_data)


def get_status(
    runtime: Runtime,
    raw_id: str,
    query: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    request = runtime.service.parse_request("status", raw_id, query)
    return asyncio.run(runtime.service.status(request.tracking_id, request.params))


def push_tracking_data(runtime: Runtime, operator: str, payload: object) -> PushResult:
    log.info("Receiving push data for %s", operator)
    return runtime.service.push(operator, payload)


def create_api_key(runtime: Runtime, key: str, user_id: str) -> int:
    return runtime.service.create_api_key(key, user_id)
