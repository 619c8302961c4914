"""Synchronous read and push flows behind the public tracking endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from whereis.domain.errors import NotFoundError, TrackingError, TrackingValidationError
from whereis.domain.model import TrackingID, UpdateMethod
from whereis.domain.reconciliation import ReconcileAction

if TYPE_CHECKING:
    from collections.abc import Mapping

    from whereis.domain.gateway import IngestionGateway
    from whereis.domain.model import Catalog, Entity
    from whereis.domain.ports import TrackingStore
    from whereis.domain.reconciliation import ReconciliationEngine
    from whereis.domain.registry import ConnectorRegistry

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrackingRequest:
    tracking_id: TrackingID
    params: dict[str, str]
    refresh: bool = False
    full_data: bool = False


@dataclass(slots=True)
class PushResult:
    entities: int = 0
    updated: int = 0
    failed: int = 0

    @property
    def success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "entitiesProcessed": self.entities,
            "updated": self.updated,
            "failed": self.failed,
        }


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


class TrackingService:
    def __init__(
        self,
        *,
        store: TrackingStore,
        gateway: IngestionGateway,
        registry: ConnectorRegistry,
        engine: ReconciliationEngine,
        catalog: Catalog,
    ) -> None:
        self.store = store
        self.gateway = gateway
        self.registry = registry
        self.engine = engine
        self.catalog = catalog

    def parse_request(
        self,
        endpoint: str,
        raw_id: str,
        query: Mapping[str, str] | None = None,
    ) -> TrackingRequest:
        """Validate a tracking id and its query string for ``endpoint``."""

        query = dict(query or {})
        tracking_id = TrackingID.parse(raw_id, self.registry)

        allowed = self.catalog.param_names(endpoint, tracking_id.operator)
        unknown = sorted(name for name in query if name not in allowed)
        if unknown:
            raise TrackingValidationError("400-07", detail=",".join(unknown))

        connector = self.registry.get(tracking_id.operator)
        params = connector.get_extra_params(query)
        connector.validate_params(tracking_id, params)
        return TrackingRequest(
            tracking_id=tracking_id,
            params=params,
            refresh=_is_truthy(query.get("refresh")),
            full_data=_is_truthy(query.get("fulldata")),
        )

    async def where_is(
        self,
        tracking_id: TrackingID,
        params: Mapping[str, str],
        *,
        refresh: bool = False,
    ) -> Entity:
        if refresh:
            entity = await self._pull_one(tracking_id, params)
            self.engine.refresh(tracking_id, entity)
            return entity

        stored = self.store.query_entity(tracking_id)
        if stored is not None:
            self.registry.get(tracking_id.operator).validate_stored_entity(stored, params)
            return stored

        entity = await self._pull_one(tracking_id, params)
        if not self.store.insert_entity(entity):
            log.warning("%s was fetched but could not be stored", entity.id)
        return entity

    async def status(self, tracking_id: TrackingID, params: Mapping[str, str]) -> dict[str, Any]:
        entity = await self.where_is(tracking_id, params)
        last = entity.last_status()
        if last is None:
            raise NotFoundError(detail=str(tracking_id))
        return last

    def push(self, operator: str, payload: object) -> PushResult:
        entities = self.gateway.push(operator.lower(), payload)
        result = PushResult()
        for entity in entities:
            result.entities += 1
            try:
                outcome = self.engine.reconcile(
                    entity, UpdateMethod.PUSH, insert_if_absent=True
                )
            except TrackingError as exc:
                log.warning("Push for %s failed: %s %s", entity.id, exc.code, exc)
                result.failed += 1
                continue
            except Exception:  # noqa: BLE001
                log.exception("Push for %s failed", entity.id)
                result.failed += 1
                continue
            if outcome.action is ReconcileAction.SKIPPED:
                result.failed += 1
            elif outcome.written:
                result.updated += 1
        log.info(
            "Push to %s: processed=%s, updated=%s, failed=%s",
            operator,
            result.entities,
            result.updated,
            result.failed,
        )
        return result

    def create_api_key(self, key: str, user_id: str) -> int:
        return self.store.insert_token(key, user_id)

    def is_api_key_valid(self, key: str) -> bool:
        return self.store.is_token_valid(key)

    async def _pull_one(self, tracking_id: TrackingID, params: Mapping[str, str]) -> Entity:
        entities = await self.gateway.pull(
            tracking_id.operator, [tracking_id], params, UpdateMethod.MANUAL_PULL
        )
        for entity in entities:
            if entity.tracking_id == tracking_id:
                return entity
        raise NotFoundError(detail=str(tracking_id))
