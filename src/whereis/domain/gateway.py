"""Single entry point for invoking carrier connectors."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from whereis.domain.model import Entity, TrackingID, UpdateMethod
    from whereis.domain.registry import ConnectorRegistry

log = getLogger(__name__)


class IngestionGateway:
    """Resolves a connector, runs pull or push, then checks the results.

    The critical-status check is monitoring only: gaps are logged and the
    entities are returned untouched.
    """

    def __init__(self, registry: ConnectorRegistry) -> None:
        self.registry = registry

    async def pull(
        self,
        operator: str,
        tracking_ids: Sequence[TrackingID],
        extra_params: Mapping[str, str],
        update_method: UpdateMethod,
    ) -> list[Entity]:
        connector = self.registry.get(operator)
        entities = await connector.pull_from_source(tracking_ids, extra_params, update_method)
        self.check_critical_statuses(entities)
        return entities

    def push(self, operator: str, payload: object) -> list[Entity]:
        connector = self.registry.get(operator)
        entities = connector.process_push_data(payload)
        self.check_critical_statuses(entities)
        return entities

    def check_critical_statuses(self, entities: Iterable[Entity]) -> dict[str, list[int]]:
        gaps: dict[str, list[int]] = {}
        for entity in entities:
            if not entity.is_completed():
                continue
            missing = entity.missing_critical_statuses()
            for status in missing:
                log.warning("Entity %s missing critical status: %s", entity.id, status)
            if missing:
                gaps[entity.id] = missing
        return gaps
