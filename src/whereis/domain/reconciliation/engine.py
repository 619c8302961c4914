"""Diff-based reconciliation of fetched entities against storage."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .plan import EventDelta, ReconcileAction, ReconcileOutcome

if TYPE_CHECKING:
    from collections.abc import Iterable

    from whereis.domain.model import Entity, TrackingID, UpdateMethod
    from whereis.domain.ports import TrackingStore

log = getLogger(__name__)


def compute_delta(fresh_ids: Iterable[str], persisted_ids: Iterable[str]) -> EventDelta:
    """Return ``fresh - persisted`` and ``persisted - fresh``, preserving input order."""

    fresh = list(dict.fromkeys(fresh_ids))
    persisted = list(dict.fromkeys(persisted_ids))
    fresh_set = set(fresh)
    persisted_set = set(persisted)
    return EventDelta(
        added=tuple(event_id for event_id in fresh if event_id not in persisted_set),
        removed=tuple(event_id for event_id in persisted if event_id not in fresh_set),
    )


class ReconciliationEngine:
    """Writes only what changed: new events are inserted, stale ones deleted."""

    def __init__(self, store: TrackingStore) -> None:
        self.store = store

    def reconcile(
        self,
        entity: Entity,
        update_method: UpdateMethod,
        *,
        insert_if_absent: bool = False,
    ) -> ReconcileOutcome:
        persisted = self.store.query_event_ids(entity.tracking_id)
        if not persisted and insert_if_absent:
            inserted = self.store.insert_entity(entity)
            action = ReconcileAction.INSERTED if inserted else ReconcileAction.SKIPPED
            return ReconcileOutcome(
                entity_id=entity.id,
                action=action,
                delta=EventDelta(added=tuple(entity.event_ids())),
                written=inserted,
            )

        delta = compute_delta(entity.event_ids(), persisted)
        if not delta.changed:
            log.debug("%s unchanged, nothing to write", entity.id)
            return ReconcileOutcome(entity_id=entity.id, action=ReconcileAction.UNCHANGED)

        written = self.store.update_entity(entity, update_method, delta.added, delta.removed)
        log.info(
            "%s updated via %s: %s added, %s removed",
            entity.id,
            update_method,
            len(delta.added),
            len(delta.removed),
        )
        return ReconcileOutcome(
            entity_id=entity.id,
            action=ReconcileAction.UPDATED if written else ReconcileAction.SKIPPED,
            delta=delta,
            written=written,
        )

    def refresh(self, tracking_id: TrackingID, entity: Entity) -> ReconcileOutcome:
        """Replace the stored copy wholesale."""

        written = self.store.refresh_entity(tracking_id, entity)
        return ReconcileOutcome(
            entity_id=entity.id,
            action=ReconcileAction.REFRESHED if written else ReconcileAction.SKIPPED,
            delta=EventDelta(added=tuple(entity.event_ids())),
            written=written,
        )
