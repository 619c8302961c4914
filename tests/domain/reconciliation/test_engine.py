from __future__ import annotations

from tests.helpers.tracking import FakeTrackingStore, make_entity, make_event
from whereis.domain.model import UpdateMethod
from whereis.domain.reconciliation import ReconcileAction, ReconciliationEngine, compute_delta


def test_compute_delta_preserves_order() -> None:
    delta = compute_delta(["a", "b", "c"], ["b", "c", "d"])

    assert delta.added == ("a",)
    assert delta.removed == ("d",)
    assert delta.changed


def test_compute_delta_identical_sets_are_unchanged() -> None:
    delta = compute_delta(["a", "b"], ["b", "a"])

    assert delta.added == ()
    assert delta.removed == ()
    assert not delta.changed


def test_reconcile_writes_only_the_difference() -> None:
    persisted = make_entity(statuses=(3100, 3250, 3300))
    store = FakeTrackingStore([persisted])
    fresh = make_entity(statuses=(3100, 3250))
    fresh.add_event(make_event(fresh.tracking_id, 3500, hours=4))
    stale_id = persisted.events[-1].event_id

    outcome = ReconciliationEngine(store).reconcile(fresh, UpdateMethod.AUTO_PULL)

    assert outcome.action is ReconcileAction.UPDATED
    assert outcome.delta.added == (fresh.events[-1].event_id,)
    assert outcome.delta.removed == (stale_id,)
    assert store.updates == [
        (
            fresh.id,
            UpdateMethod.AUTO_PULL,
            (fresh.events[-1].event_id,),
            (stale_id,),
        )
    ]
    assert store.entities[fresh.id].event_ids() == fresh.event_ids()


def test_reconcile_without_changes_does_not_write() -> None:
    store = FakeTrackingStore([make_entity(statuses=(3100, 3250))])
    fresh = make_entity(statuses=(3100, 3250))

    outcome = ReconciliationEngine(store).reconcile(fresh, UpdateMethod.AUTO_PULL)

    assert outcome.action is ReconcileAction.UNCHANGED
    assert outcome.written == 0
    assert store.updates == []


def test_reconcile_inserts_unknown_entities_when_asked() -> None:
    store = FakeTrackingStore()
    fresh = make_entity("eg1-ABC123", statuses=(3100,))

    outcome = ReconciliationEngine(store).reconcile(
        fresh, UpdateMethod.PUSH, insert_if_absent=True
    )

    assert outcome.action is ReconcileAction.INSERTED
    assert outcome.written == 1
    assert store.inserted == [fresh.id]


def test_refresh_replaces_stored_entity() -> None:
    store = FakeTrackingStore([make_entity(statuses=(3100, 3250))])
    fresh = make_entity(statuses=(3100,))

    outcome = ReconciliationEngine(store).refresh(fresh.tracking_id, fresh)

    assert outcome.action is ReconcileAction.REFRESHED
    assert store.refreshed == [fresh.id]
    assert store.entities[fresh.id].event_ids() == fresh.event_ids()
