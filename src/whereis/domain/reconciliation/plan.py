"""Reconciliation result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True, slots=True)
class EventDelta:
    """Difference between freshly fetched and persisted event ids."""

    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class ReconcileAction(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"
    REFRESHED = "refreshed"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconcileOutcome:
    entity_id: str
    action: ReconcileAction
    delta: EventDelta = field(default_factory=EventDelta)
    written: int = 0
