"""Two-level carrier status tables.

A carrier's table is keyed first by its "major phase" code and then by its
event-type code. Each leaf is a tagged variant: :class:`FixedStatus` for a plain
canonical code or :class:`RuleStatus` for a function of the raw scan. A phase may
also map directly to a single entry, in which case the event-type level is
skipped for that phase.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from whereis.domain.model.status import DEFAULT_STATUS, FUTURE_EVENT_STATUS

if TYPE_CHECKING:
    from datetime import datetime

    from whereis.domain.model import Entity

log = getLogger(__name__)

type RawEvent = Mapping[str, Any]
type StatusRule = Callable[[Entity, RawEvent], int | None]


@dataclass(frozen=True, slots=True)
class FixedStatus:
    status: int

    def resolve(self, entity: Entity, raw: RawEvent) -> int | None:  # noqa: ARG002
        return self.status


@dataclass(frozen=True, slots=True)
class RuleStatus:
    rule: StatusRule

    def resolve(self, entity: Entity, raw: RawEvent) -> int | None:
        return self.rule(entity, raw)


type StatusEntry = FixedStatus | RuleStatus
type PhaseEntry = StatusEntry | Mapping[str, StatusEntry]


@dataclass(frozen=True, slots=True)
class StatusMap:
    phase_field: str
    event_field: str
    phases: Mapping[str, PhaseEntry]
    default: int = DEFAULT_STATUS

    def lookup(self, phase: str, event_type: str) -> StatusEntry | None:
        entry = self.phases.get(phase)
        if entry is None or isinstance(entry, FixedStatus | RuleStatus):
            return entry
        return entry.get(event_type)

    def resolve(self, entity: Entity, raw: RawEvent) -> int:
        """Canonical status for ``raw``; unmapped combinations fall back to ``default``."""

        phase = _as_key(raw.get(self.phase_field))
        event_type = _as_key(raw.get(self.event_field))
        entry = self.lookup(phase, event_type)
        status = entry.resolve(entity, raw) if entry is not None else None
        if status is None:
            log.debug(
                "Unmapped status %s/%s for %s, using %s",
                phase,
                event_type,
                entity.id,
                self.default,
            )
            return int(self.default)
        return int(status)


def resolve_status(
    status_map: StatusMap,
    entity: Entity,
    raw: RawEvent,
    *,
    when: datetime,
    now: datetime,
) -> int:
    """Resolve a scan's status, forcing future-dated scans to "information received"."""

    if when > now:
        log.info(
            "Event for %s at %s is in the future, status set to %s",
            entity.id,
            when.isoformat(),
            int(FUTURE_EVENT_STATUS),
        )
        return int(FUTURE_EVENT_STATUS)
    return status_map.resolve(entity, raw)


def _as_key(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()
