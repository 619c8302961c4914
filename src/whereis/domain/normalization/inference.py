"""Missing-milestone inference.

Runs after a connector has converted and sorted every raw scan. Each rule decides
whether its milestone is missing given the later-stage events present and which
event implied it; supplements are added until no rule fires any more.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .events import build_supplement_event

if TYPE_CHECKING:
    from datetime import datetime

    from whereis.domain.model import Catalog, Entity, Event

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MissingEventRule:
    status: int
    is_missing: Callable[[Sequence[Event]], bool]
    base_event: Callable[[Sequence[Event]], Event | None]
    # skip base events without a location
    requires_where: bool = False


def missing_before_later_status(status: int) -> MissingEventRule:
    """``status`` is missing when any higher status shows up before it."""

    def is_missing(events: Sequence[Event]) -> bool:
        for event in events:
            if event.status == status:
                return False
            if event.status > status:
                return True
        return False

    def base_event(events: Sequence[Event]) -> Event | None:
        return next((event for event in events if event.status > status), None)

    return MissingEventRule(status=status, is_missing=is_missing, base_event=base_event)


def missing_after_trigger(
    status: int,
    *,
    trigger: int,
    implied_by: Collection[int],
    requires_where: bool = False,
) -> MissingEventRule:
    """``status`` is missing when, after ``trigger``, an ``implied_by`` status precedes it.

    Any earlier ``status`` event counts, even one placed before ``trigger``.
    """

    def base_event(events: Sequence[Event]) -> Event | None:
        triggered = False
        for event in events:
            if event.status == status:
                return None
            if event.status == trigger:
                triggered = True
            elif triggered and event.status in implied_by:
                return event
        return None

    def is_missing(events: Sequence[Event]) -> bool:
        return base_event(events) is not None

    return MissingEventRule(
        status=status,
        is_missing=is_missing,
        base_event=base_event,
        requires_where=requires_where,
    )


def supplement_missing_events(
    entity: Entity,
    rules: Sequence[MissingEventRule],
    catalog: Catalog,
    *,
    now: datetime | None = None,
) -> list[Event]:
    """Add supplement events to ``entity`` until every rule is satisfied."""

    added: list[Event] = []
    progressed = True
    while progressed:
        progressed = False
        for rule in rules:
            events = entity.events
            if not rule.is_missing(events):
                continue
            base = rule.base_event(events)
            if base is None:
                continue
            if rule.requires_where and not base.where:
                log.debug("No location to supplement %s for %s", rule.status, entity.id)
                continue
            supplement = build_supplement_event(entity, rule.status, base, catalog, now=now)
            if entity.add_event(supplement):
                log.info("Added supplement event %s to %s", rule.status, entity.id)
                added.append(supplement)
                progressed = True
    return added
