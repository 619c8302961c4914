"""Shipment aggregate holding an ordered list of events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from .enums import EntityType, IngestionMode
from .status import CRITICAL_STATUSES, CROSS_BORDER_STATUSES, TERMINAL_STATUSES

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from .event import Event
    from .tracking_id import TrackingID


@dataclass(slots=True, kw_only=True)
class Entity:
    """One shipment.

    Events are kept sorted ascending by ``when`` and unique by ``event_id``;
    mutate them only through :meth:`add_event` / :meth:`remove_events`.
    """

    tracking_id: TrackingID
    uuid: UUID = field(default_factory=uuid4)
    type: EntityType = EntityType.WAYBILL
    ingestion_mode: IngestionMode = IngestionMode.PULL
    params: dict[str, str] = field(default_factory=dict)
    additional: dict[str, Any] = field(default_factory=dict)
    _events: list[Event] = field(default_factory=list, init=False, repr=False)

    @property
    def id(self) -> str:
        return str(self.tracking_id)

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    @property
    def completed(self) -> bool:
        return self.is_completed()

    def __len__(self) -> int:
        return len(self._events)

    def add_event(self, event: Event) -> bool:
        """Insert ``event`` keeping time order. Duplicate ids are dropped."""

        if self.has_event_id(event.event_id):
            return False
        self._events.append(event)
        self._sort_events()
        return True

    def add_events(self, events: Iterable[Event]) -> int:
        return sum(1 for event in events if self.add_event(event))

    def remove_events(self, event_ids: Iterable[str]) -> int:
        doomed = set(event_ids)
        before = len(self._events)
        self._events = [event for event in self._events if event.event_id not in doomed]
        return before - len(self._events)

    def has_event_id(self, event_id: str) -> bool:
        return any(event.event_id == event_id for event in self._events)

    def event_ids(self) -> list[str]:
        return [event.event_id for event in self._events]

    def first_event(self) -> Event | None:
        self._sort_events()
        return self._events[0] if self._events else None

    def last_event(self) -> Event | None:
        self._sort_events()
        return self._events[-1] if self._events else None

    def creation_time(self) -> datetime | None:
        first = self.first_event()
        return first.when if first is not None else None

    def has_status(self, *statuses: int) -> bool:
        wanted = set(statuses)
        return any(event.status in wanted for event in self._events)

    def is_completed(self) -> bool:
        return self.has_status(*TERMINAL_STATUSES)

    def missing_critical_statuses(self) -> list[int]:
        return [int(status) for status in CRITICAL_STATUSES if not self.has_status(status)]

    def annotations(self) -> dict[str, Any]:
        return {"isCrossBorder": self.has_status(*CROSS_BORDER_STATUSES)}

    def last_status(self) -> dict[str, Any] | None:
        last = self.last_event()
        if last is None:
            return None
        return {
            "id": self.id,
            "status": last.status,
            "what": last.what,
            "whom": last.whom,
            "when": last.when.isoformat(),
            "where": last.where,
            "notes": last.notes,
        }

    def to_dict(self, *, full_data: bool = False) -> dict[str, Any]:
        created = self.creation_time()
        header: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "uuid": str(self.uuid),
            "createdAt": created.isoformat() if created else "",
            "additional": {**self.additional, **self.annotations()},
        }
        if full_data:
            header["params"] = dict(self.params)
        return {
            "entity": header,
            "events": [event.to_dict(full_data=full_data) for event in self.events],
        }

    def _sort_events(self) -> None:
        self._events.sort(key=lambda event: event.when)
