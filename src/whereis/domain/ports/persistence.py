"""Storage contract the tracking core depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from whereis.domain.model import Entity, TrackingID, UpdateMethod


@runtime_checkable
class TrackingStore(Protocol):
    """Persistence contract for shipments, their events and API keys.

    Every write is atomic per entity; counts report how many rows the call
    inserted or changed (0 when nothing happened).
    """

    def ping(self) -> bool: ...

    def is_token_valid(self, token: str) -> bool: ...

    def insert_token(self, key: str, user_id: str) -> int: ...

    def insert_entity(self, entity: Entity) -> int: ...

    def refresh_entity(self, tracking_id: TrackingID, entity: Entity) -> int: ...

    def update_entity(
        self,
        entity: Entity,
        update_method: UpdateMethod,
        added_event_ids: Sequence[str],
        removed_event_ids: Sequence[str],
    ) -> int: ...

    def query_entity(self, tracking_id: TrackingID) -> Entity | None: ...

    def query_event_ids(self, tracking_id: TrackingID) -> list[str]: ...

    def get_in_processing_tracking_nums(self) -> dict[str, dict[str, str]]: ...
