"""Carrier connector contract."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from whereis.domain.model import Entity, TrackingID, UpdateMethod


@runtime_checkable
class CarrierConnector(Protocol):
    """Translates one carrier's data into canonical entities.

    Pull-based connectors implement :meth:`pull_from_source` and reject pushes;
    push-based connectors do the opposite.
    """

    code: str

    def validate_tracking_num(self, tracking_num: str) -> None: ...

    def get_extra_params(self, query: Mapping[str, str]) -> dict[str, str]: ...

    def validate_params(self, tracking_id: TrackingID, params: Mapping[str, str]) -> None: ...

    def validate_stored_entity(self, entity: Entity, params: Mapping[str, str]) -> None: ...

    async def pull_from_source(
        self,
        tracking_ids: Sequence[TrackingID],
        extra_params: Mapping[str, str],
        update_method: UpdateMethod,
    ) -> list[Entity]: ...

    def process_push_data(self, payload: object) -> list[Entity]: ...
