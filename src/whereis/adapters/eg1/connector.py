"""EG1 connector: shipments are pushed to us, never pulled."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from whereis.domain.errors import TrackingValidationError, UnsupportedOperationError
from whereis.domain.model.event import utcnow

from .translator import PushTranslator

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime

    from whereis.domain.model import Catalog, Entity, TrackingID, UpdateMethod
    from whereis.domain.ports import CarrierConnector

TRACKING_NUM_PATTERN: Final = re.compile(r"^[A-Za-z0-9]+$")


class Eg1Connector:
    code = "eg1"

    def __init__(self, catalog: Catalog, *, clock: Callable[[], datetime] = utcnow) -> None:
        self.translator = PushTranslator(
            catalog=catalog,
            operator=self.code,
            validate_tracking_num=self.validate_tracking_num,
            clock=clock,
        )

    def validate_tracking_num(self, tracking_num: str) -> None:
        if not TRACKING_NUM_PATTERN.match(tracking_num):
            raise TrackingValidationError("400-02", detail=f"eg1 - {tracking_num}")

    def get_extra_params(self, query: Mapping[str, str]) -> dict[str, str]:  # noqa: ARG002
        return {}

    def validate_params(self, tracking_id: TrackingID, params: Mapping[str, str]) -> None:
        pass

    def validate_stored_entity(self, entity: Entity, params: Mapping[str, str]) -> None:
        pass

    async def pull_from_source(
        self,
        tracking_ids: Sequence[TrackingID],  # noqa: ARG002
        extra_params: Mapping[str, str],  # noqa: ARG002
        update_method: UpdateMethod,  # noqa: ARG002
    ) -> list[Entity]:
        raise UnsupportedOperationError(detail="eg1 - PULL")

    def process_push_data(self, payload: object) -> list[Entity]:
        return self.translator.translate(payload)


if TYPE_CHECKING:
    _connector_check: type[CarrierConnector] = Eg1Connector
