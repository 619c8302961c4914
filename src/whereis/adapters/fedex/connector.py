"""FDX carrier connector (pull-based, batch-capable)."""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from whereis.domain.errors import (
    TrackingValidationError,
    UnsupportedOperationError,
    UpstreamError,
)
from whereis.domain.model import TrackingID
from whereis.domain.model.event import utcnow

from .schema import TrackResponse
from .translator import FedexTranslator

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime

    from whereis.domain.model import Catalog, Entity, UpdateMethod
    from whereis.domain.ports import CarrierConnector

    from .client import FedexClient

log = getLogger(__name__)

TRACKING_NUM_PATTERN: Final = re.compile(r"^(\d{12}|\d{15}|\d{20}|\d{22})$")


class FedexConnector:
    code = "fdx"

    def __init__(
        self,
        client: FedexClient,
        catalog: Catalog,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.client = client
        self.translator = FedexTranslator(catalog=catalog, clock=clock)

    def validate_tracking_num(self, tracking_num: str) -> None:
        if not TRACKING_NUM_PATTERN.match(tracking_num):
            raise TrackingValidationError("400-02", detail=f"fdx - {tracking_num}")

    def get_extra_params(self, query: Mapping[str, str]) -> dict[str, str]:  # noqa: ARG002
        return {}

    def validate_params(self, tracking_id: TrackingID, params: Mapping[str, str]) -> None:
        pass

    def validate_stored_entity(self, entity: Entity, params: Mapping[str, str]) -> None:
        pass

    async def pull_from_source(
        self,
        tracking_ids: Sequence[TrackingID],
        extra_params: Mapping[str, str],  # noqa: ARG002
        update_method: UpdateMethod,
    ) -> list[Entity]:
        if not tracking_ids:
            return []
        tracking_nums = [tracking_id.tracking_num for tracking_id in tracking_ids]
        payload = await self.client.track(tracking_nums)
        try:
            response = TrackResponse.model_validate(payload)
        except ValidationError as exc:
            raise UpstreamError(detail="fdx - TRACK_RESPONSE") from exc

        if response.output is None:
            log.warning("FDX response without output for %s tracking numbers", len(tracking_ids))
            return []

        entities: list[Entity] = []
        for complete in response.output.complete_track_results:
            if not complete.track_results:
                log.warning("FDX returned no track results for %s", complete.tracking_number)
                continue
            result = complete.track_results[0]
            if result.error:
                log.error("FDX error for %s: %s", complete.tracking_number, result.error)
                continue
            tracking_id = TrackingID(operator=self.code, tracking_num=complete.tracking_number)
            try:
                entity = self.translator.translate(tracking_id, result, update_method)
            except ValidationError as exc:
                raise UpstreamError(detail=f"fdx - SCAN_EVENT {tracking_id}") from exc
            entities.append(entity)
        return entities

    def process_push_data(self, payload: object) -> list[Entity]:  # noqa: ARG002
        raise UnsupportedOperationError(detail="fdx - PUSH")


if TYPE_CHECKING:
    _connector_check: type[CarrierConnector] = FedexConnector
