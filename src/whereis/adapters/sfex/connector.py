"""SFEX carrier connector (pull-based, one tracking number per call)."""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING, Final

from whereis.domain.errors import (
    CarrierConfigurationError,
    TrackingValidationError,
    UnsupportedOperationError,
    UpstreamError,
)
from whereis.domain.model.event import utcnow

from .schema import ResultData
from .translator import SfexTranslator

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime

    from whereis.domain.model import Catalog, Entity, TrackingID, UpdateMethod
    from whereis.domain.ports import CarrierConnector

    from .client import SfexClient

log = getLogger(__name__)

TRACKING_NUM_PATTERN: Final = re.compile(r"^SF\d{13}$")
PHONE_PARAM: Final = "phonenum"
SUCCESS_CODE: Final = "A1000"
CREDENTIAL_ERROR_CODES: Final = frozenset({"A1001", "A1004", "A1006"})


class SfexConnector:
    code = "sfex"

    def __init__(
        self,
        client: SfexClient,
        catalog: Catalog,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.client = client
        self.translator = SfexTranslator(
            catalog=catalog,
            source_timezone=client.config.source_timezone,
            clock=clock,
        )

    def validate_tracking_num(self, tracking_num: str) -> None:
        if not TRACKING_NUM_PATTERN.match(tracking_num):
            raise TrackingValidationError("400-02", detail=f"sfex - {tracking_num}")

    def get_extra_params(self, query: Mapping[str, str]) -> dict[str, str]:
        return {PHONE_PARAM: (query.get(PHONE_PARAM) or "").strip()}

    def validate_params(self, tracking_id: TrackingID, params: Mapping[str, str]) -> None:
        if not params.get(PHONE_PARAM):
            raise TrackingValidationError("400-03", detail=f"{tracking_id} - {PHONE_PARAM}")

    def validate_stored_entity(self, entity: Entity, params: Mapping[str, str]) -> None:
        if entity.params.get(PHONE_PARAM, "") != params.get(PHONE_PARAM, ""):
            raise TrackingValidationError("400-06", detail=f"{entity.id} - {PHONE_PARAM}")

    async def pull_from_source(
        self,
        tracking_ids: Sequence[TrackingID],
        extra_params: Mapping[str, str],
        update_method: UpdateMethod,
    ) -> list[Entity]:
        phone = extra_params.get(PHONE_PARAM, "")
        entities: list[Entity] = []
        for tracking_id in tracking_ids:
            entity = await self._pull_one(tracking_id, phone, update_method)
            if entity is not None:
                entities.append(entity)
        return entities

    def process_push_data(self, payload: object) -> list[Entity]:  # noqa: ARG002
        raise UnsupportedOperationError(detail="sfex - PUSH")

    async def _pull_one(
        self,
        tracking_id: TrackingID,
        phone: str,
        update_method: UpdateMethod,
    ) -> Entity | None:
        response = await self.client.search_routes(tracking_id.tracking_num, phone)
        code = response.api_result_code
        if code != SUCCESS_CODE:
            log.error("SFEX returned %s for %s: %s", code, tracking_id, response.api_error_msg)
            if code in CREDENTIAL_ERROR_CODES:
                raise CarrierConfigurationError(detail=f"sfex - {code}")
            raise UpstreamError(detail=f"sfex - {code}")

        try:
            result = ResultData.model_validate_json(response.api_result_data or "{}")
            routes = result.routes()
            if not routes:
                log.warning("SFEX returned no routes for %s", tracking_id)
                return None
            return self.translator.translate(
                tracking_id, routes, {PHONE_PARAM: phone}, update_method
            )
        except ValueError as exc:
            raise UpstreamError(detail=f"sfex - ROUTE_DATA {tracking_id}") from exc


if TYPE_CHECKING:
    _connector_check: type[CarrierConnector] = SfexConnector
