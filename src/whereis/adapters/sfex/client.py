"""HTTP client for the SFEX route-search service (signed form posts)."""

from __future__ import annotations

import base64
import hashlib
import json
import time
from logging import getLogger
from typing import TYPE_CHECKING, Any
from urllib.parse import quote
from uuid import uuid4

import httpx
from pydantic import ValidationError

from whereis.adapters.http_resilience import ResilientClient
from whereis.domain.errors import UpstreamError

from .schema import ServiceResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from whereis.config import ResilienceConfig, SfexConfig

log = getLogger(__name__)

# characters left unescaped by ECMAScript encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _timestamp_ms() -> str:
    return str(int(time.time() * 1000))


def sign_message(msg_data: str, timestamp: str, check_word: str) -> str:
    """``base64(md5(urlencode(msgData + timestamp + checkWord)))``."""

    encoded = quote(msg_data + timestamp + check_word, safe=_URI_COMPONENT_SAFE)
    digest = hashlib.md5(encoded.encode("utf-8")).digest()  # noqa: S324
    return base64.b64encode(digest).decode("ascii")


def build_msg_data(tracking_num: str, phone: str) -> str:
    payload = {"trackingType": 1, "trackingNumber": [tracking_num], "checkPhoneNo": phone}
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


class SfexClient:
    def __init__(
        self,
        config: SfexConfig,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
        timestamp: Callable[[], str] = _timestamp_ms,
    ) -> None:
        self.config = config
        self.client_factory = client_factory
        self._timestamp = timestamp

    def build_form(self, tracking_num: str, phone: str) -> dict[str, str]:
        msg_data = build_msg_data(tracking_num, phone)
        timestamp = self._timestamp()
        return {
            "partnerID": self.config.partner_id,
            "requestID": str(uuid4()),
            "serviceCode": self.config.service_code,
            "timestamp": timestamp,
            "msgDigest": sign_message(msg_data, timestamp, self.config.check_word),
            "msgData": msg_data,
        }

    async def search_routes(self, tracking_num: str, phone: str) -> ServiceResponse:
        form = self.build_form(tracking_num, phone)
        try:
            async with self.client_factory(self.config.resilience) as client:
                response = await client.post(self.config.api_url, data=form)
        except httpx.HTTPError as exc:
            log.warning("SFEX request failed: %r", exc)
            raise UpstreamError(detail=f"sfex - {exc.__class__.__name__}") from exc

        if response.is_error:
            log.error("SFEX route search failed with HTTP %s", response.status_code)
            raise UpstreamError(detail=f"sfex - HTTP {response.status_code}")

        try:
            payload: Any = response.json()
            return ServiceResponse.model_validate(payload)
        except ValueError as exc:
            raise UpstreamError(detail="sfex - INVALID_RESPONSE") from exc
