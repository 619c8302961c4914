"""HTTP client for the FDX OAuth and tracking APIs."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

import httpx
from pydantic import ValidationError

from whereis.adapters.http_resilience import ResilientClient
from whereis.adapters.token_cache import AccessToken, TokenCache
from whereis.domain.errors import CarrierConfigurationError, UpstreamError

from .schema import ErrorResponse, TokenResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from whereis.config import FedexConfig, ResilienceConfig

log = getLogger(__name__)

_CREDENTIAL_ERRORS: Final = frozenset({"BAD.REQUEST.ERROR", "NOT.AUTHORIZED.ERROR"})


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _json_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamError(detail=f"fdx - INVALID_JSON HTTP {response.status_code}") from exc


class FedexClient:
    """Fetches bearer tokens (cached, single-flight) and batch tracking results."""

    def __init__(
        self,
        config: FedexConfig,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config
        self.client_factory = client_factory
        self._clock = clock
        self.tokens = TokenCache("fdx", self._fetch_token, clock=clock)

    async def track(self, tracking_nums: Sequence[str]) -> Any:
        token = await self.tokens.get_token()
        payload = {
            "includeDetailedScans": True,
            "trackingInfo": [
                {"trackingNumberInfo": {"trackingNumber": tracking_num}}
                for tracking_num in tracking_nums
            ],
        }
        headers = {
            "Content-Type": "application/json",
            "X-locale": "en_US",
            "Authorization": f"Bearer {token}",
        }
        response = await self._post(self.config.track_url, json=payload, headers=headers)

        if response.status_code == httpx.codes.UNAUTHORIZED:
            self.tokens.invalidate()
            raise UpstreamError(detail="fdx - UNAUTHORIZED")
        if response.is_error:
            log.error("FDX tracking request failed with HTTP %s", response.status_code)
            raise UpstreamError(detail=f"fdx - HTTP {response.status_code}")
        return _json_payload(response)

    async def _fetch_token(self) -> AccessToken:
        if not self.config.client_id or not self.config.client_secret:
            raise CarrierConfigurationError(detail="fdx - CLIENT_ID/SECRET")

        form = {
            "grant_type": "client_credentials",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
        }
        response = await self._post(
            self.config.token_url,
            data=form,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        payload = _json_payload(response)

        if response.is_success:
            try:
                token = TokenResponse.model_validate(payload)
            except ValidationError as exc:
                raise UpstreamError(detail="fdx - TOKEN_RESPONSE") from exc
            return AccessToken(
                value=token.access_token,
                expires_at=self._clock() + timedelta(seconds=token.expires_in),
            )

        try:
            error_payload = ErrorResponse.model_validate(payload)
        except ValidationError as exc:
            raise UpstreamError(detail=f"fdx - HTTP {response.status_code}") from exc
        code = error_payload.errors[0].code if error_payload.errors else ""
        if code in _CREDENTIAL_ERRORS:
            log.error("FDX rejected the configured credentials: %s", code)
            raise CarrierConfigurationError(detail=f"fdx - {code}")
        raise UpstreamError(detail=f"fdx - {code or response.status_code}")

    async def _post(
        self,
        url: str,
        *,
        headers: dict[str, str],
        json: object | None = None,
        data: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            async with self.client_factory(self.config.resilience) as client:
                return await client.post(url, json=json, data=data, headers=headers)
        except httpx.HTTPError as exc:
            log.warning("FDX request to %s failed: %r", url, exc)
            raise UpstreamError(detail=f"fdx - {exc.__class__.__name__}") from exc
