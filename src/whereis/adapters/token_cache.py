"""Bearer-token cache with single-flight refresh.

While a fetch is in flight every caller awaits that same fetch; a token stays
usable until ``safety_margin`` before its declared expiry.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)

DEFAULT_SAFETY_MARGIN = timedelta(seconds=30)


@dataclass(frozen=True, slots=True)
class AccessToken:
    value: str
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenCache:
    def __init__(
        self,
        name: str,
        fetch: Callable[[], Awaitable[AccessToken]],
        *,
        safety_margin: timedelta = DEFAULT_SAFETY_MARGIN,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.name = name
        self._fetch = fetch
        self._safety_margin = safety_margin
        self._clock = clock
        self._token: AccessToken | None = None
        self._inflight: asyncio.Future[AccessToken] | None = None

    @property
    def token(self) -> AccessToken | None:
        return self._token

    def is_valid(self) -> bool:
        if self._token is None:
            return False
        return self._clock() <= self._token.expires_at - self._safety_margin

    def invalidate(self) -> None:
        self._token = None

    async def get_token(self) -> str:
        if self._inflight is not None:
            token = await asyncio.shield(self._inflight)
            return token.value
        if self.is_valid() and self._token is not None:
            return self._token.value

        task = asyncio.ensure_future(self._refresh())
        self._inflight = task
        try:
            token = await asyncio.shield(task)
        finally:
            if self._inflight is task:
                self._inflight = None
        return token.value

    async def _refresh(self) -> AccessToken:
        log.debug("Fetching %s access token", self.name)
        self._token = None
        token = await self._fetch()
        self._token = token
        log.info("%s access token valid until %s", self.name, token.expires_at.isoformat())
        return token
