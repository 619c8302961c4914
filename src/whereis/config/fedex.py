"""FDX (FedEx) API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_or_default, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

FDX_TOKEN_URL = "https://apis.fedex.com/oauth/token"
FDX_TRACK_URL = "https://apis.fedex.com/track/v1/trackingnumbers"
FDX_TIMEOUT_SECONDS = 20.0


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="fdx",
        timeout_seconds=FDX_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    )


@dataclass(frozen=True)
class FedexConfig:
    """Holds FDX OAuth credentials and endpoints."""

    client_id: str
    client_secret: str
    token_url: str = FDX_TOKEN_URL
    track_url: str = FDX_TRACK_URL
    resilience: ResilienceConfig = field(default_factory=_default_resilience)


def get_fedex_config(*, resilience: ResilienceConfig | None = None) -> FedexConfig:
    values = require_env_vars(("FDX_CLIENT_ID", "FDX_CLIENT_SECRET"))
    return FedexConfig(
        client_id=values["FDX_CLIENT_ID"],
        client_secret=values["FDX_CLIENT_SECRET"],
        token_url=env_or_default("FDX_TOKEN_URL", FDX_TOKEN_URL),
        track_url=env_or_default("FDX_TRACK_URL", FDX_TRACK_URL),
        resilience=resilience or _default_resilience(),
    )
