"""SFEX (SF Express) API configuration values."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta, timezone

from .env import env_or_default, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

SFEX_API_URL = "https://bspgw.sf-express.com/std/service"
SFEX_SERVICE_CODE = "EXP_RECE_SEARCH_ROUTES"
SFEX_TIMEZONE_OFFSET = "+08:00"
SFEX_TIMEOUT_SECONDS = 20.0

_OFFSET_PATTERN = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def parse_utc_offset(value: str) -> timezone:
    """Turn ``"+08:00"`` into a fixed-offset timezone."""

    match = _OFFSET_PATTERN.match(value.strip())
    if match is None:
        raise ConfigurationError(f"Invalid UTC offset: {value!r}")
    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    return timezone(-delta if sign == "-" else delta)


def _default_timezone() -> timezone:
    return parse_utc_offset(SFEX_TIMEZONE_OFFSET)


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="sfex",
        timeout_seconds=SFEX_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
    )


@dataclass(frozen=True)
class SfexConfig:
    """Holds SFEX partner credentials and the data-source timezone."""

    partner_id: str
    check_word: str
    api_url: str = SFEX_API_URL
    service_code: str = SFEX_SERVICE_CODE
    source_timezone: timezone = field(default_factory=_default_timezone)
    resilience: ResilienceConfig = field(default_factory=_default_resilience)


def get_sfex_config(*, resilience: ResilienceConfig | None = None) -> SfexConfig:
    values = require_env_vars(("SFEX_PARTNER_ID", "SFEX_CHECK_WORD"))
    return SfexConfig(
        partner_id=values["SFEX_PARTNER_ID"],
        check_word=values["SFEX_CHECK_WORD"],
        api_url=env_or_default("SFEX_API_URL", SFEX_API_URL),
        source_timezone=parse_utc_offset(
            env_or_default("SFEX_TIMEZONE_OFFSET", SFEX_TIMEZONE_OFFSET)
        ),
        resilience=resilience or _default_resilience(),
    )
