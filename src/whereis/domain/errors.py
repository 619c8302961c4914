"""Error taxonomy shared by connectors, the gateway and the tracking service.

Every error carries an ``"NNN-NN"`` code whose prefix is the HTTP-like status the
excluded routing layer answers with. The message comes from an immutable table;
the optional ``detail`` is a short diagnostic suffix (``"sfex - CHECK_WORD"``).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final

ERROR_MESSAGES: Final = MappingProxyType(
    {
        "400-01": "Missing tracking ID",
        "400-02": "Invalid tracking number",
        "400-03": "Missing required parameter",
        "400-04": "Unknown operator code",
        "400-05": "Malformed tracking ID, expected <operator>-<trackingNum>",
        "400-06": "Parameter does not match the stored shipment",
        "400-07": "Unsupported query parameter",
        "400-08": "Invalid push payload",
        "400-09": "Operation not supported by operator",
        "404-01": "No tracking information found",
        "500-01": "Carrier is not configured or rejected its credentials",
        "502-01": "Carrier request failed",
    }
)


class TrackingError(Exception):
    """Base class for every error surfaced by the tracking core."""

    default_code: str = "502-01"

    def __init__(self, code: str | None = None, *, detail: str | None = None) -> None:
        self.code = code or self.default_code
        self.message = ERROR_MESSAGES.get(self.code, "Unexpected error")
        self.detail = detail
        super().__init__(str(self))

    @property
    def http_status(self) -> int:
        return int(self.code.split("-", 1)[0])

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} [{self.detail}]"
        return self.message


class TrackingValidationError(TrackingError):
    """Client-caused problem: malformed ids, unknown operators, bad parameters."""

    default_code = "400-02"


class UnsupportedOperationError(TrackingValidationError):
    default_code = "400-09"


class NotFoundError(TrackingError):
    default_code = "404-01"


class CarrierConfigurationError(TrackingError):
    """Missing or rejected carrier credentials; fatal for that carrier only."""

    default_code = "500-01"


class UpstreamError(TrackingError):
    """Carrier unreachable or answering with an unexpected shape; retryable."""

    default_code = "502-01"
