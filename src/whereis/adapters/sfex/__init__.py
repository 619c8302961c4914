"""Public interface for the SFEX adapter."""

from __future__ import annotations

from .client import SfexClient, build_msg_data, sign_message
from .connector import SfexConnector
from .schema import ResultData, Route, ServiceResponse
from .translator import SFEX_MISSING_EVENT_RULES, SFEX_STATUS_MAP, SfexTranslator

__all__ = [
    "SFEX_MISSING_EVENT_RULES",
    "SFEX_STATUS_MAP",
    "ResultData",
    "Route",
    "ServiceResponse",
    "SfexClient",
    "SfexConnector",
    "SfexTranslator",
    "build_msg_data",
    "sign_message",
]
