"""Public interface for the FDX adapter."""

from __future__ import annotations

from .client import FedexClient
from .connector import FedexConnector
from .schema import ScanEvent, TrackResponse
from .translator import FEDEX_MISSING_EVENT_RULES, FEDEX_STATUS_MAP, FedexTranslator

__all__ = [
    "FEDEX_MISSING_EVENT_RULES",
    "FEDEX_STATUS_MAP",
    "FedexClient",
    "FedexConnector",
    "FedexTranslator",
    "ScanEvent",
    "TrackResponse",
]
