"""Domain ports."""

from __future__ import annotations

from .connectors import CarrierConnector
from .persistence import TrackingStore

__all__ = ["CarrierConnector", "TrackingStore"]
