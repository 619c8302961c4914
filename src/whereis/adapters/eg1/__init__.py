"""Public interface for the EG1 push adapter."""

from __future__ import annotations

from .connector import Eg1Connector
from .schema import PushEvent, PushItem, PushPayload
from .translator import PushTranslator

__all__ = ["Eg1Connector", "PushEvent", "PushItem", "PushPayload", "PushTranslator"]
