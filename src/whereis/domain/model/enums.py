"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class IngestionMode(StrEnum):
    PULL = "pull"
    PUSH = "push"


class UpdateMethod(StrEnum):
    """Provenance of an event write."""

    AUTO_PULL = "auto-pull"
    MANUAL_PULL = "manual-pull"
    BATCH_PULL = "batch-pull"
    PUSH = "push"
    SYSTEM_GENERATED = "system-generated"

    @property
    def display_text(self) -> str:
        return self.value[:1].upper() + self.value[1:]


class EntityType(StrEnum):
    WAYBILL = "waybill"
