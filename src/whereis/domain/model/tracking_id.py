"""Validated tracking identifiers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Self

from whereis.domain.errors import TrackingValidationError


class TrackingNumberRules(Protocol):
    """Knows which operators exist and how each one shapes its tracking numbers."""

    def is_known_operator(self, operator: str) -> bool: ...

    def validate_tracking_num(self, operator: str, tracking_num: str) -> None: ...


@dataclass(frozen=True, slots=True)
class TrackingID:
    operator: str
    tracking_num: str

    @classmethod
    def parse(cls, raw: str, rules: TrackingNumberRules) -> Self:
        """Parse ``"<operator>-<trackingNum>"``.

        The operator part is case-insensitive; the tracking number is checked by
        the operator's own rules. Numbers may themselves contain dashes, only the
        first one separates the operator.
        """

        value = (raw or "").strip()
        if not value:
            raise TrackingValidationError("400-01", detail="TRACKING_ID")

        operator, sep, tracking_num = value.partition("-")
        if not sep or not operator or not tracking_num:
            raise TrackingValidationError("400-05", detail=value)

        operator = operator.lower()
        if not rules.is_known_operator(operator):
            raise TrackingValidationError("400-04", detail=f"OPERATOR_CODE[{operator}]")

        rules.validate_tracking_num(operator, tracking_num)
        return cls(operator=operator, tracking_num=tracking_num)

    def __str__(self) -> str:
        return f"{self.operator}-{self.tracking_num}"
