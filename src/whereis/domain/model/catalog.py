"""Immutable metadata tables: status and exception descriptions, operators, API params.

Built once at startup by :func:`default_catalog` and handed to connectors and
services explicitly; tests construct their own instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from .enums import IngestionMode

if TYPE_CHECKING:
    from collections.abc import Mapping

STATUS_DESCRIPTIONS: Final[Mapping[int, str]] = MappingProxyType(
    {
        3000: "Transport Bill Created",
        3001: "Logistics In-Progress",
        3002: "Arrived, In-Transit",
        3003: "Scanned, In-Transit",
        3004: "Departed, In-Transit",
        3005: "Information Received",
        3009: "Process Stopped",
        3050: "Picked Up",
        3100: "Received by Carrier",
        3150: "Customs Clearance: Export In-Progress",
        3200: "Customs Clearance: Export Released",
        3250: "In-Transit",
        3300: "Arrived At Destination",
        3350: "Customs Clearance: Import In-Progress",
        3400: "Customs Clearance: Import Released",
        3450: "Final Delivery In-Progress",
        3500: "Delivered",
    }
)

EXCEPTION_DESCRIPTIONS: Final[Mapping[int, str]] = MappingProxyType(
    {
        900: "Exception Occurred",
        907: "Recipient, Not Available",
        909: "Rerouted",
    }
)

GENERIC_EXCEPTION_CODE: Final = 900


@dataclass(frozen=True, slots=True)
class OperatorInfo:
    code: str
    name: str
    batch_size: int = 1
    ingestion_mode: IngestionMode = IngestionMode.PULL


OPERATORS: Final[Mapping[str, OperatorInfo]] = MappingProxyType(
    {
        "fdx": OperatorInfo(code="fdx", name="FedEx", batch_size=10),
        "sfex": OperatorInfo(code="sfex", name="SF Express", batch_size=1),
        "eg1": OperatorInfo(
            code="eg1", name="Eagle1", batch_size=1, ingestion_mode=IngestionMode.PUSH
        ),
    }
)

# endpoint -> {"common": [...], "<operator>": [...]}
API_PARAMS: Final[Mapping[str, Mapping[str, tuple[str, ...]]]] = MappingProxyType(
    {
        "whereis": MappingProxyType(
            {"common": ("refresh", "fulldata"), "sfex": ("phonenum",)}
        ),
        "status": MappingProxyType({"common": (), "sfex": ("phonenum",)}),
    }
)


@dataclass(frozen=True, slots=True)
class Catalog:
    statuses: Mapping[int, str] = field(default_factory=lambda: STATUS_DESCRIPTIONS)
    exceptions: Mapping[int, str] = field(default_factory=lambda: EXCEPTION_DESCRIPTIONS)
    operators: Mapping[str, OperatorInfo] = field(default_factory=lambda: OPERATORS)
    api_params: Mapping[str, Mapping[str, tuple[str, ...]]] = field(
        default_factory=lambda: API_PARAMS
    )

    def status_description(self, status: int) -> str:
        return self.statuses.get(status, "")

    def exception_description(self, code: int) -> str:
        return self.exceptions.get(code, self.exceptions.get(GENERIC_EXCEPTION_CODE, ""))

    def is_known_operator(self, operator: str) -> bool:
        return operator in self.operators

    def operator(self, operator: str) -> OperatorInfo | None:
        return self.operators.get(operator)

    def batch_size(self, operator: str) -> int:
        """Maximum tracking ids per pull call; 0 for unknown operators."""

        info = self.operators.get(operator)
        return info.batch_size if info is not None else 0

    def param_names(self, endpoint: str, operator: str) -> frozenset[str]:
        table = self.api_params.get(endpoint, {})
        return frozenset((*table.get("common", ()), *table.get(operator, ())))


def default_catalog() -> Catalog:
    return Catalog()
