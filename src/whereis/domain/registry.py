"""Connector registry: the activation map of carriers available in this process."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from whereis.domain.errors import CarrierConfigurationError, TrackingValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from whereis.domain.model import Catalog
    from whereis.domain.ports import CarrierConnector


class ConnectorRegistry:
    """Immutable map of operator code to connector, built once at startup.

    Operators listed in the catalog but absent here are known but inactive,
    usually because their credentials are not configured.
    """

    def __init__(self, catalog: Catalog, connectors: Iterable[CarrierConnector]) -> None:
        self.catalog = catalog
        self._connectors: Mapping[str, CarrierConnector] = MappingProxyType(
            {connector.code: connector for connector in connectors}
        )

    def __contains__(self, operator: object) -> bool:
        return operator in self._connectors

    @property
    def active_operators(self) -> tuple[str, ...]:
        return tuple(self._connectors)

    def is_known_operator(self, operator: str) -> bool:
        return self.catalog.is_known_operator(operator)

    def is_active(self, operator: str) -> bool:
        return operator in self._connectors

    def get(self, operator: str) -> CarrierConnector:
        if not self.is_known_operator(operator):
            raise TrackingValidationError("400-04", detail=f"OPERATOR_CODE[{operator}]")
        connector = self._connectors.get(operator)
        if connector is None:
            raise CarrierConfigurationError(detail=f"{operator} - NOT_ACTIVE")
        return connector

    def validate_tracking_num(self, operator: str, tracking_num: str) -> None:
        self.get(operator).validate_tracking_num(tracking_num)

    def batch_size(self, operator: str) -> int:
        if operator not in self._connectors:
            return 0
        return max(self.catalog.batch_size(operator), 1)
