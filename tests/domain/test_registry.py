from __future__ import annotations

import pytest

from tests.helpers.tracking import FakeConnector
from whereis.domain.errors import CarrierConfigurationError, TrackingValidationError
from whereis.domain.model import Catalog
from whereis.domain.registry import ConnectorRegistry


@pytest.fixture
def registry(catalog: Catalog) -> ConnectorRegistry:
    return ConnectorRegistry(catalog, [FakeConnector("fdx"), FakeConnector("eg1")])


def test_active_operators(registry: ConnectorRegistry) -> None:
    assert registry.active_operators == ("fdx", "eg1")
    assert "fdx" in registry
    assert "sfex" not in registry
    assert registry.is_known_operator("sfex")
    assert not registry.is_active("sfex")


def test_get_unknown_operator_is_a_client_error(registry: ConnectorRegistry) -> None:
    with pytest.raises(TrackingValidationError) as excinfo:
        registry.get("ups")

    assert excinfo.value.code == "400-04"


def test_get_inactive_operator_is_a_configuration_error(registry: ConnectorRegistry) -> None:
    with pytest.raises(CarrierConfigurationError) as excinfo:
        registry.get("sfex")

    assert excinfo.value.code == "500-01"
    assert excinfo.value.detail == "sfex - NOT_ACTIVE"


def test_batch_size_follows_catalog_for_active_operators(registry: ConnectorRegistry) -> None:
    assert registry.batch_size("fdx") == 10
    assert registry.batch_size("eg1") == 1
    assert registry.batch_size("sfex") == 0
    assert registry.batch_size("ups") == 0
