from __future__ import annotations

import pytest

from tests.helpers.tracking import FakeConnector
from whereis.domain.errors import TrackingValidationError
from whereis.domain.model import Catalog, TrackingID
from whereis.domain.registry import ConnectorRegistry


@pytest.fixture
def rules(catalog: Catalog) -> ConnectorRegistry:
    return ConnectorRegistry(catalog, [FakeConnector("fdx"), FakeConnector("sfex")])


def test_parse_splits_operator_and_number(rules: ConnectorRegistry) -> None:
    tracking_id = TrackingID.parse("fdx-779879860040", rules)

    assert tracking_id == TrackingID(operator="fdx", tracking_num="779879860040")
    assert str(tracking_id) == "fdx-779879860040"


def test_parse_lowercases_operator_and_strips(rules: ConnectorRegistry) -> None:
    tracking_id = TrackingID.parse("  SFEX-SF3122082959115 ", rules)

    assert tracking_id.operator == "sfex"
    assert tracking_id.tracking_num == "SF3122082959115"


@pytest.mark.parametrize(
    ("raw", "code"),
    [
        ("", "400-01"),
        ("   ", "400-01"),
        ("fdx", "400-05"),
        ("fdx-", "400-05"),
        ("-779879860040", "400-05"),
        ("ups-1Z999", "400-04"),
        ("fdx-12-34", "400-02"),
    ],
)
def test_parse_rejects_invalid_ids(rules: ConnectorRegistry, raw: str, code: str) -> None:
    with pytest.raises(TrackingValidationError) as excinfo:
        TrackingID.parse(raw, rules)

    assert excinfo.value.code == code
    assert excinfo.value.http_status == 400


def test_unknown_operator_detail_names_operator(rules: ConnectorRegistry) -> None:
    with pytest.raises(TrackingValidationError) as excinfo:
        TrackingID.parse("UPS-1Z999", rules)

    assert excinfo.value.detail == "OPERATOR_CODE[ups]"
    assert "OPERATOR_CODE[ups]" in str(excinfo.value)
