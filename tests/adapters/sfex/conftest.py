"""Shared fixtures for SFEX adapter tests."""

from __future__ import annotations

from typing import Any

import pytest

from tests.helpers.carriers import sfex_route
from whereis.config import SfexConfig

SfexPayload = dict[str, Any]


@pytest.fixture
def routes() -> list[SfexPayload]:
    return [
        sfex_route("2024-05-01 10:00:00", "101", "50", "顺丰速运 已收取快件"),
        sfex_route("2024-05-01 20:00:00", "201", "105", "快件途经 深圳华侨城集散中心"),
        sfex_route(
            "2024-05-02 09:00:00",
            "204",
            "611",
            "快件正在清关",
            accept_address="Los Angeles",
            secondary_status_name="清关中",
        ),
        sfex_route("2024-05-03 09:00:00", "401", "80", "已签收", accept_address="Los Angeles"),
    ]


@pytest.fixture
def sfex_config() -> SfexConfig:
    return SfexConfig(
        partner_id="partner",
        check_word="check-word",
        api_url="https://sfex.example.com/std/service",
    )
