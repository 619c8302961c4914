"""Shared fixtures for FDX adapter tests."""

from __future__ import annotations

from typing import Any

import pytest

from tests.helpers.carriers import fedex_scan as scan
from whereis.config import FedexConfig

FedexPayload = dict[str, Any]


@pytest.fixture
def scan_events() -> list[FedexPayload]:
    # newest first, as FDX returns them
    return [
        scan("2024-05-03T10:00:00-05:00", "DL", "DL", "Delivered", location_type="DELIVERY"),
        scan(
            "2024-05-02T08:00:00-05:00",
            "AR",
            "IT",
            "Arrived at FedEx location",
            location_type="DESTINATION_FEDEX_FACILITY",
        ),
        scan("2024-05-01T09:00:00-05:00", "DP", "IT", "Departed FedEx hub"),
        scan(
            "2024-05-01T07:00:00-05:00",
            "OC",
            "IN",
            "Shipment information sent to FedEx",
            location_type="CUSTOMER",
            scanLocation={},
        ),
    ]


@pytest.fixture
def track_payload(scan_events: list[FedexPayload]) -> FedexPayload:
    return {
        "transactionId": "624deea6-b709-470c-8c39-4b5511281492",
        "output": {
            "completeTrackResults": [
                {
                    "trackingNumber": "779879860040",
                    "trackResults": [
                        {
                            "scanEvents": scan_events,
                            "shipperInformation": {
                                "address": {"city": "Shanghai", "countryName": "China"}
                            },
                            "recipientInformation": {
                                "address": {
                                    "city": "MEMPHIS",
                                    "stateOrProvinceCode": "TN",
                                    "countryName": "United States",
                                }
                            },
                        }
                    ],
                },
                {
                    "trackingNumber": "123456789012",
                    "trackResults": [
                        {
                            "error": {
                                "code": "TRACKING.TRACKINGNUMBER.NOTFOUND",
                                "message": "Tracking number cannot be found.",
                            }
                        }
                    ],
                },
            ]
        },
    }


@pytest.fixture
def fedex_config() -> FedexConfig:
    return FedexConfig(client_id="client-id", client_secret="client-secret")
