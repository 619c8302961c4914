"""Raw carrier payload builders."""

from __future__ import annotations

import json
from typing import Any

type RawPayload = dict[str, Any]


def fedex_scan(
    date: str,
    event_type: str,
    derived: str,
    description: str,
    *,
    location_type: str = "FEDEX_FACILITY",
    city: str = "MEMPHIS",
    **extra: Any,
) -> RawPayload:
    payload: RawPayload = {
        "date": date,
        "eventType": event_type,
        "derivedStatusCode": derived,
        "eventDescription": description,
        "locationType": location_type,
        "scanLocation": {
            "city": city,
            "stateOrProvinceCode": "TN",
            "countryName": "United States",
        },
    }
    payload.update(extra)
    return payload


def sfex_route(
    accept_time: str,
    secondary_status_code: str,
    op_code: str,
    remark: str,
    *,
    accept_address: str = "深圳市",
    secondary_status_name: str = "",
) -> RawPayload:
    return {
        "acceptTime": accept_time,
        "acceptAddress": accept_address,
        "remark": remark,
        "opCode": op_code,
        "secondaryStatusCode": secondary_status_code,
        "secondaryStatusName": secondary_status_name,
    }


def sfex_service_response(
    routes: list[RawPayload],
    *,
    code: str = "A1000",
    message: str = "",
) -> RawPayload:
    """Outer SFEX envelope wrapping ``routes`` in the JSON-encoded result data."""

    result = {
        "success": True,
        "errorCode": "S0000",
        "errorMsg": None,
        "msgData": {"routeResps": [{"mailNo": "SF3122082959115", "routes": routes}]},
    }
    return {
        "apiResultCode": code,
        "apiErrorMsg": message,
        "apiResultData": json.dumps(result, ensure_ascii=False),
    }
