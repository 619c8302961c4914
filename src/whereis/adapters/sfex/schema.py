"""Pydantic models describing the SFEX route-search payloads."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

ACCEPT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _to_text(value: object) -> object:
    if value is None:
        return ""
    if isinstance(value, int | float):
        return str(value)
    return value


class SfexBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ServiceResponse(SfexBaseModel):
    """Outer envelope; ``apiResultData`` is itself a JSON document."""

    api_result_code: str = Field(alias="apiResultCode")
    api_error_msg: str | None = Field(default=None, alias="apiErrorMsg")
    api_result_data: str | None = Field(default=None, alias="apiResultData")


class Route(SfexBaseModel):
    accept_time: str = Field(alias="acceptTime")
    accept_address: str = Field(default="", alias="acceptAddress")
    remark: str = ""
    op_code: str = Field(default="", alias="opCode")
    secondary_status_code: str = Field(default="", alias="secondaryStatusCode")
    secondary_status_name: str = Field(default="", alias="secondaryStatusName")

    _text = field_validator(
        "accept_address",
        "remark",
        "op_code",
        "secondary_status_code",
        "secondary_status_name",
        mode="before",
    )(_to_text)

    def accepted_at(self, source_timezone: tzinfo) -> datetime:
        """``acceptTime`` is local to the carrier and carries no offset."""

        naive = datetime.strptime(self.accept_time.strip(), ACCEPT_TIME_FORMAT)  # noqa: DTZ007
        return naive.replace(tzinfo=source_timezone)


class RouteResp(SfexBaseModel):
    mail_no: str = Field(default="", alias="mailNo")
    routes: list[dict[str, Any]] = Field(default_factory=list)


class MsgData(SfexBaseModel):
    route_resps: list[RouteResp] = Field(default_factory=list, alias="routeResps")


class ResultData(SfexBaseModel):
    success: bool | None = None
    error_code: str | None = Field(default=None, alias="errorCode")
    error_msg: str | None = Field(default=None, alias="errorMsg")
    msg_data: MsgData | None = Field(default=None, alias="msgData")

    def routes(self) -> list[dict[str, Any]]:
        if self.msg_data is None or not self.msg_data.route_resps:
            return []
        return self.msg_data.route_resps[0].routes
