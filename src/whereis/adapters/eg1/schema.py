"""Pydantic models describing the EG1 push payload."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PushBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PushEventAdditional(PushBaseModel):
    tracking_num: str = Field(default="", alias="trackingNum")
    operator_code: str = Field(default="", alias="operatorCode")
    data_provider: str = Field(default="", alias="dataProvider")
    exception_code: int | None = Field(default=None, alias="exceptionCode")
    exception_desc: str | None = Field(default=None, alias="exceptionDesc")
    notification_code: int | None = Field(default=None, alias="notificationCode")
    notification_desc: str | None = Field(default=None, alias="notificationDesc")


class PushEvent(PushBaseModel):
    status: int
    when: datetime
    what: str = ""
    whom: str = ""
    where: str = ""
    notes: str = ""
    additional: PushEventAdditional = Field(default_factory=PushEventAdditional)
    source_data: dict[str, Any] = Field(default_factory=dict, alias="sourceData")

    @field_validator("what", "whom", "where", "notes", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("when")
    @classmethod
    def _ensure_timezone(cls, value: datetime) -> datetime:
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class PushEntity(PushBaseModel):
    id: str
    uuid: UUID | None = None
    type: str = "waybill"
    params: dict[str, str] = Field(default_factory=dict)
    additional: dict[str, Any] = Field(default_factory=dict)


class PushItem(PushBaseModel):
    entity: PushEntity
    events: list[dict[str, Any]] = Field(default_factory=list)


class PushPayload(PushBaseModel):
    entities: list[dict[str, Any]]
