"""Pydantic models describing the FDX OAuth and tracking payloads."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_blank(value: object) -> object:
    if value is None:
        return ""
    if isinstance(value, int | float):
        return str(value)
    return value


class FedexBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TokenResponse(FedexBaseModel):
    access_token: str = Field(min_length=1)
    expires_in: float = Field(gt=0)
    token_type: str | None = None


class ErrorDetail(FedexBaseModel):
    code: str = ""
    message: str = ""


class ErrorResponse(FedexBaseModel):
    transaction_id: str | None = Field(default=None, alias="transactionId")
    errors: list[ErrorDetail]


class ScanLocation(FedexBaseModel):
    city: str = ""
    state_or_province_code: str = Field(default="", alias="stateOrProvinceCode")
    country_name: str = Field(default="", alias="countryName")

    _blank = field_validator("city", "state_or_province_code", "country_name", mode="before")(
        _none_to_blank
    )

    def describe(self) -> str:
        parts = (self.city, self.state_or_province_code, self.country_name)
        return " ".join(part.strip() for part in parts if part and part.strip())


class ScanEvent(FedexBaseModel):
    date: datetime
    event_type: str = Field(default="", alias="eventType")
    event_description: str = Field(default="", alias="eventDescription")
    exception_code: str = Field(default="", alias="exceptionCode")
    exception_description: str = Field(default="", alias="exceptionDescription")
    derived_status_code: str = Field(default="", alias="derivedStatusCode")
    location_type: str = Field(default="", alias="locationType")
    scan_location: ScanLocation = Field(default_factory=ScanLocation, alias="scanLocation")

    _blank = field_validator(
        "event_type",
        "event_description",
        "exception_code",
        "exception_description",
        "derived_status_code",
        "location_type",
        mode="before",
    )(_none_to_blank)

    @field_validator("date")
    @classmethod
    def _ensure_timezone(cls, value: datetime) -> datetime:
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class PartyInformation(FedexBaseModel):
    address: ScanLocation = Field(default_factory=ScanLocation)


class TrackResult(FedexBaseModel):
    scan_events: list[dict[str, Any]] = Field(default_factory=list, alias="scanEvents")
    shipper_information: PartyInformation | None = Field(
        default=None, alias="shipperInformation"
    )
    recipient_information: PartyInformation | None = Field(
        default=None, alias="recipientInformation"
    )
    error: dict[str, Any] | None = None


class CompleteTrackResult(FedexBaseModel):
    tracking_number: str = Field(alias="trackingNumber")
    track_results: list[TrackResult] = Field(default_factory=list, alias="trackResults")


class TrackOutput(FedexBaseModel):
    complete_track_results: list[CompleteTrackResult] = Field(
        default_factory=list, alias="completeTrackResults"
    )


class TrackResponse(FedexBaseModel):
    transaction_id: str | None = Field(default=None, alias="transactionId")
    output: TrackOutput | None = None
