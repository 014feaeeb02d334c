"""Pydantic models for captured request and response field maps."""

from __future__ import annotations

import json
from logging import getLogger

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

log = getLogger(__name__)


def _id_to_str(value: object) -> object:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return value


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        return value.strip() or None
    return value


def _string_or_none(value: object) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    return None


def _loose_text(value: object) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return None


class CaptureBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BookingInfo(CaptureBaseModel):
    """Form data the confirmation request carries as an embedded JSON string."""

    name: str | None = None
    phone: str | None = None
    person: object = None
    amount: object = None
    start_datetime: str | None = None
    end_datetime: str | None = None
    room: str | None = None
    hole: str | None = None

    _normalize_text = field_validator("name", "phone", "room", "hole", mode="before")(_loose_text)
    _normalize_times = field_validator("start_datetime", "end_datetime", mode="before")(
        _string_or_none
    )


class ConfirmationPayload(CaptureBaseModel):
    book_id: str
    state: str
    room: str | None = None
    name: str | None = None
    phone: str | None = None
    person: object = None
    booking_info: BookingInfo = Field(
        default_factory=BookingInfo,
        validation_alias=AliasChoices("bookingInfo", "booking_info"),
    )

    _normalize_ids = field_validator("book_id", "room", mode="before")(_id_to_str)

    @field_validator("booking_info", mode="before")
    @classmethod
    def _decode_booking_info(cls, value: object) -> object:
        if value is None:
            return {}
        if isinstance(value, str):
            if not value.strip():
                return {}
            try:
                value = json.loads(value)
            except json.JSONDecodeError as exc:
                log.warning("Failed to parse bookingInfo JSON: %s", exc)
                return {}
        if not isinstance(value, dict | BookingInfo):
            log.warning("Ignoring bookingInfo of type %s", type(value).__name__)
            return {}
        return value


class ListingPayload(CaptureBaseModel):
    results: list[object] = Field(default_factory=list[object])


class CustomerInfoPayload(CaptureBaseModel):
    upd_date: str | None = None


class CustomerPayload(CaptureBaseModel):
    id: str
    name: str | None = None
    phone: str | None = None
    customerinfo_set: list[CustomerInfoPayload] = Field(
        default_factory=list["CustomerInfoPayload"]
    )

    _normalize_id = field_validator("id", mode="before")(_id_to_str)

    @property
    def updated_at(self) -> str | None:
        if not self.customerinfo_set:
            return None
        return self.customerinfo_set[0].upd_date


class RevenuePayload(CaptureBaseModel):
    book_idx: str
    amount: object
    finished: object = None
    revenue_id: str | None = None

    _normalize_ids = field_validator("book_idx", "revenue_id", mode="before")(_id_to_str)

    @field_validator("amount", mode="before")
    @classmethod
    def _require_amount(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("amount is required")
        return value

    @property
    def is_finished(self) -> bool:
        return self.finished is True or self.finished == "true"


class BookingCreateRequestPayload(CaptureBaseModel):
    request_id: str
    book_idx: str | None = None
    name: str | None = None
    phone: str | None = None
    person: object = None
    amount: object = None
    start_datetime: str | None = None
    end_datetime: str | None = None
    room: str | None = None
    hole: str | None = None

    _normalize_ids = field_validator("request_id", "book_idx", "room", "hole", mode="before")(
        _id_to_str
    )
    _normalize_text = field_validator("name", "phone", mode="before")(_blank_to_none)


class BookingCreateResponsePayload(CaptureBaseModel):
    request_id: str
    book_id: str
    book_idx: str | None = None

    _normalize_ids = field_validator("request_id", "book_id", "book_idx", mode="before")(
        _id_to_str
    )
