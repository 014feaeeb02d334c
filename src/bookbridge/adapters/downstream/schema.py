"""Pydantic models for the downstream booking API bodies."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from bookbridge.domain.types import BookingPayload


class DownstreamBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BookingBody(DownstreamBaseModel):
    external_id: str = Field(alias="externalId")
    name: str
    phone: str
    party_size: int = Field(alias="partySize")
    start_date: datetime | None = Field(default=None, alias="startDate")
    end_date: datetime | None = Field(default=None, alias="endDate")
    room_id: str = Field(alias="roomId")
    hole: str | None = None
    paymented: bool = False
    payment_amount: int = Field(default=0, alias="paymentAmount")
    crawling_site: str = Field(alias="crawlingSite")
    immediate: bool = False

    @classmethod
    def from_payload(cls, payload: BookingPayload) -> BookingBody:
        return cls(
            external_id=payload.booking_id,
            name=payload.name,
            phone=payload.phone,
            party_size=payload.party_size,
            start_date=payload.start,
            end_date=payload.end,
            room_id=payload.room,
            hole=payload.hole,
            paymented=payload.paid,
            payment_amount=payload.amount,
            crawling_site=payload.site,
            immediate=payload.immediate,
        )

    def to_json(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class CancelBody(DownstreamBaseModel):
    canceled_by: str = Field(alias="canceledBy")

    def to_json(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class ErrorResponse(DownstreamBaseModel):
    error: str | None = None
    message: str | None = None
