"""Pydantic models describing the booking listing payload."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _id_to_str(value: object) -> object:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return str(int(value))
    if isinstance(value, str):
        return value.strip() or None
    return value


class ListingBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CustomerInfo(ListingBaseModel):
    upd_date: str | None = None


class CustomerDetail(ListingBaseModel):
    customerinfo_set: list[CustomerInfo] = Field(default_factory=list["CustomerInfo"])


class RevenueDetail(ListingBaseModel):
    amount: object = None
    finished: object = None


class PaymentDetail(ListingBaseModel):
    amount: object = None


class BookingRecord(ListingBaseModel):
    book_id: str
    state: str
    index: str | None = Field(default=None, validation_alias=AliasChoices("book_idx", "idx"))
    name: str | None = None
    phone: str | None = None
    person: object = None
    start_datetime: str | None = None
    end_datetime: str | None = None
    room: str | None = None
    hole: str | None = None
    customer: str | None = None
    customer_detail: CustomerDetail | None = None
    book_type: str | None = None
    confirmed_by: str | None = None
    immediate_booked: bool = False
    amount: object = None
    is_paid: object = None
    revenue_detail: RevenueDetail | None = None
    payment: PaymentDetail | None = None

    _normalize_ids = field_validator("book_id", "index", "customer", "room", "hole", mode="before")(
        _id_to_str
    )

    @field_validator("immediate_booked", mode="before")
    @classmethod
    def _strict_true(cls, value: object) -> bool:
        return value is True

    @property
    def customer_updated_at(self) -> str | None:
        if self.customer_detail is None or not self.customer_detail.customerinfo_set:
            return None
        return self.customer_detail.customerinfo_set[0].upd_date


class ListingResponse(ListingBaseModel):
    """Listing envelope; records are validated one by one when translated."""

    results: list[object] = Field(default_factory=list[object])
