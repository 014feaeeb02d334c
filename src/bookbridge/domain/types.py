"""Core booking and payment types shared by every event stream."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator

APP_BOOKING_ORIGIN: Final[str] = "U"
IMMEDIATE_CONFIRMATION: Final[str] = "IM"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class BookingState(StrEnum):
    PENDING = "pending"
    SUCCESS = "success"
    CANCELING = "canceling"
    CANCELED = "canceled"

    @property
    def is_canceled(self) -> bool:
        return self in (BookingState.CANCELING, BookingState.CANCELED)


class EventSource(StrEnum):
    """Stream that last touched a booking."""

    CONFIRMATION = "confirmation"
    LISTING = "listing"
    CUSTOMER = "customer"
    REVENUE = "revenue"
    OWNER = "owner"


class PaymentSource(StrEnum):
    SPECULATIVE = "speculative"
    REVENUE = "revenue"
    SNAPSHOT = "snapshot"


@dataclass(frozen=True, slots=True)
class PaymentInfo:
    amount: int = 0
    paid: bool = False


@dataclass(frozen=True, slots=True)
class BookingDetails:
    """Loosely populated booking fields as carried by form-style events."""

    name: str | None = None
    phone: str | None = None
    party_size: int | None = None
    amount: int | None = None
    start: datetime | None = None
    end: datetime | None = None
    room: str | None = None
    hole: str | None = None


@dataclass(frozen=True, slots=True)
class Booking:
    booking_id: str
    state: BookingState
    index: str | None = None
    name: str | None = None
    phone: str | None = None
    party_size: int | None = None
    start: datetime | None = None
    end: datetime | None = None
    room: str | None = None
    hole: str | None = None
    customer_id: str | None = None
    customer_updated_at: datetime | None = None
    origin: str | None = None
    confirmed_by: str | None = None
    immediate: bool = False
    payment: PaymentInfo = PaymentInfo()
    source: EventSource = EventSource.LISTING

    @property
    def is_immediate(self) -> bool:
        return self.immediate or self.confirmed_by == IMMEDIATE_CONFIRMATION

    @property
    def is_app_booking(self) -> bool:
        """Whether the booking came through the companion mobile channel."""

        return self.origin == APP_BOOKING_ORIGIN or self.is_immediate

    @property
    def last_customer_update(self) -> datetime:
        return self.customer_updated_at or _EPOCH


@dataclass(frozen=True, slots=True)
class BookingSnapshot:
    """Full listing of bookings as returned by the external system."""

    bookings: tuple[Booking, ...]
    fetched_at: datetime

    def __iter__(self) -> Iterator[Booking]:
        return iter(self.bookings)

    def __len__(self) -> int:
        return len(self.bookings)

    def find(self, booking_id: str) -> Booking | None:
        for booking in self.bookings:
            if booking.booking_id == booking_id:
                return booking
        return None

    def for_customer(
        self, customer_id: str, *, state: BookingState | None = None
    ) -> list[Booking]:
        return [
            booking
            for booking in self.bookings
            if booking.customer_id == customer_id and (state is None or booking.state is state)
        ]

    def with_payment(self, booking_id: str, payment: PaymentInfo) -> BookingSnapshot:
        """Return a copy whose entry for ``booking_id`` carries ``payment``."""

        bookings = tuple(
            replace(booking, payment=payment) if booking.booking_id == booking_id else booking
            for booking in self.bookings
        )
        return replace(self, bookings=bookings)


@dataclass(frozen=True, slots=True)
class BookingPayload:
    """Normalized booking sent to the downstream connector."""

    booking_id: str
    name: str
    phone: str
    party_size: int
    start: datetime | None
    end: datetime | None
    room: str
    hole: str | None
    amount: int
    paid: bool
    site: str
    immediate: bool = False


__all__ = [
    "APP_BOOKING_ORIGIN",
    "IMMEDIATE_CONFIRMATION",
    "Booking",
    "BookingDetails",
    "BookingPayload",
    "BookingSnapshot",
    "BookingState",
    "EventSource",
    "PaymentInfo",
    "PaymentSource",
]
