"""Tagged inbound event variants, one per captured stream."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .types import BookingDetails

if TYPE_CHECKING:
    from datetime import datetime

    from .types import Booking


class MalformedEventError(ValueError):
    """Raised when a captured payload cannot be decoded into an event."""

    def __init__(self, message: str, *, kind: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind


class RevenueEventKind(StrEnum):
    UPDATE = "update"
    CREATE = "create"


@dataclass(frozen=True, slots=True)
class ConfirmationEvent:
    booking_id: str
    state: str
    room: str | None = None
    details: BookingDetails = field(default_factory=BookingDetails)


@dataclass(frozen=True, slots=True)
class SnapshotEvent:
    bookings: tuple[Booking, ...]


@dataclass(frozen=True, slots=True)
class CustomerEvent:
    customer_id: str
    name: str | None = None
    phone: str | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class RevenueEvent:
    kind: RevenueEventKind
    index: str
    amount: int
    finished: bool = False
    revenue_id: str | None = None


@dataclass(frozen=True, slots=True)
class BookingCreationRequested:
    """Owner submitted a booking form; the external id is not known yet."""

    request_id: str
    index: str | None = None
    details: BookingDetails = field(default_factory=BookingDetails)


@dataclass(frozen=True, slots=True)
class BookingCreationCompleted:
    request_id: str
    booking_id: str
    index: str | None = None


type Event = (
    ConfirmationEvent
    | SnapshotEvent
    | CustomerEvent
    | RevenueEvent
    | BookingCreationRequested
    | BookingCreationCompleted
)


__all__ = [
    "BookingCreationCompleted",
    "BookingCreationRequested",
    "ConfirmationEvent",
    "CustomerEvent",
    "Event",
    "MalformedEventError",
    "RevenueEvent",
    "RevenueEventKind",
    "SnapshotEvent",
]
