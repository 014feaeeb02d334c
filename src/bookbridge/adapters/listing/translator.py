"""Translate listing payloads into domain bookings."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from bookbridge.domain.reconciliation.payments import PaymentFields, coerce_amount, extract_payment
from bookbridge.domain.timestamps import to_utc
from bookbridge.domain.types import Booking, BookingSnapshot, BookingState, EventSource

from .schema import BookingRecord, ListingResponse

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import tzinfo

    from bookbridge.domain.types import PaymentInfo

log = getLogger(__name__)


def _parse_state(value: str) -> BookingState | None:
    try:
        return BookingState(value.strip().lower())
    except ValueError:
        return None


def payment_from_record(record: BookingRecord) -> PaymentInfo:
    revenue = record.revenue_detail
    return extract_payment(
        PaymentFields(
            amount=record.amount,
            is_paid=record.is_paid,
            has_revenue_detail=revenue is not None,
            revenue_amount=revenue.amount if revenue is not None else None,
            revenue_finished=revenue.finished if revenue is not None else None,
            has_payment=record.payment is not None,
            payment_amount=record.payment.amount if record.payment is not None else None,
        )
    )


def parse_booking(record: BookingRecord, *, local_tz: tzinfo | None = None) -> Booking | None:
    state = _parse_state(record.state)
    if state is None:
        log.warning("Skipping booking %s with unknown state %r", record.book_id, record.state)
        return None
    return Booking(
        booking_id=record.book_id,
        state=state,
        index=record.index,
        name=record.name,
        phone=record.phone,
        party_size=coerce_amount(record.person) or None,
        start=to_utc(record.start_datetime, local_tz=local_tz),
        end=to_utc(record.end_datetime, local_tz=local_tz),
        room=record.room,
        hole=record.hole,
        customer_id=record.customer,
        customer_updated_at=to_utc(record.customer_updated_at, local_tz=local_tz),
        origin=record.book_type,
        confirmed_by=record.confirmed_by,
        immediate=record.immediate_booked,
        payment=payment_from_record(record),
        source=EventSource.LISTING,
    )


def parse_record(raw: object, *, local_tz: tzinfo | None = None) -> Booking | None:
    try:
        record = BookingRecord.model_validate(raw)
    except ValidationError as exc:
        log.warning("Skipping malformed listing record (%s errors)", exc.error_count())
        log.debug("Rejected listing record %r: %s", raw, exc)
        return None
    return parse_booking(record, local_tz=local_tz)


def parse_bookings(
    records: Iterable[object], *, local_tz: tzinfo | None = None
) -> tuple[Booking, ...]:
    """Translate raw listing records, skipping the ones that cannot be used."""

    bookings: list[Booking] = []
    for raw in records:
        booking = parse_record(raw, local_tz=local_tz)
        if booking is not None:
            bookings.append(booking)
    return tuple(bookings)


def parse_listing(
    payload: object,
    *,
    fetched_at: datetime | None = None,
    local_tz: tzinfo | None = None,
) -> BookingSnapshot:
    """Validate a raw listing body.

    Raises ``pydantic.ValidationError`` when the envelope is unusable; single bad
    records are logged and left out.
    """

    response = ListingResponse.model_validate(payload)
    return BookingSnapshot(
        bookings=parse_bookings(response.results, local_tz=local_tz),
        fetched_at=fetched_at or datetime.now(UTC),
    )


__all__ = [
    "parse_booking",
    "parse_bookings",
    "parse_listing",
    "parse_record",
    "payment_from_record",
]
