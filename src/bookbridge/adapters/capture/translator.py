"""Translate captured field maps into domain events."""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from bookbridge.adapters.listing.translator import parse_bookings
from bookbridge.domain.events import (
    BookingCreationCompleted,
    BookingCreationRequested,
    ConfirmationEvent,
    CustomerEvent,
    MalformedEventError,
    RevenueEvent,
    RevenueEventKind,
    SnapshotEvent,
)
from bookbridge.domain.reconciliation.payments import coerce_amount
from bookbridge.domain.timestamps import to_utc
from bookbridge.domain.types import BookingDetails

from .schema import (
    BookingCreateRequestPayload,
    BookingCreateResponsePayload,
    ConfirmationPayload,
    CustomerPayload,
    ListingPayload,
    RevenuePayload,
)

if TYPE_CHECKING:
    from datetime import tzinfo

    from bookbridge.domain.events import Event

log = getLogger(__name__)


def _positive_or_none(value: object) -> int | None:
    parsed = coerce_amount(value)
    return parsed if parsed > 0 else None


def _confirmation(payload: ConfirmationPayload, local_tz: tzinfo | None) -> ConfirmationEvent:
    info = payload.booking_info
    details = BookingDetails(
        name=info.name or payload.name,
        phone=info.phone or payload.phone,
        party_size=_positive_or_none(info.person or payload.person),
        amount=coerce_amount(info.amount),
        start=to_utc(info.start_datetime, local_tz=local_tz),
        end=to_utc(info.end_datetime, local_tz=local_tz),
        room=payload.room or info.room,
        hole=info.hole,
    )
    return ConfirmationEvent(
        booking_id=payload.book_id,
        state=payload.state,
        room=payload.room or info.room,
        details=details,
    )


def _listing(payload: ListingPayload, local_tz: tzinfo | None) -> SnapshotEvent:
    return SnapshotEvent(bookings=parse_bookings(payload.results, local_tz=local_tz))


def _customer(payload: CustomerPayload, local_tz: tzinfo | None) -> CustomerEvent:
    return CustomerEvent(
        customer_id=payload.id,
        name=payload.name,
        phone=payload.phone,
        updated_at=to_utc(payload.updated_at, local_tz=local_tz),
    )


def _revenue(payload: RevenuePayload, kind: RevenueEventKind) -> RevenueEvent:
    if kind is RevenueEventKind.UPDATE and payload.revenue_id is None:
        raise MalformedEventError("Revenue update without revenue id", kind="revenue_update")
    return RevenueEvent(
        kind=kind,
        index=payload.book_idx,
        amount=coerce_amount(payload.amount),
        finished=payload.is_finished,
        revenue_id=payload.revenue_id,
    )


def _creation_request(
    payload: BookingCreateRequestPayload, local_tz: tzinfo | None
) -> BookingCreationRequested:
    return BookingCreationRequested(
        request_id=payload.request_id,
        index=payload.book_idx,
        details=BookingDetails(
            name=payload.name,
            phone=payload.phone,
            party_size=_positive_or_none(payload.person),
            amount=coerce_amount(payload.amount),
            start=to_utc(payload.start_datetime, local_tz=local_tz),
            end=to_utc(payload.end_datetime, local_tz=local_tz),
            room=payload.room,
            hole=payload.hole,
        ),
    )


_PAYLOAD_MODELS: dict[str, type[BaseModel]] = {
    "confirmation": ConfirmationPayload,
    "listing": ListingPayload,
    "customer": CustomerPayload,
    "revenue_update": RevenuePayload,
    "revenue_create": RevenuePayload,
    "booking_create_request": BookingCreateRequestPayload,
    "booking_create_response": BookingCreateResponsePayload,
}

EVENT_KINDS: frozenset[str] = frozenset(_PAYLOAD_MODELS)


def decode_event(kind: str, data: object, *, local_tz: tzinfo | None = None) -> Event:
    """Validate one captured field map and translate it into a domain event.

    Raises :class:`MalformedEventError` for unknown kinds and payloads that are
    missing required fields.
    """

    model = _PAYLOAD_MODELS.get(kind)
    if model is None:
        raise MalformedEventError(f"Unknown event kind: {kind!r}", kind=kind)
    if not isinstance(data, Mapping):
        raise MalformedEventError(f"Event data for {kind} is not an object", kind=kind)
    try:
        payload = model.model_validate(data)
    except ValidationError as exc:
        log.debug("Validation failed for %s: %s", kind, exc)
        raise MalformedEventError(
            f"Malformed {kind} event ({exc.error_count()} errors)", kind=kind
        ) from exc

    match payload:
        case ConfirmationPayload():
            return _confirmation(payload, local_tz)
        case ListingPayload():
            return _listing(payload, local_tz)
        case CustomerPayload():
            return _customer(payload, local_tz)
        case RevenuePayload():
            revenue_kind = (
                RevenueEventKind.UPDATE if kind == "revenue_update" else RevenueEventKind.CREATE
            )
            return _revenue(payload, revenue_kind)
        case BookingCreateRequestPayload():
            return _creation_request(payload, local_tz)
        case BookingCreateResponsePayload():
            return BookingCreationCompleted(
                request_id=payload.request_id,
                booking_id=payload.book_id,
                index=payload.book_idx,
            )
        case _:
            raise MalformedEventError(f"No translation for {kind}", kind=kind)


__all__ = ["EVENT_KINDS", "decode_event"]
