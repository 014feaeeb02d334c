"""Owner-created bookings: form submission followed by the server's response."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from bookbridge.domain.ledgers import PendingBookingCreate, PendingKey, PendingKind
from bookbridge.domain.types import PaymentInfo

from .forwarding import forward_create
from .payments import payload_from_details

if TYPE_CHECKING:
    from bookbridge.domain.events import BookingCreationCompleted, BookingCreationRequested

    from .context import ReconciliationContext

log = getLogger(__name__)


async def handle_creation_requested(
    ctx: ReconciliationContext, event: BookingCreationRequested
) -> None:
    key = PendingKey(PendingKind.BOOKING_CREATE, event.request_id)
    ctx.pending.put(
        key,
        PendingBookingCreate(
            request_id=event.request_id,
            received_at=ctx.now(),
            details=event.details,
            index=event.index,
        ),
    )
    log.info("Tracking pending booking creation %s", key)


def _resolve_payment(
    ctx: ReconciliationContext,
    record: PendingBookingCreate,
    booking_id: str,
    index: str | None,
) -> PaymentInfo:
    parked = (
        ctx.pending.payment_for_index(index, within=ctx.config.pending_validity)
        if index is not None
        else None
    )
    if parked is not None:
        if parked.revenue_id is not None:
            ctx.identities.link_revenue_to_booking(parked.revenue_id, booking_id)
        ctx.pending.consume_payment(parked.index, parked.revenue_id)

    if record.payment is not None:
        log.info("Using payment attached to pending creation for %s", booking_id)
        payment = record.payment
    elif parked is not None:
        log.info("Using parked revenue payment for %s (index %s)", booking_id, index)
        payment = parked.info
    else:
        amount = record.details.amount or 0
        ctx.payments.seed_speculative(booking_id, amount)
        current = ctx.payments.get(booking_id)
        return current.info if current is not None else PaymentInfo(amount=amount)

    return ctx.payments.apply_revenue(booking_id, payment.amount, payment.paid).info


async def handle_creation_completed(
    ctx: ReconciliationContext, event: BookingCreationCompleted
) -> bool:
    key = PendingKey(PendingKind.BOOKING_CREATE, event.request_id)
    record = ctx.pending.pop(key)
    if not isinstance(record, PendingBookingCreate):
        log.warning("No pending creation for request %s, waiting for listing", event.request_id)
        return False

    booking_id = event.booking_id
    if (
        record.payment is not None
        and event.index is not None
        and record.index is not None
        and record.index != event.index
    ):
        log.warning(
            "Payment attached to request %s was for index %s, booking %s has index %s; "
            "discarding it",
            event.request_id,
            record.index,
            booking_id,
            event.index,
        )
        record = replace(record, payment=None, payment_attached_at=None)

    index = event.index or record.index
    if index is not None:
        ctx.identities.link_index_to_booking(index, booking_id)

    payment = _resolve_payment(ctx, record, booking_id, index)
    payload = payload_from_details(booking_id, record.details, payment, config=ctx.config)
    return await forward_create(ctx, payload)
