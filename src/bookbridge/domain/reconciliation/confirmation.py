"""Confirmation stream: a booking form reached the success state."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from bookbridge.domain.types import BookingState, PaymentInfo

from .forwarding import forward_create
from .payments import payload_from_details

if TYPE_CHECKING:
    from bookbridge.domain.events import ConfirmationEvent

    from .context import ReconciliationContext

log = getLogger(__name__)


async def handle_confirmation(ctx: ReconciliationContext, event: ConfirmationEvent) -> bool:
    """Forward a confirmed booking with the best payment values known now.

    The form's amount only seeds the payment ledger; a cached or freshly
    fetched listing entry for the same booking overrides it.
    """

    if event.state != BookingState.SUCCESS:
        log.debug("Ignoring confirmation for %s in state %s", event.booking_id, event.state)
        return False

    booking_id = event.booking_id
    details = event.details
    log.info("Detected booking confirmation: booking_id=%s, room=%s", booking_id, event.room)

    if ctx.dedup.is_forwarded(booking_id):
        log.info("Booking %s already forwarded, ignoring confirmation", booking_id)
        return False

    speculative_amount = details.amount or 0
    if speculative_amount > 0:
        ctx.payments.seed_speculative(booking_id, speculative_amount)

    await ctx.refresh_snapshot()

    listed = ctx.snapshots.find(booking_id)
    if listed is not None:
        record = ctx.payments.apply_snapshot(booking_id, listed.payment)
        log.info(
            "Using listing payment for %s: amount=%s, paid=%s",
            booking_id,
            record.amount,
            record.paid,
        )
    else:
        log.warning("No listing entry for %s, using form payment values", booking_id)

    record = ctx.payments.get(booking_id)
    if record is not None:
        payment = PaymentInfo(amount=record.amount or speculative_amount, paid=record.paid)
    else:
        payment = PaymentInfo(amount=speculative_amount, paid=False)

    payload = payload_from_details(
        booking_id,
        details,
        payment,
        config=ctx.config,
        room=event.room,
    )
    return await forward_create(ctx, payload)
