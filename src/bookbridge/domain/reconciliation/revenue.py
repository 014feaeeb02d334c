"""Revenue stream: payment amounts keyed by listing index or revenue id."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from bookbridge.domain.ledgers import PendingKey, PendingKind, PendingPayment
from bookbridge.domain.types import PaymentInfo

from .forwarding import forward_update
from .payments import payload_from_booking

if TYPE_CHECKING:
    from bookbridge.domain.events import RevenueEvent

    from .context import ReconciliationContext

log = getLogger(__name__)


async def handle_revenue(ctx: ReconciliationContext, event: RevenueEvent) -> str | None:
    """Apply a payment event and park it for bookings that are not known yet.

    Returns the booking id the payment was applied to, if any.
    """

    log.info(
        "Revenue %s detected: index=%s, revenue_id=%s, amount=%s, finished=%s",
        event.kind,
        event.index,
        event.revenue_id,
        event.amount,
        event.finished,
    )
    booking_id = ctx.identities.resolve_booking_by_revenue_or_index(event.revenue_id, event.index)

    if booking_id is not None:
        record = ctx.payments.apply_revenue(booking_id, event.amount, event.finished)
        if event.revenue_id is not None:
            ctx.identities.link_revenue_to_booking(event.revenue_id, booking_id)
        booking = ctx.snapshots.find(booking_id)
        if booking is not None and ctx.dedup.was_created(booking_id):
            payload = payload_from_booking(booking, record.info, config=ctx.config)
            await forward_update(ctx, payload)
    else:
        open_creations = ctx.pending.open_booking_creations(within=ctx.config.pending_validity)
        if open_creations:
            log.info("Attaching payment to %s pending booking creations", len(open_creations))
        payment = PaymentInfo(amount=event.amount, paid=event.finished)
        for key, _record in open_creations:
            ctx.pending.attach_payment(key, payment, index=event.index)
        log.debug("Parking payment for index %s until its booking is known", event.index)

    pending = PendingPayment(
        index=event.index,
        amount=event.amount,
        paid=event.finished,
        received_at=ctx.now(),
        revenue_id=event.revenue_id,
        booking_id=booking_id,
        applied=booking_id is not None,
    )
    if event.revenue_id is not None:
        ctx.pending.put(PendingKey(PendingKind.REVENUE, event.revenue_id), pending)
    ctx.pending.put(PendingKey(PendingKind.PAYMENT, event.index), pending)
    return booking_id
