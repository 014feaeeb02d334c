"""Listing stream: sweep a full snapshot for cancellations and app bookings."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from bookbridge.domain.types import BookingSnapshot, BookingState

from .customers import match_customer_update, process_customer_bookings
from .forwarding import forward_cancel, forward_create, forward_update
from .payments import payload_from_booking

if TYPE_CHECKING:
    from bookbridge.domain.events import SnapshotEvent

    from .context import ReconciliationContext

log = getLogger(__name__)


@dataclass(slots=True)
class SweepResult:
    canceled: list[str] = field(default_factory=list[str])
    created: list[str] = field(default_factory=list[str])
    updated: list[str] = field(default_factory=list[str])
    attempted: set[str] = field(default_factory=set[str])


async def handle_snapshot(ctx: ReconciliationContext, event: SnapshotEvent) -> SweepResult:
    snapshot = BookingSnapshot(bookings=event.bookings, fetched_at=ctx.now())
    log.info("Received listing with %s bookings", len(snapshot))
    ctx.store_snapshot(snapshot)

    result = SweepResult()
    # cancellations first so a booking eligible for both is only ever canceled
    await _sweep_cancellations(ctx, snapshot, result)
    await _apply_pending_payments(ctx, snapshot, result)
    await _sweep_app_bookings(ctx, snapshot, result)

    for customer_id in sorted(ctx.pending_customers):
        await process_customer_bookings(ctx, customer_id, snapshot)

    return result


async def _sweep_cancellations(
    ctx: ReconciliationContext,
    snapshot: BookingSnapshot,
    result: SweepResult,
) -> None:
    candidates = [
        booking
        for booking in snapshot
        if booking.state.is_canceled and not ctx.dedup.is_forwarded(booking.booking_id)
    ]
    if not candidates:
        log.info("No canceling or canceled bookings in listing")
        return

    log.info("Found %s canceling or canceled bookings to process", len(candidates))
    for booking in candidates:
        result.attempted.add(booking.booking_id)
        if await forward_cancel(ctx, booking.booking_id):
            result.canceled.append(booking.booking_id)
            log.info("Processed %s booking %s", booking.state, booking.booking_id)


async def _apply_pending_payments(
    ctx: ReconciliationContext,
    snapshot: BookingSnapshot,
    result: SweepResult,
) -> None:
    """Hand parked revenue data to bookings whose index the listing just revealed."""

    for pending in ctx.pending.unapplied_payments(within=ctx.config.pending_validity):
        booking_id = ctx.identities.resolve_booking_by_revenue_or_index(
            pending.revenue_id, pending.index
        )
        if booking_id is None:
            continue
        record = ctx.payments.apply_revenue(booking_id, pending.amount, pending.paid)
        if pending.revenue_id is not None:
            ctx.identities.link_revenue_to_booking(pending.revenue_id, booking_id)
        ctx.pending.consume_payment(pending.index, pending.revenue_id)

        booking = snapshot.find(booking_id)
        if booking is None or not ctx.dedup.was_created(booking_id):
            continue
        payload = payload_from_booking(booking, record.info, config=ctx.config)
        if await forward_update(ctx, payload):
            result.updated.append(booking_id)


async def _sweep_app_bookings(
    ctx: ReconciliationContext,
    snapshot: BookingSnapshot,
    result: SweepResult,
) -> None:
    log.info("Checking listing for app bookings")
    for booking in snapshot:
        booking_id = booking.booking_id
        if not booking.customer_id or not booking.is_app_booking:
            continue
        if booking_id in result.attempted or ctx.dedup.is_forwarded(booking_id):
            continue

        update = ctx.customer_updates.get(booking.customer_id)
        matched = match_customer_update(
            booking,
            update,
            now=ctx.now(),
            window=ctx.config.customer_match_window,
        )
        if matched:
            log.info("Booking %s matches a recent customer update", booking_id)

        payment = booking.payment
        if ctx.snapshots.patch_payment(booking_id, payment):
            log.debug("Corrected cached payment for %s", booking_id)

        if booking.state is BookingState.SUCCESS or booking.is_immediate:
            record = ctx.payments.apply_snapshot(booking_id, payment)
            payload = payload_from_booking(
                booking,
                record.info,
                config=ctx.config,
                immediate=booking.is_immediate,
            )
            result.attempted.add(booking_id)
            if await forward_create(ctx, payload):
                result.created.append(booking_id)
                log.info("Processed app booking create for %s", booking_id)
