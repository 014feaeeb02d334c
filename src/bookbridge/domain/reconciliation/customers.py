"""Deferred correlation of customer-identity events with listed bookings."""

from __future__ import annotations

from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from bookbridge.domain.types import BookingState

from .context import CustomerUpdate
from .forwarding import forward_create
from .payments import payload_from_booking

if TYPE_CHECKING:
    from datetime import datetime, timedelta

    from bookbridge.domain.events import CustomerEvent
    from bookbridge.domain.types import Booking, BookingSnapshot

    from .context import ReconciliationContext

log = getLogger(__name__)


def match_customer_update(
    booking: Booking,
    update: CustomerUpdate | None,
    *,
    now: datetime,
    window: timedelta,
) -> bool:
    """Whether a customer edit plausibly produced this booking change.

    Bookings carrying their own customer update time are compared against the
    edit's time; bookings without one fall back to the edit being recent.
    """

    if update is None:
        return False
    if booking.customer_updated_at is not None:
        return abs(booking.customer_updated_at - update.updated_at) < window
    return now - update.observed_at < window


def _store_customer_update(ctx: ReconciliationContext, event: CustomerEvent) -> None:
    now = ctx.now()
    log.info(
        "Detected customer access: customer_id=%s, updated_at=%s",
        event.customer_id,
        event.updated_at,
    )
    if event.updated_at is None:
        return
    if event.updated_at <= now - ctx.config.customer_update_freshness:
        log.debug("Customer %s update is stale, not storing", event.customer_id)
        return
    ctx.customer_updates[event.customer_id] = CustomerUpdate(
        customer_id=event.customer_id,
        name=event.name or "",
        phone=event.phone or "",
        updated_at=event.updated_at,
        observed_at=now,
    )


async def handle_customer(ctx: ReconciliationContext, event: CustomerEvent) -> bool:
    """Record the edit and queue one deferred run for this customer.

    Returns ``False`` when the customer is already queued or cooling down.
    """

    customer_id = event.customer_id
    _store_customer_update(ctx, event)

    if customer_id in ctx.pending_customers or customer_id in ctx.cooling_customers:
        log.info("Customer %s already queued, skipping", customer_id)
        return False

    ctx.pending_customers.add(customer_id)
    ctx.cooling_customers.add(customer_id)
    ctx.scheduler.call_later(
        ctx.config.correlation_delay,
        partial(_run_deferred, ctx, customer_id),
        name=f"customer:{customer_id}",
    )
    log.info("Queued customer %s for processing after the next listing", customer_id)
    return True


async def _run_deferred(ctx: ReconciliationContext, customer_id: str) -> None:
    try:
        snapshot = ctx.snapshots.get()
        if snapshot is not None and ctx.snapshots.is_valid(ctx.config.snapshot_ttl):
            await process_customer_bookings(ctx, customer_id, snapshot)
        else:
            log.info("No fresh listing yet for customer %s", customer_id)
    except Exception:  # noqa: BLE001
        log.exception("Failed to process bookings for customer %s", customer_id)
    finally:
        ctx.pending_customers.discard(customer_id)
        ctx.scheduler.call_later(
            ctx.config.customer_cooldown,
            partial(_release_cooldown, ctx, customer_id),
            name=f"customer-cooldown:{customer_id}",
        )


async def _release_cooldown(ctx: ReconciliationContext, customer_id: str) -> None:
    ctx.cooling_customers.discard(customer_id)
    log.debug("Customer %s can be queued again", customer_id)


async def process_customer_bookings(
    ctx: ReconciliationContext,
    customer_id: str,
    snapshot: BookingSnapshot,
) -> int:
    """Forward the customer's confirmed bookings, most recently edited first."""

    bookings = [
        booking
        for booking in snapshot.for_customer(customer_id, state=BookingState.SUCCESS)
        if not ctx.dedup.is_forwarded(booking.booking_id)
    ]
    if not bookings:
        log.info("No new confirmed bookings for customer %s", customer_id)
        return 0

    bookings.sort(key=lambda booking: booking.last_customer_update, reverse=True)
    log.info("Found %s confirmed bookings for customer %s", len(bookings), customer_id)

    forwarded = 0
    for booking in bookings:
        record = ctx.payments.apply_snapshot(booking.booking_id, booking.payment)
        payload = payload_from_booking(
            booking,
            record.info,
            config=ctx.config,
            immediate=booking.immediate,
        )
        if await forward_create(ctx, payload):
            forwarded += 1
    return forwarded
