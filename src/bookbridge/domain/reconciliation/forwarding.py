"""Downstream calls guarded by the dedup tracker."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from bookbridge.domain.ports import AlreadyCanceledError

if TYPE_CHECKING:
    from bookbridge.domain.types import BookingPayload

    from .context import ReconciliationContext

log = getLogger(__name__)


async def forward_create(ctx: ReconciliationContext, payload: BookingPayload) -> bool:
    """Send a create unless the booking was already forwarded.

    Returns ``True`` only when the downstream call succeeded. Failures are
    logged and abandoned so a later event for the same booking can retry.
    """

    booking_id = payload.booking_id
    if ctx.dedup.is_forwarded(booking_id):
        log.info("Skipping create for already forwarded booking %s", booking_id)
        return False
    if booking_id in ctx.in_flight:
        log.info("Skipping create for %s, another call is in flight", booking_id)
        return False

    log.info(
        "Forwarding create for %s: amount=%s, paid=%s",
        booking_id,
        payload.amount,
        payload.paid,
    )
    log.debug("Create payload: %s", payload)
    ctx.in_flight.add(booking_id)
    try:
        await ctx.connector.create(payload)
    except Exception:  # noqa: BLE001
        log.exception("Failed to create booking %s downstream", booking_id)
        return False
    finally:
        ctx.in_flight.discard(booking_id)
    ctx.dedup.mark_created(booking_id)
    return True


async def forward_cancel(ctx: ReconciliationContext, booking_id: str) -> bool:
    if ctx.dedup.is_forwarded(booking_id):
        log.info("Skipping cancel for already forwarded booking %s", booking_id)
        return False
    if booking_id in ctx.in_flight:
        log.info("Skipping cancel for %s, another call is in flight", booking_id)
        return False

    log.info("Forwarding cancel for %s", booking_id)
    ctx.in_flight.add(booking_id)
    try:
        await ctx.connector.cancel(booking_id, ctx.config.canceled_by)
    except AlreadyCanceledError:
        log.info("Booking %s was already canceled downstream", booking_id)
    except Exception:  # noqa: BLE001
        log.exception("Failed to cancel booking %s downstream", booking_id)
        return False
    finally:
        ctx.in_flight.discard(booking_id)
    ctx.dedup.mark_canceled(booking_id)
    return True


async def forward_update(ctx: ReconciliationContext, payload: BookingPayload) -> bool:
    """Push corrected values for a booking that was already created downstream."""

    booking_id = payload.booking_id
    if not ctx.dedup.was_created(booking_id):
        return False
    log.info(
        "Forwarding update for %s: amount=%s, paid=%s",
        booking_id,
        payload.amount,
        payload.paid,
    )
    try:
        await ctx.connector.update(payload)
    except Exception:  # noqa: BLE001
        log.exception("Failed to update booking %s downstream", booking_id)
        return False
    return True
