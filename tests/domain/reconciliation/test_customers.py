from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from bookbridge.domain.events import CustomerEvent
from bookbridge.domain.reconciliation import CustomerUpdate, ReconciliationContext
from bookbridge.domain.reconciliation.customers import (
    handle_customer,
    match_customer_update,
    process_customer_bookings,
)
from bookbridge.domain.scheduling import ManualScheduler
from bookbridge.domain.types import BookingState
from tests.helpers.reconciliation import FakeConnector, make_booking, make_snapshot

WINDOW = timedelta(seconds=60)


@pytest.mark.parametrize(("seconds", "expected"), [(59, True), (61, False)])
def test_match_window_uses_booking_update_time(
    scheduler: ManualScheduler, seconds: int, expected: bool
) -> None:
    now = scheduler.now()
    update = CustomerUpdate("C1", "Kim", "010", updated_at=now, observed_at=now)
    booking = make_booking(customer_id="C1", customer_updated_at=now + timedelta(seconds=seconds))

    assert match_customer_update(booking, update, now=now, window=WINDOW) is expected


def test_match_falls_back_to_recent_observation(scheduler: ManualScheduler) -> None:
    now = scheduler.now()
    update = CustomerUpdate("C1", "Kim", "010", updated_at=now, observed_at=now)
    booking = make_booking(customer_id="C1")

    assert match_customer_update(booking, update, now=now + timedelta(seconds=30), window=WINDOW)
    assert not match_customer_update(
        booking, update, now=now + timedelta(seconds=61), window=WINDOW
    )
    assert not match_customer_update(booking, None, now=now, window=WINDOW)


def test_customer_event_stores_only_fresh_updates(
    context: ReconciliationContext, scheduler: ManualScheduler
) -> None:
    now = scheduler.now()
    stale = CustomerEvent(customer_id="C1", updated_at=now - timedelta(seconds=31))
    fresh = CustomerEvent(customer_id="C2", updated_at=now - timedelta(seconds=5))

    async def scenario() -> None:
        await handle_customer(context, stale)
        await handle_customer(context, fresh)

    asyncio.run(scenario())

    assert "C1" not in context.customer_updates
    assert context.customer_updates["C2"].observed_at == now


def test_customer_processing_is_deferred_and_deduplicated(
    context: ReconciliationContext,
    connector: FakeConnector,
    scheduler: ManualScheduler,
) -> None:
    context.snapshots.set(make_snapshot(make_booking("B1", customer_id="C1")))
    event = CustomerEvent(customer_id="C1", updated_at=scheduler.now())

    async def scenario() -> None:
        assert await handle_customer(context, event) is True
        assert await handle_customer(context, event) is False
        await scheduler.advance(timedelta(seconds=9))
        assert connector.created == []
        await scheduler.advance(timedelta(seconds=1))

    asyncio.run(scenario())

    assert connector.created_ids == ["B1"]
    assert "C1" not in context.pending_customers
    assert "C1" in context.cooling_customers


def test_customer_cooldown_expires(
    context: ReconciliationContext, scheduler: ManualScheduler
) -> None:
    event = CustomerEvent(customer_id="C1", updated_at=scheduler.now())

    async def scenario() -> None:
        await handle_customer(context, event)
        await scheduler.advance(timedelta(seconds=10))
        assert await handle_customer(context, event) is False
        await scheduler.advance(timedelta(seconds=60))
        assert await handle_customer(context, event) is True

    asyncio.run(scenario())


def test_deferred_run_waits_for_fresh_listing(
    context: ReconciliationContext,
    connector: FakeConnector,
    scheduler: ManualScheduler,
) -> None:
    context.snapshots.set(make_snapshot(make_booking("B1", customer_id="C1")))

    async def scenario() -> None:
        await scheduler.advance(timedelta(seconds=55))
        await handle_customer(context, CustomerEvent(customer_id="C1"))
        await scheduler.advance(timedelta(seconds=10))

    asyncio.run(scenario())

    assert connector.created == []


def test_process_customer_bookings_orders_by_latest_update(
    context: ReconciliationContext,
    connector: FakeConnector,
    scheduler: ManualScheduler,
) -> None:
    now = scheduler.now()
    snapshot = make_snapshot(
        make_booking("old", customer_id="C1", customer_updated_at=now - timedelta(hours=1)),
        make_booking("none", customer_id="C1"),
        make_booking("new", customer_id="C1", customer_updated_at=now),
        make_booking("canceled", customer_id="C1", state=BookingState.CANCELED),
        make_booking("other", customer_id="C2"),
    )
    context.dedup.mark_created("done")

    forwarded = asyncio.run(process_customer_bookings(context, "C1", snapshot))

    assert forwarded == 3
    assert connector.created_ids == ["new", "old", "none"]
