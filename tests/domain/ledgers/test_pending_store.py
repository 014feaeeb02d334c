from __future__ import annotations

from datetime import timedelta

from bookbridge.domain.ledgers import (
    DedupTracker,
    PendingBookingCreate,
    PendingKey,
    PendingKind,
    PendingPayment,
    PendingUpdateStore,
)
from bookbridge.domain.scheduling import ManualScheduler
from bookbridge.domain.types import PaymentInfo

VALIDITY = timedelta(seconds=10)


def _payment(scheduler: ManualScheduler, index: str = "42", **overrides: object) -> PendingPayment:
    values: dict[str, object] = {
        "index": index,
        "amount": 30_000,
        "paid": True,
        "received_at": scheduler.now(),
    }
    values.update(overrides)
    return PendingPayment(**values)  # type: ignore[arg-type]


def test_pending_key_formats_kind_and_reference() -> None:
    assert str(PendingKey(PendingKind.PAYMENT, "42")) == "payment_42"


def test_payment_for_index_respects_validity(scheduler: ManualScheduler) -> None:
    store = PendingUpdateStore(clock=scheduler)
    store.put(PendingKey(PendingKind.PAYMENT, "42"), _payment(scheduler))

    scheduler.current += timedelta(seconds=9)
    assert store.payment_for_index("42", within=VALIDITY) is not None

    scheduler.current += timedelta(seconds=1)
    assert store.payment_for_index("42", within=VALIDITY) is None


def test_attach_payment_to_open_creation(scheduler: ManualScheduler) -> None:
    store = PendingUpdateStore(clock=scheduler)
    key = PendingKey(PendingKind.BOOKING_CREATE, "req-1")
    store.put(key, PendingBookingCreate(request_id="req-1", received_at=scheduler.now()))

    assert [found for found, _ in store.open_booking_creations(within=VALIDITY)] == [key]
    updated = store.attach_payment(key, PaymentInfo(amount=5000, paid=True), index="42")

    assert updated is not None
    assert updated.payment == PaymentInfo(amount=5000, paid=True)
    assert updated.index == "42"
    assert store.get(key) == updated


def test_consume_payment_removes_both_keys(scheduler: ManualScheduler) -> None:
    store = PendingUpdateStore(clock=scheduler)
    record = _payment(scheduler, revenue_id="R1")
    store.put(PendingKey(PendingKind.PAYMENT, "42"), record)
    store.put(PendingKey(PendingKind.REVENUE, "R1"), record)

    store.consume_payment("42", "R1")

    assert len(store) == 0


def test_expire_drops_records_past_validity(scheduler: ManualScheduler) -> None:
    store = PendingUpdateStore(clock=scheduler)
    store.put(PendingKey(PendingKind.PAYMENT, "old"), _payment(scheduler, "old"))
    scheduler.current += timedelta(seconds=8)
    store.put(PendingKey(PendingKind.PAYMENT, "new"), _payment(scheduler, "new"))
    scheduler.current += timedelta(seconds=2)

    assert store.expire(VALIDITY) == 1
    assert PendingKey(PendingKind.PAYMENT, "new") in store
    assert store.unapplied_payments(within=VALIDITY)[0].index == "new"


def test_dedup_prune_clears_above_threshold() -> None:
    dedup = DedupTracker()
    dedup.mark_created("B1")
    dedup.mark_canceled("B2")

    assert dedup.prune(2) is False
    dedup.mark_created("B3")
    assert dedup.prune(2) is True
    assert len(dedup) == 0
    assert not dedup.is_forwarded("B1")
