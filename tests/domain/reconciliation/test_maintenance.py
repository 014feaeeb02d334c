from __future__ import annotations

from datetime import timedelta

from bookbridge.domain.ledgers import PendingKey, PendingKind, PendingPayment
from bookbridge.domain.reconciliation import CustomerUpdate, ReconciliationContext, run_maintenance
from bookbridge.domain.scheduling import ManualScheduler


def test_maintenance_prunes_stale_state(
    context: ReconciliationContext, scheduler: ManualScheduler
) -> None:
    start = scheduler.now()
    context.customer_updates["old"] = CustomerUpdate("old", "", "", start, observed_at=start)
    context.pending.put(
        PendingKey(PendingKind.PAYMENT, "42"),
        PendingPayment(index="42", amount=1, paid=False, received_at=start),
    )
    context.identities.link_index_to_booking("42", "B1")
    scheduler.current += timedelta(minutes=5, seconds=1)
    now = scheduler.now()
    context.customer_updates["new"] = CustomerUpdate("new", "", "", now, observed_at=now)

    result = run_maintenance(context)

    assert result.customer_updates_dropped == 1
    assert result.pending_expired == 1
    assert result.dedup_cleared is False
    assert list(context.customer_updates) == ["new"]
    assert context.identities.resolve_booking_by_index("42") == "B1"


def test_maintenance_clears_dedup_above_threshold(
    scheduler: ManualScheduler, context: ReconciliationContext
) -> None:
    for number in range(context.config.dedup_threshold + 1):
        context.dedup.mark_created(f"B{number}")

    assert run_maintenance(context).dedup_cleared is True
    assert len(context.dedup) == 0
