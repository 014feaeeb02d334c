"""Periodic pruning of state that would otherwise grow for the process lifetime."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import ReconciliationContext

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MaintenanceResult:
    customer_updates_dropped: int
    pending_expired: int
    dedup_cleared: bool


def run_maintenance(ctx: ReconciliationContext) -> MaintenanceResult:
    now = ctx.now()
    retention = ctx.config.customer_update_retention
    stale_customers = [
        customer_id
        for customer_id, update in ctx.customer_updates.items()
        if now - update.observed_at > retention
    ]
    for customer_id in stale_customers:
        del ctx.customer_updates[customer_id]

    expired = ctx.pending.expire(ctx.config.pending_validity)
    cleared = ctx.dedup.prune(ctx.config.dedup_threshold)

    result = MaintenanceResult(
        customer_updates_dropped=len(stale_customers),
        pending_expired=expired,
        dedup_cleared=cleared,
    )
    log.debug("Maintenance finished: %s", result)
    return result
