"""Entry point that routes decoded events to the stream handlers."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from bookbridge.domain.events import (
    BookingCreationCompleted,
    BookingCreationRequested,
    ConfirmationEvent,
    CustomerEvent,
    RevenueEvent,
    SnapshotEvent,
)

from .confirmation import handle_confirmation
from .context import ReconciliationContext
from .creation import handle_creation_completed, handle_creation_requested
from .customers import handle_customer
from .maintenance import run_maintenance
from .revenue import handle_revenue
from .snapshot import handle_snapshot

if TYPE_CHECKING:
    from bookbridge.config.reconciliation import ReconciliationConfig
    from bookbridge.domain.events import Event
    from bookbridge.domain.ports import BookingConnector, SnapshotFetcher
    from bookbridge.domain.scheduling import ScheduledTask, Scheduler

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationEngine:
    """Decide, for every incoming event, whether to create, cancel, update or defer.

    All handlers share one :class:`ReconciliationContext` and run on a single
    event loop. ``handle`` never raises: a failing event is logged and the
    stream moves on.
    """

    context: ReconciliationContext
    _maintenance: ScheduledTask | None = None

    @classmethod
    def build(
        cls,
        *,
        connector: BookingConnector,
        fetcher: SnapshotFetcher,
        scheduler: Scheduler,
        config: ReconciliationConfig | None = None,
    ) -> ReconciliationEngine:
        context = ReconciliationContext.create(
            connector=connector,
            fetcher=fetcher,
            scheduler=scheduler,
            config=config,
        )
        return cls(context=context)

    async def handle(self, event: Event) -> None:
        ctx = self.context
        try:
            match event:
                case ConfirmationEvent():
                    await handle_confirmation(ctx, event)
                case SnapshotEvent():
                    await handle_snapshot(ctx, event)
                case CustomerEvent():
                    await handle_customer(ctx, event)
                case RevenueEvent():
                    await handle_revenue(ctx, event)
                case BookingCreationRequested():
                    await handle_creation_requested(ctx, event)
                case BookingCreationCompleted():
                    await handle_creation_completed(ctx, event)
        except Exception:  # noqa: BLE001
            log.exception("Failed to process %s", type(event).__name__)

    def start(self) -> None:
        """Begin periodic maintenance; safe to call more than once."""

        if self._maintenance is not None and not self._maintenance.cancelled:
            return
        self._schedule_maintenance()

    def stop(self) -> None:
        if self._maintenance is not None:
            self._maintenance.cancel()
            self._maintenance = None

    def _schedule_maintenance(self) -> None:
        self._maintenance = self.context.scheduler.call_later(
            self.context.config.maintenance_interval,
            self._maintenance_tick,
            name="maintenance",
        )

    async def _maintenance_tick(self) -> None:
        try:
            run_maintenance(self.context)
        finally:
            if self._maintenance is not None:
                self._schedule_maintenance()
