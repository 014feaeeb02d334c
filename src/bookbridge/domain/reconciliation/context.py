"""Shared state handed to every stream handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from bookbridge.config.reconciliation import ReconciliationConfig
from bookbridge.domain.ledgers import (
    BookingSnapshotCache,
    DedupTracker,
    IdentityLedger,
    PaymentLedger,
    PendingUpdateStore,
)

if TYPE_CHECKING:
    from datetime import datetime

    from bookbridge.domain.ports import BookingConnector, SnapshotFetcher
    from bookbridge.domain.scheduling import Scheduler
    from bookbridge.domain.types import BookingSnapshot

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CustomerUpdate:
    customer_id: str
    name: str
    phone: str
    updated_at: datetime
    observed_at: datetime


@dataclass(slots=True)
class ReconciliationContext:
    """Owner of every ledger; handlers read and write only through it."""

    config: ReconciliationConfig
    connector: BookingConnector
    fetcher: SnapshotFetcher
    scheduler: Scheduler
    identities: IdentityLedger
    payments: PaymentLedger
    snapshots: BookingSnapshotCache
    dedup: DedupTracker
    pending: PendingUpdateStore
    customer_updates: dict[str, CustomerUpdate] = field(default_factory=dict[str, CustomerUpdate])
    pending_customers: set[str] = field(default_factory=set[str])
    cooling_customers: set[str] = field(default_factory=set[str])
    in_flight: set[str] = field(default_factory=set[str])

    @classmethod
    def create(
        cls,
        *,
        connector: BookingConnector,
        fetcher: SnapshotFetcher,
        scheduler: Scheduler,
        config: ReconciliationConfig | None = None,
    ) -> ReconciliationContext:
        clock = scheduler.now
        return cls(
            config=config or ReconciliationConfig(),
            connector=connector,
            fetcher=fetcher,
            scheduler=scheduler,
            identities=IdentityLedger(),
            payments=PaymentLedger(clock=clock),
            snapshots=BookingSnapshotCache(clock),
            dedup=DedupTracker(),
            pending=PendingUpdateStore(clock=clock),
        )

    def now(self) -> datetime:
        return self.scheduler.now()

    def store_snapshot(self, snapshot: BookingSnapshot) -> None:
        """Replace the cached listing and let it override speculative payments."""

        self.snapshots.set(snapshot)
        overridden = 0
        for booking in snapshot:
            if booking.index:
                self.identities.link_index_to_booking(booking.index, booking.booking_id)
            if self.payments.is_speculative(booking.booking_id):
                self.payments.apply_snapshot(booking.booking_id, booking.payment)
                overridden += 1
        if overridden:
            log.info("Listing replaced %s speculative payment values", overridden)

    async def refresh_snapshot(self) -> BookingSnapshot | None:
        """Return the cached listing, fetching a new one once it is older than the TTL."""

        if self.snapshots.is_valid(self.config.snapshot_ttl):
            age = self.snapshots.age()
            log.info(
                "Using cached listing (%ss old)",
                round(age.total_seconds()) if age is not None else 0,
            )
            return self.snapshots.get()

        log.info("Fetching latest booking listing")
        try:
            snapshot = await self.fetcher()
        except Exception:  # noqa: BLE001
            log.exception("Failed to fetch latest booking listing")
            return None
        if snapshot is None:
            return None
        self.store_snapshot(snapshot)
        log.info("Fetched %s bookings", len(snapshot))
        return snapshot
