"""TTL-bounded cache of the most recent full booking listing."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime, timedelta

    from bookbridge.domain.scheduling import Clock
    from bookbridge.domain.types import Booking, BookingSnapshot, PaymentInfo

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _CacheEntry:
    snapshot: BookingSnapshot
    stored_at: datetime


class BookingSnapshotCache:
    """Hold one listing; readers always see a complete snapshot."""

    __slots__ = ("_clock", "_entry")

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._entry: _CacheEntry | None = None

    def is_valid(self, max_age: timedelta) -> bool:
        age = self.age()
        return age is not None and age < max_age

    def age(self) -> timedelta | None:
        entry = self._entry
        if entry is None:
            return None
        return self._clock() - entry.stored_at

    def get(self) -> BookingSnapshot | None:
        entry = self._entry
        return entry.snapshot if entry is not None else None

    def set(self, snapshot: BookingSnapshot) -> None:
        self._entry = _CacheEntry(snapshot=snapshot, stored_at=self._clock())
        log.debug("Cached listing with %s bookings", len(snapshot))

    def find(self, booking_id: str) -> Booking | None:
        snapshot = self.get()
        if snapshot is None:
            return None
        return snapshot.find(booking_id)

    def patch_payment(self, booking_id: str, payment: PaymentInfo) -> bool:
        """Correct one cached entry in place and bump the cache timestamp.

        Returns ``True`` when the cached entry disagreed and was replaced.
        """

        entry = self._entry
        if entry is None:
            return False
        cached = entry.snapshot.find(booking_id)
        if cached is None or cached.payment == payment:
            return False
        log.debug(
            "Cache mismatch for %s: cached=%s, observed=%s",
            booking_id,
            cached.payment,
            payment,
        )
        self._entry = _CacheEntry(
            snapshot=entry.snapshot.with_payment(booking_id, payment),
            stored_at=self._clock(),
        )
        return True
