"""Latest known amount and paid flag per booking."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from bookbridge.domain.types import PaymentInfo, PaymentSource

if TYPE_CHECKING:
    from datetime import datetime

    from bookbridge.domain.scheduling import Clock

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PaymentRecord:
    amount: int
    paid: bool
    source: PaymentSource
    updated_at: datetime

    @property
    def info(self) -> PaymentInfo:
        return PaymentInfo(amount=self.amount, paid=self.paid)


@dataclass(slots=True)
class PaymentLedger:
    """Payment values keyed by booking id.

    Each write replaces the booking's record in a single assignment; no write
    spans a suspension point.
    """

    clock: Clock
    _records: dict[str, PaymentRecord] = field(default_factory=dict[str, PaymentRecord])

    def get(self, booking_id: str) -> PaymentRecord | None:
        return self._records.get(booking_id)

    def __contains__(self, booking_id: object) -> bool:
        return booking_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def is_speculative(self, booking_id: str) -> bool:
        record = self._records.get(booking_id)
        return record is not None and record.source is PaymentSource.SPECULATIVE

    def seed_speculative(self, booking_id: str, amount: int) -> bool:
        """Record a form-derived amount unless any value is already known."""

        if booking_id in self._records:
            return False
        self._records[booking_id] = PaymentRecord(
            amount=amount,
            paid=False,
            source=PaymentSource.SPECULATIVE,
            updated_at=self.clock(),
        )
        log.debug("Seeded speculative payment for %s: amount=%s", booking_id, amount)
        return True

    def apply_revenue(self, booking_id: str, amount: int, paid: bool) -> PaymentRecord:
        """Replace the amount; the paid flag only ever turns on from revenue events."""

        current = self._records.get(booking_id)
        if current is not None and current.paid and not paid:
            log.warning(
                "Revenue event for %s reports unpaid but booking is already marked paid; "
                "keeping paid",
                booking_id,
            )
        record = PaymentRecord(
            amount=amount,
            paid=paid or (current.paid if current is not None else False),
            source=PaymentSource.REVENUE,
            updated_at=self.clock(),
        )
        self._records[booking_id] = record
        log.info(
            "Updated payment for %s from revenue: amount=%s, paid=%s",
            booking_id,
            record.amount,
            record.paid,
        )
        return record

    def apply_snapshot(self, booking_id: str, payment: PaymentInfo) -> PaymentRecord:
        """Adopt the listing's values; a zero amount never erases a known one."""

        current = self._records.get(booking_id)
        if current is not None and current.paid and not payment.paid:
            log.warning(
                "Listing contradicts paid flag for %s (was paid, now unpaid); "
                "adopting listing value",
                booking_id,
            )
        amount = payment.amount
        if amount <= 0 and current is not None:
            amount = current.amount
        record = PaymentRecord(
            amount=amount,
            paid=payment.paid,
            source=PaymentSource.SNAPSHOT,
            updated_at=self.clock(),
        )
        self._records[booking_id] = record
        return record

    def discard(self, booking_id: str) -> None:
        self._records.pop(booking_id, None)
