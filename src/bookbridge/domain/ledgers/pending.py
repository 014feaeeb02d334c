"""Transient records for events that arrived before their counterpart."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from bookbridge.domain.types import BookingDetails, PaymentInfo

if TYPE_CHECKING:
    from datetime import datetime, timedelta

    from bookbridge.domain.scheduling import Clock

log = getLogger(__name__)


class PendingKind(StrEnum):
    BOOKING_CREATE = "booking_create"
    REVENUE = "revenue"
    PAYMENT = "payment"


@dataclass(frozen=True, slots=True)
class PendingKey:
    kind: PendingKind
    ref: str

    def __str__(self) -> str:
        return f"{self.kind}_{self.ref}"


@dataclass(frozen=True, slots=True)
class PendingPayment:
    index: str
    amount: int
    paid: bool
    received_at: datetime
    revenue_id: str | None = None
    booking_id: str | None = None
    applied: bool = False

    @property
    def info(self) -> PaymentInfo:
        return PaymentInfo(amount=self.amount, paid=self.paid)


@dataclass(frozen=True, slots=True)
class PendingBookingCreate:
    request_id: str
    received_at: datetime
    details: BookingDetails = field(default_factory=BookingDetails)
    index: str | None = None
    payment: PaymentInfo | None = None
    payment_attached_at: datetime | None = None


type PendingUpdate = PendingPayment | PendingBookingCreate


@dataclass(slots=True)
class PendingUpdateStore:
    clock: Clock
    _records: dict[PendingKey, PendingUpdate] = field(
        default_factory=dict[PendingKey, PendingUpdate]
    )

    def put(self, key: PendingKey, record: PendingUpdate) -> None:
        self._records[key] = record

    def get(self, key: PendingKey) -> PendingUpdate | None:
        return self._records.get(key)

    def pop(self, key: PendingKey) -> PendingUpdate | None:
        return self._records.pop(key, None)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def _is_fresh(self, record: PendingUpdate, within: timedelta) -> bool:
        return self.clock() - record.received_at < within

    def payment_for_index(self, index: str, *, within: timedelta) -> PendingPayment | None:
        record = self._records.get(PendingKey(PendingKind.PAYMENT, index))
        if isinstance(record, PendingPayment) and self._is_fresh(record, within):
            return record
        return None

    def unapplied_payments(self, *, within: timedelta) -> list[PendingPayment]:
        return [
            record
            for key, record in self._records.items()
            if key.kind is PendingKind.PAYMENT
            and isinstance(record, PendingPayment)
            and not record.applied
            and self._is_fresh(record, within)
        ]

    def open_booking_creations(
        self, *, within: timedelta
    ) -> list[tuple[PendingKey, PendingBookingCreate]]:
        return [
            (key, record)
            for key, record in self._records.items()
            if isinstance(record, PendingBookingCreate) and self._is_fresh(record, within)
        ]

    def attach_payment(
        self,
        key: PendingKey,
        payment: PaymentInfo,
        *,
        index: str | None = None,
    ) -> PendingBookingCreate | None:
        record = self._records.get(key)
        if not isinstance(record, PendingBookingCreate):
            return None
        updated = replace(
            record,
            payment=payment,
            index=index or record.index,
            payment_attached_at=self.clock(),
        )
        self._records[key] = updated
        log.info("Attached payment amount %s to pending booking %s", payment.amount, key)
        return updated

    def consume_payment(self, index: str, revenue_id: str | None = None) -> None:
        self._records.pop(PendingKey(PendingKind.PAYMENT, index), None)
        if revenue_id is not None:
            self._records.pop(PendingKey(PendingKind.REVENUE, revenue_id), None)

    def expire(self, older_than: timedelta) -> int:
        now = self.clock()
        stale = [
            key for key, record in self._records.items() if now - record.received_at >= older_than
        ]
        for key in stale:
            del self._records[key]
        return len(stale)
