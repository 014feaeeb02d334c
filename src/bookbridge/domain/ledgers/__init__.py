"""In-memory ledgers shared by all stream handlers."""

from __future__ import annotations

from .dedup import DedupTracker
from .identity import IdentityLedger
from .payments import PaymentLedger, PaymentRecord
from .pending import (
    PendingBookingCreate,
    PendingKey,
    PendingKind,
    PendingPayment,
    PendingUpdateStore,
)
from .snapshot_cache import BookingSnapshotCache

__all__ = [
    "BookingSnapshotCache",
    "DedupTracker",
    "IdentityLedger",
    "PaymentLedger",
    "PaymentRecord",
    "PendingBookingCreate",
    "PendingKey",
    "PendingKind",
    "PendingPayment",
    "PendingUpdateStore",
]
