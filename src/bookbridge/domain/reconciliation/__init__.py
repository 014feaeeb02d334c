"""Reconciliation of the confirmation, listing, customer and revenue streams.

Handlers are plain async functions over a shared :class:`ReconciliationContext`;
:class:`ReconciliationEngine` routes decoded events to them and owns the
periodic maintenance task.
"""

from __future__ import annotations

from .context import CustomerUpdate, ReconciliationContext
from .engine import ReconciliationEngine
from .maintenance import MaintenanceResult, run_maintenance
from .payments import PaymentFields, coerce_amount, extract_payment
from .snapshot import SweepResult

__all__ = [
    "CustomerUpdate",
    "MaintenanceResult",
    "PaymentFields",
    "ReconciliationContext",
    "ReconciliationEngine",
    "SweepResult",
    "coerce_amount",
    "extract_payment",
]
