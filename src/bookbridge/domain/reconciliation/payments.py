"""Payment extraction and downstream payload construction."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bookbridge.domain.types import BookingPayload, PaymentInfo

if TYPE_CHECKING:
    from bookbridge.config.reconciliation import ReconciliationConfig
    from bookbridge.domain.types import Booking, BookingDetails

DEFAULT_NAME = "Unknown"
DEFAULT_PHONE = "010-0000-0000"
DEFAULT_ROOM = "unknown"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _truthy(value: object) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def coerce_amount(value: object) -> int:
    """Read an integer the way form fields deliver it; garbage becomes 0."""

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    return 0


def _first_truthy(*values: object) -> object:
    for value in values:
        if _truthy(value):
            return value
    return 0


@dataclass(frozen=True, slots=True)
class PaymentFields:
    """Raw payment-related fields of one listing record."""

    amount: object = None
    is_paid: object = None
    has_revenue_detail: bool = False
    revenue_amount: object = None
    revenue_finished: object = None
    has_payment: bool = False
    payment_amount: object = None


def extract_payment(fields: PaymentFields) -> PaymentInfo:
    """Resolve amount and paid flag from a listing record.

    Precedence: revenue detail first, then a separate payment object when there
    is no revenue detail (paid comes from ``is_paid`` there), and an explicit
    ``is_paid`` overrides the revenue detail's ``finished`` flag.
    """

    amount = coerce_amount(_first_truthy(fields.revenue_amount, fields.amount))
    finished = fields.revenue_finished is True or fields.revenue_finished == "true"

    if not fields.has_revenue_detail and fields.has_payment:
        amount = coerce_amount(_first_truthy(fields.payment_amount, fields.amount))
        finished = fields.is_paid is True
    elif fields.has_revenue_detail and _truthy(fields.is_paid):
        finished = fields.is_paid is True

    return PaymentInfo(amount=amount, paid=finished)


def payload_from_booking(
    booking: Booking,
    payment: PaymentInfo,
    *,
    config: ReconciliationConfig,
    immediate: bool = False,
) -> BookingPayload:
    return BookingPayload(
        booking_id=booking.booking_id,
        name=booking.name or DEFAULT_NAME,
        phone=booking.phone or DEFAULT_PHONE,
        party_size=booking.party_size or 1,
        start=booking.start,
        end=booking.end,
        room=booking.room or DEFAULT_ROOM,
        hole=booking.hole,
        amount=payment.amount,
        paid=payment.paid,
        site=config.source_site,
        immediate=booking.immediate or immediate,
    )


def payload_from_details(
    booking_id: str,
    details: BookingDetails,
    payment: PaymentInfo,
    *,
    config: ReconciliationConfig,
    room: str | None = None,
) -> BookingPayload:
    return BookingPayload(
        booking_id=booking_id,
        name=details.name or DEFAULT_NAME,
        phone=details.phone or DEFAULT_PHONE,
        party_size=details.party_size or 1,
        start=details.start,
        end=details.end,
        room=room or details.room or DEFAULT_ROOM,
        hole=details.hole or config.default_hole,
        amount=payment.amount,
        paid=payment.paid,
        site=config.source_site,
        immediate=False,
    )
