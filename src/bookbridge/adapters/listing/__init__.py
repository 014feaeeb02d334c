"""Public interface for the booking listing adapter."""

from __future__ import annotations

from .client import HttpSnapshotFetcher
from .schema import BookingRecord, ListingResponse
from .translator import parse_booking, parse_bookings, parse_listing, payment_from_record

__all__ = [
    "BookingRecord",
    "HttpSnapshotFetcher",
    "ListingResponse",
    "parse_booking",
    "parse_bookings",
    "parse_listing",
    "payment_from_record",
]
