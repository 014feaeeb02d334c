"""Public interface for the downstream booking adapter."""

from __future__ import annotations

from .client import ALREADY_CANCELLED, HttpBookingConnector
from .schema import BookingBody, CancelBody

__all__ = ["ALREADY_CANCELLED", "BookingBody", "CancelBody", "HttpBookingConnector"]
