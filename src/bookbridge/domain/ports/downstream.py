"""Port for the downstream system that receives create/cancel/update calls."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bookbridge.domain.types import BookingPayload


class DownstreamError(RuntimeError):
    """Raised when the downstream connector rejects or fails a call."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AlreadyCanceledError(DownstreamError):
    """Raised by ``cancel`` when the booking was canceled before."""


@runtime_checkable
class BookingConnector(Protocol):
    """Idempotent receiver of forwarded bookings."""

    async def create(self, payload: BookingPayload) -> None: ...

    async def cancel(self, booking_id: str, canceled_by: str) -> None: ...

    async def update(self, payload: BookingPayload) -> None: ...


__all__ = ["AlreadyCanceledError", "BookingConnector", "DownstreamError"]
