"""Ports for fetching the full booking listing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bookbridge.domain.types import BookingSnapshot


class SnapshotFetchError(RuntimeError):
    """Raised when the listing source returns an unusable response."""


@runtime_checkable
class SnapshotFetcher(Protocol):
    """Callable port returning a fresh listing, or ``None`` when none is obtainable."""

    async def __call__(self) -> BookingSnapshot | None: ...


__all__ = ["SnapshotFetchError", "SnapshotFetcher"]
