"""Booking ids already forwarded downstream."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger

log = getLogger(__name__)


@dataclass(slots=True)
class DedupTracker:
    created: set[str] = field(default_factory=set[str])
    canceled: set[str] = field(default_factory=set[str])

    def is_forwarded(self, booking_id: str) -> bool:
        return booking_id in self.created or booking_id in self.canceled

    def was_created(self, booking_id: str) -> bool:
        return booking_id in self.created

    def was_canceled(self, booking_id: str) -> bool:
        return booking_id in self.canceled

    def mark_created(self, booking_id: str) -> None:
        self.created.add(booking_id)

    def mark_canceled(self, booking_id: str) -> None:
        self.canceled.add(booking_id)

    def __len__(self) -> int:
        return len(self.created) + len(self.canceled)

    def prune(self, threshold: int) -> bool:
        """Clear both sets once their combined size exceeds ``threshold``."""

        size = len(self)
        if size <= threshold:
            return False
        log.info("Clearing forwarded booking ids (size=%s, threshold=%s)", size, threshold)
        self.created.clear()
        self.canceled.clear()
        return True
