"""Bidirectional correlation of booking ids, listing indexes and revenue ids."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger

log = getLogger(__name__)


@dataclass(slots=True)
class IdentityLedger:
    """Map indexes and revenue ids to booking ids.

    Every identifier resolves to at most one booking. Relinking an identifier
    silently replaces the previous target because the external system reuses
    indexes.
    """

    _booking_by_index: dict[str, str] = field(default_factory=dict[str, str])
    _booking_by_revenue: dict[str, str] = field(default_factory=dict[str, str])

    def link_index_to_booking(self, index: str | int, booking_id: str) -> None:
        key = str(index)
        previous = self._booking_by_index.get(key)
        if previous is not None and previous != booking_id:
            log.debug("Index %s moved from booking %s to %s", key, previous, booking_id)
        self._booking_by_index[key] = booking_id

    def resolve_booking_by_index(self, index: str | int | None) -> str | None:
        if index is None:
            return None
        return self._booking_by_index.get(str(index))

    def link_revenue_to_booking(self, revenue_id: str | int, booking_id: str) -> None:
        self._booking_by_revenue[str(revenue_id)] = booking_id

    def resolve_booking_by_revenue_or_index(
        self,
        revenue_id: str | int | None,
        index: str | int | None,
    ) -> str | None:
        if revenue_id is not None:
            booking_id = self._booking_by_revenue.get(str(revenue_id))
            if booking_id is not None:
                return booking_id
        return self.resolve_booking_by_index(index)

    def indexes_for(self, booking_id: str) -> list[str]:
        return [index for index, target in self._booking_by_index.items() if target == booking_id]

    def __len__(self) -> int:
        return len(self._booking_by_index) + len(self._booking_by_revenue)
