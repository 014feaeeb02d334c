"""HTTP fetcher for the full booking listing."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from bookbridge.adapters.http_resilience import ResilientClient
from bookbridge.config.listing import ListingConfig, get_listing_config
from bookbridge.domain.ports.fetching import SnapshotFetcher, SnapshotFetchError
from bookbridge.domain.scheduling import utcnow

from .translator import parse_listing

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import tzinfo

    from bookbridge.config.http_resilience import ResilienceConfig
    from bookbridge.domain.scheduling import Clock
    from bookbridge.domain.types import BookingSnapshot

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpSnapshotFetcher:
    config: ListingConfig = field(default_factory=get_listing_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    clock: Clock = field(default=utcnow)
    local_tz: tzinfo | None = None

    async def __call__(self) -> BookingSnapshot | None:
        store_id = self.config.store_id
        if not store_id:
            log.error("Store id not configured, cannot fetch booking listing")
            return None

        async with self.client_factory(self.config.resilience) as client:
            response = await client.get(
                f"/stores/{store_id}/reservation/crawl",
                headers={"Authorization": f"Bearer {self.config.access_token}"},
            )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SnapshotFetchError(
                f"Listing request failed with status {response.status_code}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise SnapshotFetchError("Listing response is not JSON") from exc
        if not isinstance(payload, dict) or "results" not in payload:
            raise SnapshotFetchError("Unexpected listing response payload")

        try:
            snapshot = parse_listing(payload, fetched_at=self.clock(), local_tz=self.local_tz)
        except ValidationError as exc:
            raise SnapshotFetchError("Listing response failed validation") from exc
        log.debug("Decoded %s bookings from listing", len(snapshot))
        return snapshot


if TYPE_CHECKING:
    _fetcher_check: SnapshotFetcher = HttpSnapshotFetcher()
