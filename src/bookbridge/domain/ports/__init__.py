"""Domain port definitions for adapters."""

from __future__ import annotations

from .downstream import AlreadyCanceledError, BookingConnector, DownstreamError
from .fetching import SnapshotFetcher, SnapshotFetchError

__all__ = [
    "AlreadyCanceledError",
    "BookingConnector",
    "DownstreamError",
    "SnapshotFetchError",
    "SnapshotFetcher",
]
