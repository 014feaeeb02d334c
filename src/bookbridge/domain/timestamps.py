"""Conversion of captured local timestamps into UTC instants."""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from logging import getLogger
from zoneinfo import ZoneInfo

from bookbridge.config.reconciliation import DEFAULT_LOCAL_TIMEZONE

log = getLogger(__name__)


def local_zone(name: str = DEFAULT_LOCAL_TIMEZONE) -> tzinfo:
    return ZoneInfo(name)


def to_utc(value: str | None, *, local_tz: tzinfo | None = None) -> datetime | None:
    """Parse an ISO-8601 timestamp, reading offset-less values as local time."""

    if value is None:
        return None
    normalized = value.strip()
    if not normalized:
        return None
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        log.warning("Ignoring unparseable timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=local_tz or local_zone())
    return parsed.astimezone(UTC)


__all__ = ["local_zone", "to_utc"]
