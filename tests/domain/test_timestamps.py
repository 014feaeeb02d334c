from __future__ import annotations

from datetime import UTC, datetime

from bookbridge.domain.timestamps import local_zone, to_utc


def test_offsetless_timestamp_is_read_as_local_time() -> None:
    assert to_utc("2024-01-01T10:00:00") == datetime(2024, 1, 1, 1, tzinfo=UTC)


def test_explicit_offset_is_respected() -> None:
    assert to_utc("2024-01-01T10:00:00+00:00") == datetime(2024, 1, 1, 10, tzinfo=UTC)
    assert to_utc("2024-01-01T10:00:00Z") == datetime(2024, 1, 1, 10, tzinfo=UTC)


def test_custom_local_zone() -> None:
    result = to_utc("2024-07-01 12:00", local_tz=local_zone("Europe/Berlin"))

    assert result == datetime(2024, 7, 1, 10, tzinfo=UTC)


def test_unparseable_and_blank_values_become_none() -> None:
    assert to_utc(None) is None
    assert to_utc("  ") is None
    assert to_utc("yesterday") is None
