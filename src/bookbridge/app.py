"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from bookbridge.adapters.apscheduler import ApschedulerScheduler
from bookbridge.adapters.capture import decode_event
from bookbridge.adapters.downstream import HttpBookingConnector
from bookbridge.adapters.listing import HttpSnapshotFetcher
from bookbridge.config import get_reconciliation_config
from bookbridge.domain.events import MalformedEventError
from bookbridge.domain.reconciliation import ReconciliationEngine
from bookbridge.domain.timestamps import local_zone

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import tzinfo

    from bookbridge.config import ReconciliationConfig
    from bookbridge.domain.events import Event
    from bookbridge.domain.ports import BookingConnector, SnapshotFetcher
    from bookbridge.domain.scheduling import Scheduler

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReplayResult:
    processed: int
    skipped: int


def build_engine(
    *,
    scheduler: Scheduler,
    connector: BookingConnector | None = None,
    fetcher: SnapshotFetcher | None = None,
    config: ReconciliationConfig | None = None,
) -> ReconciliationEngine:
    """Wire the engine to the HTTP adapters unless ports are supplied."""

    effective_config = config or get_reconciliation_config()
    effective_fetcher = fetcher or HttpSnapshotFetcher(
        local_tz=local_zone(effective_config.local_timezone)
    )
    return ReconciliationEngine.build(
        connector=connector or HttpBookingConnector(),
        fetcher=effective_fetcher,
        scheduler=scheduler,
        config=effective_config,
    )


def _parse_line(line: str, *, local_tz: tzinfo) -> Event:
    record = json.loads(line)
    if not isinstance(record, dict) or "kind" not in record:
        raise MalformedEventError("Replay line must be an object with a 'kind' field")
    return decode_event(str(record["kind"]), record.get("data"), local_tz=local_tz)


async def replay_lines(
    engine: ReconciliationEngine,
    lines: Iterable[str],
    *,
    local_tz: tzinfo,
) -> ReplayResult:
    processed = 0
    skipped = 0
    for number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        try:
            event = _parse_line(line, local_tz=local_tz)
        except ValueError as exc:
            log.warning("Skipping line %s: %s", number, exc)
            skipped += 1
            continue
        await engine.handle(event)
        processed += 1
    return ReplayResult(processed=processed, skipped=skipped)


async def _replay_async(
    path: Path,
    *,
    drain_seconds: float,
    connector: BookingConnector | None,
    fetcher: SnapshotFetcher | None,
    config: ReconciliationConfig | None,
) -> ReplayResult:
    effective_config = config or get_reconciliation_config()
    scheduler = ApschedulerScheduler()
    own_connector = connector is None
    engine = build_engine(
        scheduler=scheduler,
        connector=connector,
        fetcher=fetcher,
        config=effective_config,
    )
    engine.start()
    try:
        with path.open(encoding="utf-8") as handle:
            result = await replay_lines(
                engine, handle, local_tz=local_zone(effective_config.local_timezone)
            )
        if drain_seconds > 0:
            log.info("Waiting up to %ss for deferred work", drain_seconds)
            await scheduler.drain(drain_seconds)
    finally:
        engine.stop()
        scheduler.shutdown()
        if own_connector and isinstance(engine.context.connector, HttpBookingConnector):
            await engine.context.connector.aclose()
    return result


def replay_file(
    path: str | Path,
    *,
    drain_seconds: float = 0.0,
    connector: BookingConnector | None = None,
    fetcher: SnapshotFetcher | None = None,
    config: ReconciliationConfig | None = None,
) -> ReplayResult:
    """Feed a JSON-lines capture through a freshly wired engine."""

    log.info("Replaying captured events from %s", path)
    result = asyncio.run(
        _replay_async(
            Path(path),
            drain_seconds=drain_seconds,
            connector=connector,
            fetcher=fetcher,
            config=config,
        )
    )
    log.info("Finished replay: processed=%s, skipped=%s", result.processed, result.skipped)
    return result
