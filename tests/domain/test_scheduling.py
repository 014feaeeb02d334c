from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

from bookbridge.domain.scheduling import ManualScheduler, TaskCallback


def test_manual_scheduler_runs_due_callbacks_in_order() -> None:
    scheduler = ManualScheduler()
    calls: list[str] = []

    def record(label: str) -> TaskCallback:
        async def callback() -> None:
            calls.append(label)

        return callback

    scheduler.call_later(timedelta(seconds=20), record("late"))
    scheduler.call_later(timedelta(seconds=5), record("early"))
    scheduler.call_later(timedelta(seconds=90), record("never"))

    executed = asyncio.run(scheduler.advance(timedelta(seconds=30)))

    assert executed == 2
    assert calls == ["early", "late"]
    assert scheduler.now() == datetime(2024, 1, 1, 0, 0, 30, tzinfo=UTC)
    assert len(scheduler.pending) == 1


def test_manual_scheduler_skips_cancelled_tasks() -> None:
    scheduler = ManualScheduler()
    calls: list[str] = []

    async def callback() -> None:
        calls.append("ran")

    task = scheduler.call_later(timedelta(seconds=1), callback)
    task.cancel()

    assert asyncio.run(scheduler.advance(timedelta(seconds=5))) == 0
    assert calls == []


def test_manual_scheduler_runs_tasks_scheduled_while_advancing() -> None:
    scheduler = ManualScheduler()
    seen: list[datetime] = []

    async def second() -> None:
        seen.append(scheduler.now())

    async def first() -> None:
        seen.append(scheduler.now())
        scheduler.call_later(timedelta(seconds=3), second)

    scheduler.call_later(timedelta(seconds=2), first)
    asyncio.run(scheduler.advance(timedelta(seconds=10)))

    start = datetime(2024, 1, 1, tzinfo=UTC)
    assert seen == [start + timedelta(seconds=2), start + timedelta(seconds=5)]


def test_manual_scheduler_survives_failing_callback() -> None:
    scheduler = ManualScheduler()
    calls: list[str] = []

    async def broken() -> None:
        raise RuntimeError("boom")

    async def healthy() -> None:
        calls.append("ok")

    scheduler.call_later(timedelta(seconds=1), broken)
    scheduler.call_later(timedelta(seconds=2), healthy)

    assert asyncio.run(scheduler.advance(timedelta(seconds=3))) == 2
    assert calls == ["ok"]
