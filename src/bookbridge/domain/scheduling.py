"""Clock and deferred-task abstractions used by the engine.

The engine never sleeps or reads the wall clock directly. Production wiring uses
``bookbridge.adapters.apscheduler.ApschedulerScheduler``; tests and
deterministic replays use :class:`ManualScheduler`, whose time only moves when
``advance`` is awaited.
"""

from __future__ import annotations

import heapq
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import Protocol

log = getLogger(__name__)

type TaskCallback = Callable[[], Awaitable[None]]


class Clock(Protocol):
    def __call__(self) -> datetime: ...


class ScheduledTask(Protocol):
    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Run async callbacks after a delay on the engine's event loop."""

    def now(self) -> datetime: ...

    def call_later(
        self,
        delay: timedelta,
        callback: TaskCallback,
        *,
        name: str | None = None,
    ) -> ScheduledTask: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ManualTask:
    due: datetime
    callback: TaskCallback
    name: str | None = None
    cancelled: bool = False
    done: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(slots=True)
class ManualScheduler:
    """Virtual-clock scheduler; callable so it doubles as a :class:`Clock`."""

    current: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC))
    _queue: list[tuple[datetime, int, ManualTask]] = field(
        default_factory=list[tuple[datetime, int, ManualTask]]
    )
    _sequence: int = 0

    def __call__(self) -> datetime:
        return self.current

    def now(self) -> datetime:
        return self.current

    def call_later(
        self,
        delay: timedelta,
        callback: TaskCallback,
        *,
        name: str | None = None,
    ) -> ManualTask:
        task = ManualTask(due=self.current + max(delay, timedelta(0)), callback=callback, name=name)
        heapq.heappush(self._queue, (task.due, self._sequence, task))
        self._sequence += 1
        return task

    @property
    def pending(self) -> list[ManualTask]:
        return sorted(
            (task for _, _, task in self._queue if not task.cancelled),
            key=lambda task: task.due,
        )

    async def advance(self, delta: timedelta) -> int:
        """Move time forward by ``delta``, running due callbacks in order.

        Callbacks scheduled while advancing run too if they fall due before the
        target instant. Returns the number of callbacks executed.
        """

        target = self.current + delta
        executed = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self.current = max(self.current, due)
            task.done = True
            executed += 1
            try:
                await task.callback()
            except Exception:  # noqa: BLE001
                log.exception("Scheduled task %s failed", task.name or "<unnamed>")
        self.current = target
        return executed


__all__ = [
    "Clock",
    "ManualScheduler",
    "ManualTask",
    "ScheduledTask",
    "Scheduler",
    "TaskCallback",
    "utcnow",
]
