"""Scheduler port backed by APScheduler's ``AsyncIOScheduler``."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from bookbridge.domain.scheduling import Scheduler, utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from apscheduler.job import Job

    from bookbridge.domain.scheduling import TaskCallback

log = getLogger(__name__)


@dataclass(slots=True, eq=False)
class ScheduledJob:
    job: Job
    name: str
    _cancelled: bool = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        try:
            self.job.remove()
        except JobLookupError:
            log.debug("Job %s already ran or was removed", self.name)


@dataclass(slots=True)
class ApschedulerScheduler:
    """Run deferred callbacks as one-shot date jobs on the running event loop.

    The underlying scheduler is started on the first ``call_later``, which must
    happen inside a running loop.
    """

    scheduler: AsyncIOScheduler = field(default_factory=lambda: AsyncIOScheduler(timezone=UTC))
    poll_interval: float = 0.02
    _running: int = 0

    def now(self) -> datetime:
        return utcnow()

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            log.debug("Job scheduler started")

    def call_later(
        self,
        delay: timedelta,
        callback: TaskCallback,
        *,
        name: str | None = None,
    ) -> ScheduledJob:
        self.start()
        label = name or "deferred"
        run_at = self.now() + max(delay, timedelta(0))
        job = self.scheduler.add_job(
            self._run,
            DateTrigger(run_date=run_at, timezone=UTC),
            args=(callback, label),
            name=label,
            misfire_grace_time=None,
        )
        return ScheduledJob(job=job, name=label)

    async def _run(self, callback: TaskCallback, label: str) -> None:
        self._running += 1
        try:
            await callback()
        except Exception:  # noqa: BLE001
            log.exception("Scheduled task %s failed", label)
        finally:
            self._running -= 1

    def _due_before(self, deadline: datetime) -> bool:
        return any(
            job.next_run_time is not None and job.next_run_time <= deadline
            for job in self.scheduler.get_jobs()
        )

    @property
    def outstanding(self) -> int:
        return len(self.scheduler.get_jobs()) + self._running

    async def drain(self, timeout: float) -> None:
        """Wait for jobs falling due within ``timeout`` seconds to finish."""

        deadline = self.now() + timedelta(seconds=timeout)
        while self.now() < deadline:
            if not self._running and not self._due_before(deadline):
                return
            await asyncio.sleep(self.poll_interval)

    def shutdown(self) -> None:
        if not self.scheduler.running:
            return
        self.scheduler.remove_all_jobs()
        self.scheduler.shutdown(wait=False)
        log.debug("Job scheduler stopped")


if TYPE_CHECKING:
    _scheduler_check: Scheduler = ApschedulerScheduler()
