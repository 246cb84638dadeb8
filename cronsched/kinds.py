"""The two kinds of schedulable job: cron-pattern jobs and fixed-interval jobs."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, ClassVar

from cronsched.cron import Cron
from cronsched.errors import ErrorKind, JobSchedulerError
from cronsched.job_data import JobStoredData, JobType

_U32_MAX = 0xFFFF_FFFF

SyncRun = Callable[[uuid.UUID, Any], None]
AsyncRun = Callable[[uuid.UUID, Any], Awaitable[None]]


def _nop(job_id: uuid.UUID, scheduler: Any) -> None:
    return None


async def _nop_async(job_id: uuid.UUID, scheduler: Any) -> None:
    return None


async def _finished() -> bool:
    return True


async def _await_then_finish(pending: Awaitable[None]) -> bool:
    await pending
    return True


@dataclass
class ScheduledJob:
    """A job's stored data together with the code that runs it."""

    data: JobStoredData
    run_sync: SyncRun = _nop
    run_async: AsyncRun = _nop_async
    async_job: bool = False

    is_cron_job: ClassVar[bool] = False

    @property
    def job_id(self) -> uuid.UUID:
        if self.data.id is None:
            raise JobSchedulerError(ErrorKind.GET_JOB_DATA)
        return self.data.id.to_uuid()

    @property
    def job_type(self) -> JobType:
        return self.data.kind()

    @property
    def last_tick(self) -> datetime | None:
        return self.data.last_tick_utc()

    @last_tick.setter
    def last_tick(self, tick: datetime | None) -> None:
        self.data.set_last_tick(tick)

    @property
    def next_tick(self) -> datetime | None:
        return self.data.next_tick_utc()

    @next_tick.setter
    def next_tick(self, tick: datetime | None) -> None:
        self.data.set_next_tick(tick)

    @property
    def stopped(self) -> bool:
        return self.data.stopped

    @property
    def fixed_offset_west(self) -> int:
        return self.data.time_offset_seconds

    def schedule(self) -> Cron | None:
        """The cron schedule this job follows, if any."""
        return self.data.schedule()

    def repeated_every(self) -> int | None:
        """The repeat interval in seconds, if any."""
        return self.data.repeated_every()

    def increment_count(self) -> None:
        """Add one to the run count, wrapping to zero before the 32-bit limit."""
        following = self.data.count + 1
        self.data.count = following if following < _U32_MAX else 0

    def set_stopped(self) -> None:
        self.data.stopped = True

    def set_started(self) -> None:
        self.data.stopped = False

    def run(self, scheduler: Any) -> Awaitable[bool]:
        """Start the job; the returned awaitable yields True once it has finished.

        A synchronous job runs before this returns; an asynchronous one is
        started here and completes when the result is awaited.
        """
        job_id = self.job_id
        if not self.async_job:
            self.run_sync(job_id, scheduler)
            return _finished()
        return _await_then_finish(self.run_async(job_id, scheduler))


@dataclass
class CronJob(ScheduledJob):
    """A job that runs on the occurrences of a cron pattern."""

    is_cron_job: ClassVar[bool] = True

    @property
    def job_type(self) -> JobType:
        return JobType.CRON

    def repeated_every(self) -> int | None:
        return None


@dataclass
class NonCronJob(ScheduledJob):
    """A one-shot or repeating job driven by a fixed interval."""

    is_cron_job: ClassVar[bool] = False

    def schedule(self) -> Cron | None:
        return None