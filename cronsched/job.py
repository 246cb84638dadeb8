"""A schedulable job handle and its tick logic."""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable

from cronsched.errors import ErrorKind, JobSchedulerError
from cronsched.job_data import JobStoredData, JobType
from cronsched.kinds import ScheduledJob

_U32_MAX = 0xFFFF_FFFF


def schedule_to_cron(schedule: object) -> str:
    """Turn a schedule description into the cron text that is parsed."""
    return str(schedule)


class Job:
    """A handle on a scheduled job; copies of the handle share the same job."""

    def __init__(self, inner: ScheduledJob) -> None:
        self.inner = inner

    def __repr__(self) -> str:
        return f"Job({self.guid}, {self.inner.job_type.str_name})"

    @property
    def guid(self) -> uuid.UUID:
        """The job's identifier."""
        return self.inner.job_id

    def tick(self) -> bool:
        """Return whether the job is due now, and advance its ticks if it is.

        The last tick is always set to now; the next tick moves on only when
        the job is due.
        """
        now = datetime.now(timezone.utc)
        inner = self.inner
        job_type = inner.job_type
        last_tick = inner.last_tick
        next_tick = inner.next_tick
        schedule = inner.schedule()
        repeated_every = inner.repeated_every()
        ran = inner.data.ran
        count = inner.data.count

        if next_tick is None:
            raise JobSchedulerError(ErrorKind.NO_NEXT_TICK)

        if last_tick is None:
            must_run = job_type in (JobType.ONE_SHOT, JobType.REPEATED) and now >= next_tick
        else:
            must_run = now >= next_tick and last_tick <= next_tick

        following: datetime | None = next_tick
        if must_run:
            if job_type is JobType.CRON:
                following = (
                    next(iter(schedule.iter_after(now)), None) if schedule is not None else None
                )
            elif job_type is JobType.ONE_SHOT:
                following = None
            else:
                following = (
                    next_tick + timedelta(seconds=repeated_every)
                    if repeated_every is not None
                    else None
                )

        self.job_data()

        inner.next_tick = following
        inner.last_tick = now
        inner.data.ran = ran or must_run
        if must_run:
            count = 0 if count == _U32_MAX else count + 1
        inner.data.count = count
        return must_run

    def set_job_data(self, job_data: JobStoredData) -> None:
        """Replace the job's stored data."""
        self.inner.data = job_data

    def set_stop(self, stop: bool) -> None:
        """Mark the job as stopped or started."""
        if stop:
            self.inner.set_stopped()
        else:
            self.inner.set_started()

    def job_data(self) -> JobStoredData:
        """A copy of the job's stored data."""
        data = self.inner.data
        if data is None:
            raise JobSchedulerError(ErrorKind.GET_JOB_DATA)
        return copy.deepcopy(data)

    def run(self, scheduler: Any) -> Awaitable[bool]:
        """Run the job's code; the awaitable yields True when it is done."""
        return self.inner.run(scheduler)