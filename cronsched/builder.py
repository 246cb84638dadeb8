"""Step-by-step construction of cron jobs."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import timedelta, timezone, tzinfo
from typing import Union

from cronsched.cron import Cron, parse_cron
from cronsched.errors import ErrorKind, JobSchedulerError
from cronsched.factories import _first_tick, _new_id, _offset_seconds
from cronsched.job import Job, schedule_to_cron
from cronsched.job_data import CronJobSpec, JobStoredData, JobType, JobUuid
from cronsched.kinds import AsyncRun, CronJob, SyncRun, _nop, _nop_async

JobIdLike = Union[JobUuid, uuid.UUID]


def _as_job_uuid(job_id: JobIdLike) -> JobUuid:
    if isinstance(job_id, uuid.UUID):
        return JobUuid.from_uuid(job_id)
    return job_id


@dataclass(frozen=True)
class JobBuilder:
    """Collects a job's settings; every ``with_*`` call returns a new builder."""

    job_id: JobUuid | None = None
    timezone: tzinfo | None = None
    job_type: JobType | None = None
    schedule: Cron | None = None
    run: SyncRun | None = None
    run_async: AsyncRun | None = None
    duration: timedelta | None = None
    repeating: bool | None = None
    instant: float | None = None

    def with_timezone(self, timezone: tzinfo) -> JobBuilder:
        return replace(self, timezone=timezone)

    def with_job_id(self, job_id: JobIdLike) -> JobBuilder:
        return replace(self, job_id=_as_job_uuid(job_id))

    def with_job_type(self, job_type: JobType) -> JobBuilder:
        return replace(self, job_type=JobType(job_type))

    def with_cron_job_type(self) -> JobBuilder:
        return replace(self, job_type=JobType.CRON)

    def with_repeated_job_type(self) -> JobBuilder:
        return replace(self, job_type=JobType.REPEATED)

    def with_one_shot_job_type(self) -> JobBuilder:
        return replace(self, job_type=JobType.ONE_SHOT)

    def with_schedule(self, schedule: object) -> JobBuilder:
        """Parse and set the cron schedule; raises ParseSchedule if it is invalid."""
        return replace(self, schedule=parse_cron(schedule_to_cron(schedule)))

    def with_run_sync(self, job: SyncRun) -> JobBuilder:
        return replace(self, run=job)

    def with_run_async(self, job: AsyncRun) -> JobBuilder:
        return replace(self, run_async=job)

    def every_seconds(self, seconds: int) -> JobBuilder:
        return replace(self, duration=timedelta(seconds=seconds), repeating=True)

    def after_seconds(self, seconds: int) -> JobBuilder:
        return replace(self, duration=timedelta(seconds=seconds), repeating=False)

    def at_instant(self, instant: float) -> JobBuilder:
        return replace(self, instant=instant)

    def build(self) -> Job:
        """Create the job; only cron jobs can be built this way."""
        if self.job_type is None:
            raise JobSchedulerError(ErrorKind.JOB_TYPE_NOT_SET)
        if self.run is None and self.run_async is None:
            raise JobSchedulerError(ErrorKind.RUN_OR_RUN_ASYNC_NOT_SET)
        if self.job_type is not JobType.CRON:
            raise JobSchedulerError(ErrorKind.NO_NEXT_TICK)
        if self.schedule is None:
            raise JobSchedulerError(ErrorKind.SCHEDULE_NOT_SET)

        schedule = self.schedule
        tz = self.timezone
        offset = 0 if tz is None else _offset_seconds(tz)
        data = JobStoredData(
            id=self.job_id if self.job_id is not None else _new_id(),
            next_tick=_first_tick(schedule, tz if tz is not None else timezone.utc),
            job_type=JobType.CRON,
            count=0,
            job=CronJobSpec(schedule=schedule.pattern),
            time_offset_seconds=offset,
        )
        return Job(
            CronJob(
                data=data,
                run_sync=self.run if self.run is not None else _nop,
                run_async=self.run_async if self.run_async is not None else _nop_async,
                async_job=self.run_async is not None,
            )
        )