"""Constructors for cron, one-shot and repeating jobs."""

from __future__ import annotations

import math
import time
import uuid
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Union

from cronsched.cron import Cron, parse_cron
from cronsched.job import Job, schedule_to_cron
from cronsched.job_data import (
    CronJobSpec,
    JobStoredData,
    JobType,
    JobUuid,
    NonCronJobSpec,
)
from cronsched.kinds import AsyncRun, CronJob, NonCronJob, SyncRun, _nop, _nop_async

Duration = Union[timedelta, int, float]


def _whole_seconds(duration: Duration) -> int:
    seconds = duration.total_seconds() if isinstance(duration, timedelta) else float(duration)
    if seconds < 0:
        raise ValueError("duration must not be negative")
    return int(seconds)


def _offset_seconds(tz: tzinfo) -> int:
    offset = datetime.now(timezone.utc).astimezone(tz).utcoffset()
    return 0 if offset is None else int(offset.total_seconds())


def _first_tick(schedule: Cron, tz: tzinfo) -> int:
    start = datetime.now(timezone.utc).astimezone(tz)
    first = next(iter(schedule.iter_from(start)), None)
    return 0 if first is None else math.floor(first.timestamp())


def _new_id() -> JobUuid:
    return JobUuid.from_uuid(uuid.uuid4())


def _cron(
    schedule: object,
    tz: tzinfo,
    run_sync: SyncRun,
    run_async: AsyncRun,
    async_job: bool,
    count: int,
) -> Job:
    text = schedule_to_cron(schedule)
    offset = _offset_seconds(tz)
    parsed = parse_cron(text)
    data = JobStoredData(
        id=_new_id(),
        next_tick=_first_tick(parsed, tz),
        job_type=JobType.CRON,
        count=count,
        job=CronJobSpec(schedule=parsed.pattern),
        time_offset_seconds=offset,
    )
    return Job(CronJob(data=data, run_sync=run_sync, run_async=run_async, async_job=async_job))


def cron_job(schedule: object, run: SyncRun) -> Job:
    """A job that calls ``run`` on every occurrence of a UTC cron pattern."""
    return cron_job_tz(schedule, timezone.utc, run)


def cron_job_tz(schedule: object, timezone: tzinfo, run: SyncRun) -> Job:
    """A job that calls ``run`` on every occurrence of a cron pattern in ``timezone``."""
    return _cron(schedule, timezone, run, _nop_async, False, 0)


def cron_job_async(schedule: object, run: AsyncRun) -> Job:
    """A job that awaits ``run`` on every occurrence of a UTC cron pattern."""
    return cron_job_async_tz(schedule, timezone.utc, run)


def cron_job_async_tz(schedule: object, timezone: tzinfo, run: AsyncRun) -> Job:
    """A job that awaits ``run`` on every occurrence of a cron pattern in ``timezone``."""
    return _cron(schedule, timezone, _nop, run, True, 12)


def _non_cron(
    job_type: JobType,
    delay: int,
    repeating: bool,
    run_sync: SyncRun,
    run_async: AsyncRun,
    async_job: bool,
) -> Job:
    now = math.floor(datetime.now(timezone.utc).timestamp())
    data = JobStoredData(
        id=_new_id(),
        next_tick=now + delay,
        job_type=job_type,
        job=NonCronJobSpec(repeating=repeating, repeated_every=delay),
    )
    return Job(NonCronJob(data=data, run_sync=run_sync, run_async=run_async, async_job=async_job))


def one_shot(duration: Duration, run: SyncRun) -> Job:
    """A job that calls ``run`` once, after ``duration`` has passed."""
    return _non_cron(JobType.ONE_SHOT, _whole_seconds(duration), False, run, _nop_async, False)


def one_shot_async(duration: Duration, run: AsyncRun) -> Job:
    """A job that awaits ``run`` once, after ``duration`` has passed."""
    return _non_cron(JobType.ONE_SHOT, _whole_seconds(duration), False, _nop, run, True)


def _until(instant: float) -> int:
    return int(max(0.0, instant - time.monotonic()))


def one_shot_at_instant(instant: float, run: SyncRun) -> Job:
    """A job that calls ``run`` once at ``instant``, a ``time.monotonic()`` reading."""
    return _non_cron(JobType.ONE_SHOT, _until(instant), False, run, _nop_async, False)


def one_shot_at_instant_async(instant: float, run: AsyncRun) -> Job:
    """A job that awaits ``run`` once at ``instant``, a ``time.monotonic()`` reading."""
    return _non_cron(JobType.ONE_SHOT, _until(instant), False, _nop, run, True)


def repeated(duration: Duration, run: SyncRun) -> Job:
    """A job that calls ``run`` every ``duration``."""
    return _non_cron(JobType.REPEATED, _whole_seconds(duration), True, run, _nop_async, False)


def repeated_async(duration: Duration, run: AsyncRun) -> Job:
    """A job that awaits ``run`` every ``duration``."""
    return _non_cron(JobType.REPEATED, _whole_seconds(duration), True, _nop, run, True)