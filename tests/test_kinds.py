import uuid
from datetime import datetime, timezone

import pytest

from cronsched.errors import ErrorKind, JobSchedulerError
from cronsched.job_data import (
    CronJobSpec,
    JobStoredData,
    JobType,
    JobUuid,
    NonCronJobSpec,
)
from cronsched.kinds import CronJob, NonCronJob, ScheduledJob


JOB_ID = uuid.UUID("12345678-1234-5678-1234-567812345678")


def cron_data(pattern="1/5 * * * * *"):
    return JobStoredData(
        id=JobUuid.from_uuid(JOB_ID),
        job_type=JobType.CRON,
        job=CronJobSpec(schedule=pattern),
        time_offset_seconds=7200,
    )


def repeated_data(every=8):
    return JobStoredData(
        id=JobUuid.from_uuid(JOB_ID),
        job_type=JobType.REPEATED,
        job=NonCronJobSpec(repeating=True, repeated_every=every),
    )


def test_cron_job_schedule_and_flags():
    job = CronJob(cron_data())
    assert job.is_cron_job is True
    assert job.schedule().pattern == "1/5 * * * * *"
    assert job.repeated_every() is None
    assert job.job_type is JobType.CRON


def test_cron_job_type_is_cron_even_if_data_says_otherwise():
    data = cron_data()
    data.job_type = JobType.ONE_SHOT
    assert CronJob(data).job_type is JobType.CRON


def test_non_cron_job_interval():
    job = NonCronJob(repeated_data(8))
    assert job.is_cron_job is False
    assert job.schedule() is None
    assert job.repeated_every() == 8
    assert job.job_type is JobType.REPEATED


def test_job_id_round_trip():
    assert CronJob(cron_data()).job_id == JOB_ID


def test_missing_id_raises():
    data = cron_data()
    data.id = None
    with pytest.raises(JobSchedulerError) as info:
        CronJob(data).job_id
    assert info.value.kind is ErrorKind.GET_JOB_DATA


def test_fixed_offset_west_reads_data():
    assert CronJob(cron_data()).fixed_offset_west == 7200


def test_increment_count_from_zero():
    job = NonCronJob(repeated_data())
    job.increment_count()
    job.increment_count()
    assert job.data.count == 2


def test_increment_count_wraps_before_limit():
    job = CronJob(cron_data())
    job.data.count = 0xFFFF_FFFE
    job.increment_count()
    assert job.data.count == 0


def test_stop_and_start():
    job = CronJob(cron_data())
    job.set_stopped()
    assert job.stopped is True
    assert job.data.stopped is True
    job.set_started()
    assert job.stopped is False


def test_tick_properties_round_trip():
    job = NonCronJob(repeated_data())
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    job.next_tick = moment
    job.last_tick = moment
    assert job.next_tick == moment
    assert job.last_tick == moment
    job.next_tick = None
    job.last_tick = None
    assert job.data.next_tick == 0
    assert job.next_tick is None
    assert job.last_tick is None


@pytest.mark.asyncio
async def test_sync_run_happens_before_await():
    calls = []
    sentinel = object()
    job = CronJob(cron_data(), run_sync=lambda jid, sched: calls.append((jid, sched)))
    pending = job.run(sentinel)
    assert calls == [(JOB_ID, sentinel)]
    assert await pending is True


@pytest.mark.asyncio
async def test_async_run_completes_on_await():
    calls = []

    async def body(jid, sched):
        calls.append((jid, sched))

    job = NonCronJob(repeated_data(), run_async=body, async_job=True)
    result = await job.run("scheduler")
    assert result is True
    assert calls == [(JOB_ID, "scheduler")]


@pytest.mark.asyncio
async def test_async_job_ignores_sync_callable():
    sync_calls = []
    job = CronJob(
        cron_data(),
        run_sync=lambda jid, sched: sync_calls.append(jid),
        async_job=True,
    )
    assert await job.run(None) is True
    assert sync_calls == []


def test_base_class_reads_schedule_from_data():
    job = ScheduledJob(cron_data("0 0 * * * *"))
    assert job.schedule().pattern == "0 0 * * * *"
    assert ScheduledJob(repeated_data(3)).repeated_every() == 3