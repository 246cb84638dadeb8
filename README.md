# cronsched

Define jobs from cron expressions (with a required seconds field), one-shot
delays, one-shot instants or fixed repeat intervals, and ask each job on every
tick whether it is due. The package has no dependencies outside the standard
library.

## Installing

```
pip install cronsched
```

To run the tests:

```
pip install "cronsched[test]"
pytest
```

## Cron expressions

`cronsched.cron.parse_cron` takes six fields: second, minute, hour, day of
month, month and day of week.

```python
from datetime import datetime, timezone
from cronsched.cron import parse_cron

every_five = parse_cron("1/5 * * * * *")
start = datetime(2024, 1, 1, tzinfo=timezone.utc)
upcoming = every_five.iter_from(start)
print(next(upcoming), next(upcoming))
```

What the parser accepts:

- `*`, single values, ranges `a-b`, lists `a,b,c` and steps `*/n`, `a/n`, `a-b/n`;
- month names `JAN`..`DEC` and weekday names `SUN`..`SAT` (0 and 7 are both Sunday);
- `?` in the day-of-month and day-of-week fields, meaning "any";
- in day of month: `L` (last day) and `nW` (nearest weekday to day n);
- in day of week: `d#n` (the n-th such weekday of the month) and `dL` (the last one);
- the nicknames `@yearly`, `@annually`, `@monthly`, `@weekly`, `@daily`,
  `@midnight` and `@hourly`.

A day is selected only when both the day-of-month and the day-of-week fields
match it.

A `Cron` offers:

- `matches(moment)`: whether the wall-clock time of a datetime is selected;
- `iter_from(start)`: occurrences at or after `start`, in order;
- `iter_after(start)`: occurrences strictly after `start`.

Occurrences keep the time zone of `start`; wall-clock times that do not exist
in that zone (a daylight-saving gap) are skipped. The search stops after the
year 5000.

A malformed expression raises `JobSchedulerError` with `kind` set to
`ErrorKind.PARSE_SCHEDULE` (both in `cronsched.errors`).

## Creating jobs

The functions in `cronsched.factories` return a `cronsched.job.Job`. A
synchronous callable is called as `run(job_id, scheduler)`; an asynchronous
one is a coroutine function with the same arguments.

```python
from datetime import timedelta
from cronsched.factories import cron_job, cron_job_async, one_shot, repeated

def report(job_id, scheduler):
    print("running", job_id)

async def fetch(job_id, scheduler):
    print("fetching", job_id)

every_minute = cron_job("0 * * * * *", report)
every_ten = cron_job_async("*/10 * * * * *", fetch)
once_later = one_shot(timedelta(seconds=10), report)
every_eight = repeated(8, report)
```

- `cron_job`, `cron_job_async`: cron patterns evaluated in UTC;
  `cron_job_tz`, `cron_job_async_tz` take a `tzinfo` as well.
- `one_shot`, `one_shot_async`: run once after a delay (a `timedelta` or a
  number of seconds; whole seconds are kept, negative delays raise `ValueError`).
- `one_shot_at_instant`, `one_shot_at_instant_async`: run once at an instant
  given as a `time.monotonic()` reading.
- `repeated`, `repeated_async`: run every interval, the first time one
  interval from now.

## Using a job

```python
import asyncio

if every_eight.tick():
    asyncio.run(every_eight.run(None))
```

- `guid` is the job's `uuid.UUID`.
- `tick()` returns whether the job is due now. It always records now as the
  last tick; when the job is due it moves the next tick on (the next cron
  occurrence, the next interval, or none for a one-shot job) and counts the
  run. Ticking a job that has no next tick raises `JobSchedulerError` with
  `ErrorKind.NO_NEXT_TICK`.
- `run(scheduler)` calls the job's callable with its id and `scheduler` and
  returns an awaitable that yields `True` when the job is done. A synchronous
  callable runs before `run` returns; an asynchronous one runs when the result
  is awaited.
- `job_data()` returns a copy of the job's `JobStoredData`
  (`cronsched.job_data`); `set_job_data(data)` replaces it and
  `set_stop(stop)` marks the job stopped or started.

`cronsched.job_data` also holds the records a store would keep about jobs and
notifications (`JobStoredData`, `NotificationData`, `JobAndNextTick`,
`ListOfUuids` and others), the `JobState` and `JobType` enums, and `JobUuid`,
which keeps a UUID as two 64-bit halves.

## The builder

`cronsched.builder.JobBuilder` builds cron jobs step by step; each `with_*`
call returns a new builder.

```python
from zoneinfo import ZoneInfo
from cronsched.builder import JobBuilder

job = (
    JobBuilder()
    .with_timezone(ZoneInfo("Africa/Johannesburg"))
    .with_cron_job_type()
    .with_schedule("*/2 * * * * *")
    .with_run_async(fetch)
    .build()
)
```

`with_schedule` raises `ErrorKind.PARSE_SCHEDULE` for a bad pattern.
`build()` raises `JobSchedulerError` with `JOB_TYPE_NOT_SET`,
`RUN_OR_RUN_ASYNC_NOT_SET` or `SCHEDULE_NOT_SET` when a setting is missing,
and `NO_NEXT_TICK` for the repeated and one-shot job types, which are not
built this way; use `cronsched.factories` for them.

## What this package does not do

There is no scheduler that runs on its own: nothing holds a set of jobs,
polls them in the background, stores them or fires state notifications. You
call `tick()` and `run()` yourself, from whatever loop suits your program.
Schedules are cron expressions only; descriptions in plain English are not
understood.