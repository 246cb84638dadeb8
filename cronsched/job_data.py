"""Stored job and notification records."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from math import floor
from typing import Union

from cronsched.cron import Cron, parse_cron
from cronsched.errors import JobSchedulerError

_U64_MASK = 0xFFFF_FFFF_FFFF_FFFF


class JobState(IntEnum):
    """Lifecycle states that notifications can subscribe to."""

    STOP = 0
    SCHEDULED = 1
    STARTED = 2
    DONE = 3
    REMOVED = 4

    @property
    def str_name(self) -> str:
        return _STATE_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> JobState | None:
        """Look a state up by its stored name, or return None."""
        return next((s for s, n in _STATE_NAMES.items() if n == name), None)


_STATE_NAMES = {
    JobState.STOP: "Stop",
    JobState.SCHEDULED: "Scheduled",
    JobState.STARTED: "Started",
    JobState.DONE: "Done",
    JobState.REMOVED: "Removed",
}


class JobType(IntEnum):
    """How a job decides when to run."""

    CRON = 0
    REPEATED = 1
    ONE_SHOT = 2

    @property
    def str_name(self) -> str:
        return _TYPE_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> JobType | None:
        """Look a job type up by its stored name, or return None."""
        return next((t for t, n in _TYPE_NAMES.items() if n == name), None)


_TYPE_NAMES = {
    JobType.CRON: "Cron",
    JobType.REPEATED: "Repeated",
    JobType.ONE_SHOT: "OneShot",
}


@dataclass
class CronJobSpec:
    schedule: str


@dataclass
class NonCronJobSpec:
    repeating: bool
    repeated_every: int


JobSpec = Union[CronJobSpec, NonCronJobSpec]


@dataclass(frozen=True)
class JobUuid:
    """A UUID stored as two 64-bit halves."""

    id1: int
    id2: int

    @classmethod
    def from_u128(cls, value: int) -> JobUuid:
        return cls(id1=(value >> 64) & _U64_MASK, id2=value & _U64_MASK)

    def as_u128(self) -> int:
        return (self.id1 << 64) + self.id2

    @classmethod
    def from_uuid(cls, value: uuid.UUID) -> JobUuid:
        return cls.from_u128(value.int)

    def to_uuid(self) -> uuid.UUID:
        return uuid.UUID(int=self.as_u128())


def _utc(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def _timestamp(moment: datetime) -> int:
    return floor(moment.timestamp())


@dataclass
class JobStoredData:
    """Everything persisted about a job; ticks are Unix seconds, 0 meaning no next tick."""

    id: JobUuid | None = None
    last_updated: int | None = None
    last_tick: int | None = None
    next_tick: int = 0
    job_type: int = JobType.CRON
    count: int = 0
    extra: bytes = b""
    ran: bool = False
    stopped: bool = False
    job: JobSpec | None = None
    time_offset_seconds: int = 0

    def kind(self) -> JobType:
        return JobType(self.job_type)

    def schedule(self) -> Cron | None:
        """The parsed cron schedule, or None for non-cron jobs and bad patterns."""
        if not isinstance(self.job, CronJobSpec):
            return None
        try:
            return parse_cron(self.job.schedule)
        except JobSchedulerError:
            return None

    def next_tick_utc(self) -> datetime | None:
        return None if self.next_tick == 0 else _utc(self.next_tick)

    def last_tick_utc(self) -> datetime | None:
        return None if self.last_tick is None else _utc(self.last_tick)

    def repeated_every(self) -> int | None:
        if isinstance(self.job, NonCronJobSpec):
            return self.job.repeated_every
        return None

    def set_next_tick(self, tick: datetime | None) -> None:
        self.next_tick = 0 if tick is None else _timestamp(tick)

    def set_last_tick(self, tick: datetime | None) -> None:
        self.last_tick = None if tick is None else _timestamp(tick)


@dataclass
class JobIdAndNotification:
    job_id: JobUuid | None = None
    notification_id: JobUuid | None = None


@dataclass
class NotificationData:
    job_id: JobIdAndNotification | None = None
    job_states: list[JobState] = field(default_factory=list)
    extra: bytes = b""


@dataclass
class NotificationIdAndState:
    notification_id: JobUuid | None = None
    job_state: JobState = JobState.STOP


@dataclass
class JobAndNextTick:
    id: JobUuid | None = None
    job_type: int = JobType.CRON
    next_tick: int = 0
    last_tick: int | None = None

    @staticmethod
    def utc(seconds: int) -> datetime:
        """Unix seconds as an aware UTC datetime."""
        return _utc(seconds)

    def next_tick_utc(self) -> datetime | None:
        return None if self.next_tick == 0 else _utc(self.next_tick)

    def last_tick_utc(self) -> datetime | None:
        return None if self.last_tick is None else _utc(self.last_tick)


@dataclass
class ListOfUuids:
    uuids: list[JobUuid] = field(default_factory=list)

    def uuid_in_list(self, value: uuid.UUID) -> bool:
        return any(item.to_uuid() == value for item in self.uuids)


@dataclass
class JobAndNotifications:
    job_id: JobUuid | None = None
    notification_ids: list[JobUuid] = field(default_factory=list)


@dataclass
class ListOfJobsAndNotifications:
    job_and_notifications: list[JobAndNotifications] = field(default_factory=list)