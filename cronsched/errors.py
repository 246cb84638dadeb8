"""Error kinds raised by the scheduler."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Every distinct failure the scheduler can report."""

    CANT_REMOVE = "CantRemove"
    CANT_ADD = "CantAdd"
    CANT_INIT = "CantInit"
    TICK_ERROR = "TickError"
    CANT_GET_TIME_UNTIL = "CantGetTimeUntil"
    SHUTDOWN = "Shutdown"
    SHUTDOWN_NOTIFIER = "ShutdownNotifier"
    ADD_SHUTDOWN_NOTIFIER = "AddShutdownNotifier"
    REMOVE_SHUTDOWN_NOTIFIER = "RemoveShutdownNotifier"
    FETCH_JOB = "FetchJob"
    SAVE_JOB = "SaveJob"
    START_SCHEDULER = "StartScheduler"
    ERROR_LOADING_GUID_LIST = "ErrorLoadingGuidList"
    ERROR_LOADING_JOB = "ErrorLoadingJob"
    COULD_NOT_GET_TIME_UNTIL_NEXT_TICK = "CouldNotGetTimeUntilNextTick"
    GET_JOB_DATA = "GetJobData"
    GET_JOB_STORE = "GetJobStore"
    JOB_TICK = "JobTick"
    UPDATE_JOB_DATA = "UpdateJobData"
    NO_NEXT_TICK = "NoNextTick"
    CANT_LIST_GUIDS = "CantListGuids"
    CANT_LIST_NEXT_TICKS = "CantListNextTicks"
    NOTIFY_ON_STATE_ERROR = "NotifyOnStateError"
    PARSE_SCHEDULE = "ParseSchedule"
    JOB_TYPE_NOT_SET = "JobTypeNotSet"
    RUN_OR_RUN_ASYNC_NOT_SET = "RunOrRunAsyncNotSet"
    SCHEDULE_NOT_SET = "ScheduleNotSet"
    BUILDER_NEEDS_FIELD = "BuilderNeedsField"
    NATS_COULD_NOT_CONNECT = "NatsCouldNotConnect"
    NATS_COULD_NOT_CREATE_KV_STORE = "NatsCouldNotCreateKvStore"


class JobSchedulerError(Exception):
    """An error raised by the scheduler, identified by its kind."""

    def __init__(self, kind: ErrorKind, detail: str | None = None) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.detail is None:
            return self.kind.value
        return f'{self.kind.value}("{self.detail}")'

    def __repr__(self) -> str:
        return f"JobSchedulerError({self})"