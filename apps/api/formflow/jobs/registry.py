"""Job handler registry."""

from __future__ import annotations

from typing import Awaitable, Callable, Mapping

from formflow.core.exceptions import UnknownJobTypeError
from formflow.db.enums import JobType
from formflow.jobs.handlers import data_purge, integrations, notifications

JobHandler = Callable[[object, object], Awaitable[None]]

JOB_HANDLERS: Mapping[str, JobHandler] = {
    JobType.SEND_NOTIFICATION.value: notifications.process_send_notification,
    JobType.TRIGGER_INTEGRATION.value: integrations.process_trigger_integration,
    JobType.PRUNE_SUBMISSIONS.value: data_purge.process_prune_submissions,
}


def resolve_job_handler(job_type: str) -> JobHandler:
    handler = JOB_HANDLERS.get(job_type)
    if not handler:
        raise UnknownJobTypeError(f"Unknown job type: {job_type}")
    return handler
