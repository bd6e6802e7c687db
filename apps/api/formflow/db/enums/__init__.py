"""Enum definitions for application constants."""

from formflow.db.enums.defaults import (
    DEFAULT_DATA_RETENTION,
    DEFAULT_JOB_STATUS,
)
from formflow.db.enums.forms import (
    DataRetention,
    FileUploadsAction,
    FormAvailability,
    UserDeletedAction,
)
from formflow.db.enums.integrations import IntegrationKind
from formflow.db.enums.jobs import JobStatus, JobType

__all__ = [
    "DEFAULT_DATA_RETENTION",
    "DEFAULT_JOB_STATUS",
    "DataRetention",
    "FileUploadsAction",
    "FormAvailability",
    "IntegrationKind",
    "JobStatus",
    "JobType",
    "UserDeletedAction",
]
