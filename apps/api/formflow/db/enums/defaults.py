"""Default enum values used by server defaults."""

from formflow.db.enums.forms import DataRetention
from formflow.db.enums.jobs import JobStatus

DEFAULT_JOB_STATUS = JobStatus.PENDING
DEFAULT_DATA_RETENTION = DataRetention.FOREVER
