"""Job-related enums."""

from enum import Enum


class JobType(str, Enum):
    """Types of background jobs."""

    SEND_NOTIFICATION = "send_notification"
    TRIGGER_INTEGRATION = "trigger_integration"
    PRUNE_SUBMISSIONS = "prune_submissions"  # Incomplete, spam and data-retention sweeps


class JobStatus(str, Enum):
    """Status of background jobs."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
