"""Deferred task kinds and their job payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union
from uuid import UUID

from formflow.db.enums import JobType


@dataclass(frozen=True)
class SendNotificationTask:
    submission_id: UUID
    notification_id: UUID

    job_type: ClassVar[JobType] = JobType.SEND_NOTIFICATION

    def to_payload(self) -> dict[str, Any]:
        return {
            "submission_id": str(self.submission_id),
            "notification_id": str(self.notification_id),
        }


@dataclass(frozen=True)
class TriggerIntegrationTask:
    submission_id: UUID
    integration_type: str
    integration_config: dict[str, Any] = field(default_factory=dict)

    job_type: ClassVar[JobType] = JobType.TRIGGER_INTEGRATION

    def to_payload(self) -> dict[str, Any]:
        return {
            "submission_id": str(self.submission_id),
            "integration_type": self.integration_type,
            "integration": self.integration_config,
        }


@dataclass(frozen=True)
class PruneSubmissionsTask:
    include_incomplete: bool = True
    include_retention: bool = True

    job_type: ClassVar[JobType] = JobType.PRUNE_SUBMISSIONS

    def to_payload(self) -> dict[str, Any]:
        return {
            "include_incomplete": self.include_incomplete,
            "include_retention": self.include_retention,
        }


Task = Union[SendNotificationTask, TriggerIntegrationTask, PruneSubmissionsTask]
