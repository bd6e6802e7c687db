"""
Internal endpoints for scheduled/cron operations.

Protected by X-Internal-Secret header.
Call from external cron.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from formflow.core.config import Settings
from formflow.core.deps import get_db, get_settings, verify_internal_secret
from formflow.jobs.tasks import PruneSubmissionsTask
from formflow.services.job_service import JobQueue
from formflow.services.retention_service import RetentionPruner

router = APIRouter(
    prefix="/internal/scheduled",
    tags=["internal"],
    dependencies=[Depends(verify_internal_secret)],
)


class PruneResponse(BaseModel):
    deleted: int


class JobScheduledResponse(BaseModel):
    job_id: str


@router.post("/prune-incomplete", response_model=PruneResponse)
def prune_incomplete(
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings),
):
    """Delete stale incomplete submissions and trim spam to SPAM_LIMIT."""
    return PruneResponse(deleted=RetentionPruner(db, app_settings).prune_incomplete())


@router.post("/prune-retention", response_model=PruneResponse)
def prune_retention(
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings),
):
    """Delete submissions older than their form's data-retention window."""
    return PruneResponse(deleted=RetentionPruner(db, app_settings).prune_by_retention())


@router.post("/prune-submissions", response_model=JobScheduledResponse)
def schedule_prune(db: Session = Depends(get_db)):
    """Hand both sweeps to the worker."""
    job = JobQueue(db).enqueue(PruneSubmissionsTask())
    return JobScheduledResponse(job_id=str(job.id))
