"""Submission pruning job handlers."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


async def process_prune_submissions(db, job) -> None:
    """Run the retention sweeps selected in the job payload."""
    from formflow.core.config import settings
    from formflow.services.retention_service import RetentionPruner

    payload = job.payload or {}
    pruner = RetentionPruner(db, settings)

    deleted = 0
    if payload.get("include_incomplete", True):
        deleted += pruner.prune_incomplete()
    if payload.get("include_retention", True):
        deleted += pruner.prune_by_retention()
    logger.info("Pruned %s submissions (job %s)", deleted, job.id)
