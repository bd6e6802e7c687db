"""Integration payload job handlers."""

from __future__ import annotations

import logging
from uuid import UUID

from formflow.services.integrations import build_integration

logger = logging.getLogger(__name__)


async def process_trigger_integration(db, job) -> None:
    """Send a submission to the integration captured in the job payload."""
    from formflow.core.config import settings
    from formflow.core.hooks import hooks
    from formflow.services import submission_service
    from formflow.services.pipeline import build_pipeline

    payload = job.payload or {}
    submission_id = payload.get("submission_id")
    integration_type = payload.get("integration_type")
    if not submission_id or not integration_type:
        raise Exception("Missing submission_id or integration_type in job payload")

    submission = submission_service.get_submission_by_id(db, UUID(submission_id))
    if not submission:
        logger.info("Submission %s no longer exists; skipping integration", submission_id)
        return

    integration = build_integration(integration_type, payload.get("integration") or {})
    pipeline = build_pipeline(db, settings, hooks)
    if not pipeline.integrations.send_integration_payload(integration, submission):
        raise Exception(f"Integration {integration.handle} failed to send")
