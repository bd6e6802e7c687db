"""Notification send job handlers."""

from __future__ import annotations

import logging
from uuid import UUID

from formflow.db.models import Notification

logger = logging.getLogger(__name__)


async def process_send_notification(db, job) -> None:
    """Send one queued notification email."""
    from formflow.core.config import settings
    from formflow.core.hooks import hooks
    from formflow.services import submission_service
    from formflow.services.pipeline import build_pipeline

    payload = job.payload or {}
    submission_id = payload.get("submission_id")
    notification_id = payload.get("notification_id")
    if not submission_id or not notification_id:
        raise Exception("Missing submission_id or notification_id in job payload")

    submission = submission_service.get_submission_by_id(db, UUID(submission_id))
    if not submission:
        logger.info("Submission %s no longer exists; skipping notification", submission_id)
        return

    notification = db.query(Notification).filter(Notification.id == UUID(notification_id)).first()
    if not notification:
        logger.info("Notification %s no longer exists; skipping", notification_id)
        return

    pipeline = build_pipeline(db, settings, hooks)
    if not pipeline.notifications.send_notification(notification, submission):
        raise Exception(f"Notification {notification_id} failed to send")
