"""Conditional notification dispatch for submissions."""

from __future__ import annotations

import logging

from formflow.core.hooks import HookContext, HookEvent, HookRegistry
from formflow.core.structured_logging import build_log_context
from formflow.jobs.tasks import SendNotificationTask
from formflow.services import condition_service
from formflow.services.email_sender import EmailSender

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    def __init__(self, settings, queue, email_sender: EmailSender, hooks: HookRegistry):
        self.settings = settings
        self.queue = queue
        self.email_sender = email_sender
        self.hooks = hooks

    def dispatch_all(self, submission) -> None:
        """
        Send or enqueue every enabled notification whose conditions match.

        Order follows the form's notification order. Failures are logged per
        notification and never propagate.
        """
        form = submission.form
        if form is None:
            return

        for notification in form.enabled_notifications:
            log_context = build_log_context(
                submission_id=submission.id,
                form_id=submission.form_id,
                notification_id=notification.id,
            )
            try:
                if not condition_service.evaluate_conditions(notification.conditions, submission):
                    logger.debug("Notification conditions not met", extra=log_context)
                    continue

                # A discarded submission has no id to hand to the worker
                if self.settings.USE_QUEUE_FOR_NOTIFICATIONS and submission.id is not None:
                    self.queue.enqueue(
                        SendNotificationTask(
                            submission_id=submission.id,
                            notification_id=notification.id,
                        )
                    )
                else:
                    self.send_notification(notification, submission)
            except Exception:
                logger.exception(
                    "Failed to dispatch notification for submission %s",
                    submission.id,
                    extra=log_context,
                )

    def send_notification(self, notification, submission) -> bool:
        """Send one notification now. Returns False on failure."""
        outcome = self.hooks.trigger(
            HookEvent.BEFORE_SEND_NOTIFICATION,
            HookContext(submission=submission, notification=notification),
        )
        if not outcome.is_valid:
            return True

        try:
            return self.email_sender.send(notification, submission)
        except Exception:
            logger.exception(
                "Notification email error for submission %s",
                submission.id,
                extra=build_log_context(
                    submission_id=submission.id,
                    notification_id=notification.id,
                ),
            )
            return False
