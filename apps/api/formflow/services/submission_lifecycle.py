"""Before/after persistence hooks for a submission.

``after`` tracks two independent facts: whether persistence succeeded and
whether the submission is spam. Spam never counts as a successful
submission, and the spam-email path only ever adds notifications for a
spam submission that was otherwise handled; it never stands in for a save
failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from formflow.core.hooks import HookContext, HookEvent, HookRegistry
from formflow.core.structured_logging import build_log_context
from formflow.services.integration_dispatcher import IntegrationDispatcher, RequestMeta
from formflow.services.notification_dispatcher import NotificationDispatcher
from formflow.services.spam_service import SpamEvaluator

logger = logging.getLogger(__name__)


@dataclass
class LifecycleResult:
    """What ``after`` decided to do."""

    success: bool = False
    notifications_dispatched: bool = False
    integrations_dispatched: bool = False
    handled: bool = False


class SubmissionLifecycle:
    def __init__(
        self,
        settings,
        hooks: HookRegistry,
        spam: SpamEvaluator,
        notifications: NotificationDispatcher,
        integrations: IntegrationDispatcher,
    ):
        self.settings = settings
        self.hooks = hooks
        self.spam = spam
        self.notifications = notifications
        self.integrations = integrations

    def before(self, submission) -> None:
        """Observation point fired before the submission is saved."""
        if submission.is_incomplete:
            self.hooks.trigger(
                HookEvent.BEFORE_INCOMPLETE_SUBMISSION, HookContext(submission=submission)
            )
            return

        self.hooks.trigger(HookEvent.BEFORE_SUBMISSION, HookContext(submission=submission))

    def after(
        self,
        success: bool,
        submission,
        request_meta: RequestMeta | None = None,
    ) -> LifecycleResult:
        """Fire post-save hooks and dispatch notifications / integrations."""
        if submission.is_incomplete:
            outcome = self.hooks.trigger(
                HookEvent.AFTER_INCOMPLETE_SUBMISSION,
                HookContext(submission=submission, success=success),
                handled=True,
            )
            if outcome.handled:
                return LifecycleResult(success=success, handled=True)

        if not submission.spam_checked:
            self.spam.spam_checks(submission)

        persisted_ok = success
        is_spam = submission.is_spam
        if is_spam:
            self.spam.log_spam(submission)

        outcome = self.hooks.trigger(
            HookEvent.AFTER_SUBMISSION,
            HookContext(submission=submission, success=persisted_ok and not is_spam),
        )
        # Hooks may veto success but cannot promote spam into a success
        effective_success = bool(outcome.success) and not is_spam

        result = LifecycleResult(success=effective_success)
        log_context = build_log_context(submission_id=submission.id, form_id=submission.form_id)

        if effective_success:
            self.notifications.dispatch_all(submission)
            self.integrations.dispatch_all(submission, request_meta)
            result.notifications_dispatched = True
            result.integrations_dispatched = True
        elif is_spam and persisted_ok and self.settings.SPAM_EMAIL_NOTIFICATIONS:
            logger.info("Sending notifications for spam submission", extra=log_context)
            self.notifications.dispatch_all(submission)
            result.notifications_dispatched = True

        return result
