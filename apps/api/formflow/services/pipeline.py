"""Wires the submission pipeline for one database session."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial

from sqlalchemy.orm import Session

from formflow.core.hooks import HookRegistry
from formflow.services import integration_service
from formflow.services.email_sender import EmailSender, ResendEmailSender
from formflow.services.integration_dispatcher import IntegrationDispatcher
from formflow.services.job_service import JobQueue
from formflow.services.notification_dispatcher import NotificationDispatcher
from formflow.services.spam_service import SpamEvaluator
from formflow.services.submission_lifecycle import SubmissionLifecycle


@dataclass
class Pipeline:
    spam: SpamEvaluator
    notifications: NotificationDispatcher
    integrations: IntegrationDispatcher
    lifecycle: SubmissionLifecycle


def build_pipeline(
    db: Session,
    settings,
    hooks: HookRegistry,
    email_sender: EmailSender | None = None,
) -> Pipeline:
    queue = JobQueue(db)
    spam = SpamEvaluator(settings, hooks)
    notifications = NotificationDispatcher(
        settings,
        queue,
        email_sender or ResendEmailSender.from_settings(settings),
        hooks,
    )
    integrations = IntegrationDispatcher(
        settings,
        queue,
        hooks,
        loader=partial(integration_service.get_enabled_integrations_for_form, db),
    )
    lifecycle = SubmissionLifecycle(settings, hooks, spam, notifications, integrations)
    return Pipeline(
        spam=spam,
        notifications=notifications,
        integrations=integrations,
        lifecycle=lifecycle,
    )
