"""Test factories and fake collaborators."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from formflow.core.config import Settings
from formflow.db.enums import IntegrationKind
from formflow.db.models import Form, FormIntegration, Integration, Notification, Submission


def make_settings(**overrides) -> Settings:
    values = {
        "ENV": "test",
        "INTERNAL_SECRET": "test-secret",
        "SPAM_KEYWORDS": "",
        "SAVE_SPAM": True,
        "SPAM_LIMIT": 500,
        "SPAM_EMAIL_NOTIFICATIONS": False,
        "SPAM_LOGGING": False,
        "USE_QUEUE_FOR_NOTIFICATIONS": False,
        "USE_QUEUE_FOR_INTEGRATIONS": False,
        "MAX_INCOMPLETE_SUBMISSION_AGE": 30,
        "RESEND_API_KEY": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@dataclass
class FakeQueue:
    tasks: list = field(default_factory=list)

    def enqueue(self, task, run_at=None):
        self.tasks.append(task)
        return task


@dataclass
class FakeEmailSender:
    result: bool = True
    fail_for: set = field(default_factory=set)
    sent: list = field(default_factory=list)

    def send(self, notification, submission) -> bool:
        if notification.name in self.fail_for:
            raise RuntimeError(f"boom: {notification.name}")
        self.sent.append((notification.name, submission.id))
        return self.result


def make_form(db: Session | None = None, **kwargs) -> Form:
    values = {
        "handle": f"form-{uuid.uuid4().hex[:8]}",
        "title": "Contact",
        "settings": {},
        "fields": [
            {"handle": "name", "type": "text"},
            {"handle": "message", "type": "multi_line_text"},
        ],
    }
    values.update(kwargs)
    form = Form(**values)
    if db is not None:
        db.add(form)
        db.commit()
        db.refresh(form)
    return form


def make_notification(db: Session, form: Form, **kwargs) -> Notification:
    values = {
        "form_id": form.id,
        "name": "Admin",
        "recipient": "admin@example.com",
        "subject": "New submission",
        "body": "{{message}}",
    }
    values.update(kwargs)
    notification = Notification(**values)
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def make_integration(
    db: Session,
    form: Form | None = None,
    *,
    type: str = IntegrationKind.WEBHOOK.value,
    enabled: bool = True,
    link_enabled: bool = True,
    sort_order: int = 0,
    overrides: dict | None = None,
    **kwargs,
) -> Integration:
    values = {
        "handle": f"integration-{uuid.uuid4().hex[:8]}",
        "name": "Integration",
        "type": type,
        "enabled": enabled,
        "settings": {"url": "https://hooks.example.com/in"},
    }
    values.update(kwargs)
    integration = Integration(**values)
    db.add(integration)
    db.flush()
    if form is not None:
        db.add(
            FormIntegration(
                form_id=form.id,
                integration_id=integration.id,
                enabled=link_enabled,
                sort_order=sort_order,
                settings=overrides or {},
            )
        )
    db.commit()
    db.refresh(integration)
    return integration


def build_submission(form: Form, **kwargs) -> Submission:
    """Unsaved submission attached to ``form``."""
    values = {
        "form_id": form.id,
        "title": "Submission",
        "is_incomplete": False,
        "is_spam": False,
        "field_values": {"name": "Jane", "message": "Hello there"},
        "ip_address": "10.0.0.1",
    }
    values.update(kwargs)
    submission = Submission(**values)
    submission.form = form
    return submission


def make_submission(db: Session, form: Form, **kwargs) -> Submission:
    submission = build_submission(form, **kwargs)
    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission
