"""Notification email delivery via Resend."""

from __future__ import annotations

import html
import logging
from typing import Protocol

import httpx
from pydantic import EmailStr, TypeAdapter, ValidationError

from formflow.core.structured_logging import build_log_context
from formflow.services.template_service import build_submission_variables, render_template

logger = logging.getLogger(__name__)

RESEND_SEND_URL = "https://api.resend.com/emails"
RESEND_TIMEOUT_SECONDS = 20.0

_email_adapter = TypeAdapter(EmailStr)


def _single_address(value: str) -> str | None:
    """Return ``value`` if it is exactly one valid address, else None."""
    address = value.strip()
    if not address or "," in address or ";" in address:
        return None
    try:
        return _email_adapter.validate_python(address)
    except ValidationError:
        return None


class EmailSender(Protocol):
    def send(self, notification, submission) -> bool: ...


class ResendEmailSender:
    """
    Render a notification against a submission and send it with Resend.

    If no API key is configured, the email is logged instead of sent.
    """

    def __init__(
        self,
        api_key: str | None,
        from_email: str,
        from_name: str = "",
        timeout: float = RESEND_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings) -> "ResendEmailSender":
        return cls(
            api_key=settings.RESEND_API_KEY,
            from_email=settings.EMAIL_FROM,
            from_name=settings.EMAIL_FROM_NAME,
        )

    def _from_header(self) -> str:
        if self.from_name:
            return f"{self.from_name} <{self.from_email}>"
        return self.from_email

    def build_payload(self, notification, submission) -> dict[str, object]:
        variables = build_submission_variables(submission)
        html_variables = {key: html.escape(value, quote=True) for key, value in variables.items()}

        # Each configured entry renders to at most one address; submitted
        # values can never add recipients of their own
        recipients: list[str] = []
        for entry in (notification.recipient or "").split(","):
            if not entry.strip():
                continue
            address = _single_address(render_template(entry, variables))
            if address is None:
                logger.warning(
                    "Dropping invalid notification recipient",
                    extra=build_log_context(submission_id=submission.id, notification_id=notification.id),
                )
                continue
            recipients.append(address)
        return {
            "from": self._from_header(),
            "to": recipients,
            "subject": render_template(notification.subject or "", variables),
            "html": render_template(notification.body or "", html_variables),
        }

    def send(self, notification, submission) -> bool:
        log_context = build_log_context(
            submission_id=submission.id,
            notification_id=notification.id,
        )
        payload = self.build_payload(notification, submission)
        if not payload["to"]:
            logger.warning("Notification has no recipients", extra=log_context)
            return False

        if not self.api_key:
            logger.info("[DRY RUN] Email send skipped for notification", extra=log_context)
            return True

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        # Discarded submissions have no id to deduplicate on
        keyed = submission.id is not None
        if keyed:
            headers["Idempotency-Key"] = f"notification:{notification.id}:{submission.id}"
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.post(RESEND_SEND_URL, headers=headers, json=payload)

        # Resend uses 409 for idempotency conflicts; the message already exists.
        if 200 <= response.status_code < 300 or (keyed and response.status_code == 409):
            logger.info("Notification email sent", extra=log_context)
            return True

        logger.error(
            "Resend API error: status=%s",
            response.status_code,
            extra=log_context,
        )
        return False
