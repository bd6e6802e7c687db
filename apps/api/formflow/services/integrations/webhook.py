"""Outbound webhook integration."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from formflow.core.structured_logging import build_log_context
from formflow.db.enums import IntegrationKind
from formflow.jobs.utils import safe_url
from formflow.services.integrations.base import Integration

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


class WebhookIntegration(Integration):
    """POST the submission as JSON to ``settings["url"]``."""

    type = IntegrationKind.WEBHOOK.value
    supports_payload_sending = True

    def __init__(self, *, transport: httpx.BaseTransport | None = None, **kwargs):
        super().__init__(**kwargs)
        self.transport = transport

    @property
    def url(self) -> str:
        return self.settings.get("url") or ""

    def build_payload(self, submission) -> dict[str, Any]:
        form = submission.form
        return {
            "submission": {
                "id": str(submission.id) if submission.id else None,
                "title": submission.title,
                "form_id": str(submission.form_id),
                "form_handle": form.handle if form else None,
                "created_at": _serialize(submission.created_at),
                "fields": _serialize(submission.field_values or {}),
            },
            "request": {
                "referrer": self.referrer,
                "ip_address": self.ip_address,
            },
        }

    def send_payload(self, submission) -> bool:
        log_context = build_log_context(submission_id=submission.id, integration=self.handle)
        if not self.url:
            logger.warning("Webhook integration has no URL", extra=log_context)
            return False

        headers = {"Content-Type": "application/json"}
        headers.update(self.settings.get("headers") or {})
        timeout = float(self.settings.get("timeout") or DEFAULT_TIMEOUT_SECONDS)

        with httpx.Client(timeout=timeout, transport=self.transport) as client:
            response = client.post(self.url, json=self.build_payload(submission), headers=headers)

        if response.is_success:
            logger.info("Webhook delivered: %s", safe_url(self.url), extra=log_context)
            return True

        logger.error(
            "Webhook failed: %s status=%s",
            safe_url(self.url),
            response.status_code,
            extra=log_context,
        )
        return False
