"""Captcha integrations: configuration only, no payload sending."""

from __future__ import annotations

from formflow.db.enums import IntegrationKind
from formflow.services.integrations.base import Integration


class CaptchaIntegration(Integration):
    type = IntegrationKind.CAPTCHA.value
    supports_payload_sending = False
