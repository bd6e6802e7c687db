"""Integration type registry."""

from __future__ import annotations

from typing import Any, Mapping

from formflow.db.enums import IntegrationKind
from formflow.services.integrations.base import Integration
from formflow.services.integrations.captcha import CaptchaIntegration
from formflow.services.integrations.webhook import WebhookIntegration

INTEGRATION_TYPES: Mapping[str, type[Integration]] = {
    IntegrationKind.WEBHOOK.value: WebhookIntegration,
    IntegrationKind.CAPTCHA.value: CaptchaIntegration,
}


def get_integration_class(integration_type: str) -> type[Integration]:
    cls = INTEGRATION_TYPES.get(integration_type)
    if not cls:
        raise ValueError(f"Unknown integration type: {integration_type}")
    return cls


def build_integration(integration_type: str, config: dict[str, Any]) -> Integration:
    return get_integration_class(integration_type).from_config(config)
