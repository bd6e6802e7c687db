"""Runtime integration types."""

from formflow.services.integrations.base import Integration
from formflow.services.integrations.captcha import CaptchaIntegration
from formflow.services.integrations.registry import build_integration, get_integration_class
from formflow.services.integrations.webhook import WebhookIntegration

__all__ = [
    "CaptchaIntegration",
    "Integration",
    "WebhookIntegration",
    "build_integration",
    "get_integration_class",
]
