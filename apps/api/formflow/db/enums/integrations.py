"""Integration-related enums."""

from enum import Enum


class IntegrationKind(str, Enum):
    """Integration implementations known to the registry."""

    WEBHOOK = "webhook"
    CAPTCHA = "captcha"
