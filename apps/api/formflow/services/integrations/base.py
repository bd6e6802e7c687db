"""Base class for runtime integration instances."""

from __future__ import annotations

from typing import Any, ClassVar


class Integration:
    """
    A configured integration ready to receive a submission.

    ``referrer`` and ``ip_address`` are set per request before dispatch and
    are never persisted.
    """

    type: ClassVar[str] = ""
    supports_payload_sending: ClassVar[bool] = False

    def __init__(
        self,
        *,
        handle: str,
        name: str = "",
        enabled: bool = True,
        settings: dict[str, Any] | None = None,
    ):
        self.handle = handle
        self.name = name or handle
        self.enabled = enabled
        self.settings = dict(settings or {})
        self.referrer: str | None = None
        self.ip_address: str | None = None

    def send_payload(self, submission) -> bool:
        raise NotImplementedError(f"{type(self).__name__} does not send payloads")

    def to_config(self) -> dict[str, Any]:
        """Serializable form carried in queued task payloads."""
        return {
            "handle": self.handle,
            "name": self.name,
            "enabled": self.enabled,
            "settings": self.settings,
            "referrer": self.referrer,
            "ip_address": self.ip_address,
        }

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "Integration":
        instance = cls(
            handle=config.get("handle", ""),
            name=config.get("name", ""),
            enabled=config.get("enabled", True),
            settings=config.get("settings") or {},
        )
        instance.referrer = config.get("referrer")
        instance.ip_address = config.get("ip_address")
        return instance

    def __repr__(self) -> str:
        return f"<{type(self).__name__} handle={self.handle!r}>"
