"""Synchronous hook registry for pipeline observation points.

Hooks replace shared mutable event objects: a callback receives a
``HookContext`` and may return a ``HookResult`` to cancel an action, mark the
event handled, or override the success flag. ``HookRegistry.trigger`` folds
all results into a single ``HookOutcome`` the caller inspects.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class HookEvent(str, Enum):
    """Named observation points."""

    BEFORE_SUBMISSION = "before_submission"
    BEFORE_INCOMPLETE_SUBMISSION = "before_incomplete_submission"
    AFTER_SUBMISSION = "after_submission"
    AFTER_INCOMPLETE_SUBMISSION = "after_incomplete_submission"
    BEFORE_SPAM_CHECK = "before_spam_check"
    AFTER_SPAM_CHECK = "after_spam_check"
    BEFORE_SEND_NOTIFICATION = "before_send_notification"
    BEFORE_TRIGGER_INTEGRATION = "before_trigger_integration"
    BEFORE_SAVE_STENCIL = "before_save_stencil"
    AFTER_SAVE_STENCIL = "after_save_stencil"
    BEFORE_DELETE_STENCIL = "before_delete_stencil"
    BEFORE_APPLY_STENCIL_DELETE = "before_apply_stencil_delete"
    AFTER_DELETE_STENCIL = "after_delete_stencil"


@dataclass
class HookContext:
    """What a hook gets to look at."""

    submission: Any = None
    success: bool | None = None
    notification: Any = None
    integration: Any = None
    stencil: Any = None
    is_new: bool | None = None


@dataclass(frozen=True)
class HookResult:
    """What a hook may ask for. ``None`` fields leave the outcome untouched."""

    cancelled: bool = False
    handled: bool | None = None
    success: bool | None = None


@dataclass
class HookOutcome:
    """Folded result of every hook registered for an event."""

    cancelled: bool = False
    handled: bool = False
    success: bool | None = None

    @property
    def is_valid(self) -> bool:
        return not self.cancelled


Hook = Callable[[HookContext], "HookResult | None"]


class HookRegistry:
    """Per-event ordered callback lists."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = defaultdict(list)

    def register(self, event: HookEvent | str, hook: Hook) -> Hook:
        self._hooks[_event_key(event)].append(hook)
        return hook

    def unregister(self, event: HookEvent | str, hook: Hook) -> None:
        hooks = self._hooks.get(_event_key(event), [])
        if hook in hooks:
            hooks.remove(hook)

    def on(self, event: HookEvent | str) -> Callable[[Hook], Hook]:
        """Decorator form of ``register``."""

        def decorator(hook: Hook) -> Hook:
            return self.register(event, hook)

        return decorator

    def has_hooks(self, event: HookEvent | str) -> bool:
        return bool(self._hooks.get(_event_key(event)))

    def clear(self) -> None:
        self._hooks.clear()

    def trigger(
        self,
        event: HookEvent | str,
        context: HookContext,
        *,
        handled: bool = False,
    ) -> HookOutcome:
        """
        Run hooks in registration order.

        Any cancel wins; the last explicit ``handled`` / ``success`` wins.
        ``success`` starts from ``context.success``.
        """
        outcome = HookOutcome(handled=handled, success=context.success)
        for hook in list(self._hooks.get(_event_key(event), [])):
            result = hook(context)
            if result is None:
                continue
            if result.cancelled:
                outcome.cancelled = True
            if result.handled is not None:
                outcome.handled = result.handled
            if result.success is not None:
                outcome.success = result.success
        if outcome.cancelled:
            logger.debug("Hook cancelled %s", _event_key(event))
        return outcome


def _event_key(event: HookEvent | str) -> str:
    return event.value if isinstance(event, HookEvent) else str(event)


# Process-wide registry used by the API, worker and CLI entry points.
hooks = HookRegistry()
