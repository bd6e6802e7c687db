"""Integration fan-out for submissions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from formflow.core.hooks import HookContext, HookEvent, HookRegistry
from formflow.core.structured_logging import build_log_context
from formflow.jobs.tasks import TriggerIntegrationTask
from formflow.services.integrations import Integration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestMeta:
    """Provenance of the request that produced a submission."""

    referrer: str | None = None
    ip_address: str | None = None


IntegrationLoader = Callable[[object], list[Integration]]


class IntegrationDispatcher:
    def __init__(self, settings, queue, hooks: HookRegistry, loader: IntegrationLoader):
        self.settings = settings
        self.queue = queue
        self.hooks = hooks
        self.loader = loader

    def dispatch_all(self, submission, request_meta: RequestMeta | None = None) -> None:
        """
        Send or enqueue the submission for every payload-sending integration.

        Failures are logged per integration and never propagate.
        """
        form = submission.form
        if form is None:
            return
        request_meta = request_meta or RequestMeta()

        for integration in self.loader(form):
            if not integration.enabled or not integration.supports_payload_sending:
                continue

            integration.referrer = request_meta.referrer
            integration.ip_address = request_meta.ip_address

            try:
                if self.settings.USE_QUEUE_FOR_INTEGRATIONS and submission.id is not None:
                    self.queue.enqueue(
                        TriggerIntegrationTask(
                            submission_id=submission.id,
                            integration_type=integration.type,
                            integration_config=integration.to_config(),
                        )
                    )
                else:
                    self.send_integration_payload(integration, submission)
            except Exception:
                logger.exception(
                    "Failed to dispatch integration for submission %s",
                    submission.id,
                    extra=build_log_context(
                        submission_id=submission.id,
                        form_id=submission.form_id,
                        integration=integration.handle,
                    ),
                )

    def send_integration_payload(self, integration: Integration, submission) -> bool:
        """Send one integration payload now. Returns False on failure."""
        outcome = self.hooks.trigger(
            HookEvent.BEFORE_TRIGGER_INTEGRATION,
            HookContext(submission=submission, integration=integration),
        )
        if not outcome.is_valid:
            return True

        integration.settings.setdefault("timeout", self.settings.INTEGRATION_TIMEOUT_SECONDS)
        try:
            return integration.send_payload(submission)
        except Exception:
            logger.exception(
                "Integration error for submission %s",
                submission.id,
                extra=build_log_context(submission_id=submission.id, integration=integration.handle),
            )
            return False
