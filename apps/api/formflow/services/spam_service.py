"""Keyword / IP spam classification for submissions."""

from __future__ import annotations

import json
import logging
from typing import Any

from formflow.core.exceptions import TemplateSyntaxError
from formflow.core.hooks import HookContext, HookEvent, HookRegistry
from formflow.core.structured_logging import build_log_context
from formflow.services.template_service import (
    build_submission_variables,
    is_template,
    render_template,
)

logger = logging.getLogger(__name__)


def get_array_from_multiline(value: str | None) -> list[str]:
    """Split a multi-line string into trimmed, non-empty lines."""
    if not value:
        return []
    return [line.strip() for line in value.splitlines() if line.strip()]


def get_content_as_string(value: Any) -> str:
    """Flatten field values (nested rows included) into one string."""
    if value is None:
        return ""
    if isinstance(value, dict):
        parts = [get_content_as_string(v) for v in value.values()]
    elif isinstance(value, (list, tuple)):
        parts = [get_content_as_string(v) for v in value]
    else:
        return str(value)
    return " ".join(part for part in parts if part)


class SpamEvaluator:
    """Classifies submissions as spam from keyword and IP rules."""

    def __init__(self, settings, hooks: HookRegistry):
        self.settings = settings
        self.hooks = hooks

    def expand_rules(self, rules: list[str], submission) -> list[str]:
        """
        Expand template rules into literal keywords, keeping input order.

        A rule that fails to render contributes no keywords.
        """
        variables: dict[str, str] | None = None
        expanded: list[str] = []
        for rule in rules:
            if not rule or not rule.strip():
                continue
            if not is_template(rule):
                expanded.append(rule.strip())
                continue
            if variables is None:
                variables = build_submission_variables(submission)
            try:
                rendered = render_template(rule, variables, strict=True)
            except TemplateSyntaxError:
                logger.warning(
                    "Skipping malformed spam keyword rule",
                    extra=build_log_context(submission_id=submission.id),
                )
                continue
            expanded.extend(get_array_from_multiline(rendered))
        return expanded

    def evaluate(self, submission, form, spam_keyword_rules: list[str]):
        """Mark ``submission`` as spam on the first matching rule. Idempotent."""
        # Already classified (e.g. by a captcha)
        if submission.is_spam:
            return submission

        keywords = self.expand_rules(spam_keyword_rules, submission)
        if not keywords:
            return submission

        content = get_content_as_string(submission.field_values or {}).lower()
        ip_address = submission.ip_address

        for keyword in keywords:
            if keyword.lower() in content:
                submission.mark_spam(f'Contains banned keyword: "{keyword}"')
                break
            if ip_address and keyword == ip_address:
                submission.mark_spam(f'Contains banned IP: "{keyword}"')
                break

        return submission

    def spam_checks(self, submission, form=None):
        """Run the configured keyword rules with the spam-check hooks around them."""
        form = form if form is not None else submission.form
        self.hooks.trigger(HookEvent.BEFORE_SPAM_CHECK, HookContext(submission=submission))

        self.evaluate(submission, form, self.settings.spam_keyword_list)
        submission.spam_checked = True

        self.hooks.trigger(HookEvent.AFTER_SPAM_CHECK, HookContext(submission=submission))
        return submission

    def log_spam(self, submission) -> None:
        """Write the spam reason and submitted content to the log, when enabled."""
        if not self.settings.SPAM_LOGGING:
            return

        content = {
            handle: value
            for handle, value in (submission.field_values or {}).items()
            if value not in (None, "", [], {})
        }
        logger.info(
            'Submission marked as spam - "%s" - %s.',
            submission.spam_reason,
            json.dumps(content, default=str),
            extra=build_log_context(submission_id=submission.id, form_id=submission.form_id),
        )
