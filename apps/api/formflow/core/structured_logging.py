"""Structured logging helpers (PII-safe)."""

from typing import Any


def build_log_context(
    *,
    submission_id: Any = None,
    form_id: Any = None,
    notification_id: Any = None,
    integration: str | None = None,
    job_id: Any = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict for ``extra=``."""
    context: dict[str, Any] = {}
    if submission_id:
        context["submission_id"] = str(submission_id)
    if form_id:
        context["form_id"] = str(form_id)
    if notification_id:
        context["notification_id"] = str(notification_id)
    if integration:
        context["integration"] = integration
    if job_id:
        context["job_id"] = str(job_id)
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
