"""Template variable substitution for notifications and spam rules."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from formflow.core.exceptions import TemplateSyntaxError

VARIABLE_PATTERN = re.compile(r"{{\s*([a-zA-Z0-9_.]+)\s*}}")


def is_template(value: str) -> bool:
    """Rules and templates are only rendered when they contain a brace."""
    return "{" in value


def render_template(template: str, variables: dict[str, str], *, strict: bool = False) -> str:
    """
    Render ``{{variable_name}}`` placeholders.

    Missing variables are replaced with empty string. With ``strict``, any
    brace left over after substitution raises ``TemplateSyntaxError``.
    """
    def replace_var(match: re.Match) -> str:
        return variables.get(match.group(1), "")

    rendered = VARIABLE_PATTERN.sub(replace_var, template)
    if strict:
        leftover = VARIABLE_PATTERN.sub("", template)
        if "{" in leftover or "}" in leftover:
            raise TemplateSyntaxError(f"Malformed template expression: {template!r}")
    return rendered


def stringify_value(value: Any) -> str:
    """Render a field value the way it reads in an email."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return ", ".join(stringify_value(v) for v in value.values() if v not in (None, ""))
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify_value(v) for v in value if v not in (None, ""))
    return str(value)


def build_submission_variables(submission: Any) -> dict[str, str]:
    """Flat template variables for a submission context."""
    form = getattr(submission, "form", None)
    variables: dict[str, str] = {
        "submission_id": str(submission.id) if submission.id else "",
        "submission_title": submission.title or "",
        "ip_address": submission.ip_address or "",
        "form_handle": form.handle if form else "",
        "form_title": form.title if form else "",
        "date_created": submission.created_at.isoformat() if submission.created_at else "",
    }
    for handle, value in (submission.field_values or {}).items():
        variables[handle] = stringify_value(value)
        if isinstance(value, dict):
            for key, sub_value in value.items():
                variables[f"{handle}.{key}"] = stringify_value(sub_value)
    return variables
