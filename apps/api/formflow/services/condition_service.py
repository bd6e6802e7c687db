"""Notification condition evaluation."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from formflow.schemas.notifications import NotificationCondition, NotificationConditions

logger = logging.getLogger(__name__)


def parse_conditions(raw: dict | NotificationConditions | None) -> NotificationConditions | None:
    if raw is None or isinstance(raw, NotificationConditions):
        return raw
    try:
        return NotificationConditions.model_validate(raw)
    except ValidationError:
        logger.warning("Invalid notification conditions; treating as unconditional")
        return None


def evaluate_conditions(raw: dict | NotificationConditions | None, submission: Any) -> bool:
    """
    Return True when the notification should be sent.

    Unconfigured or disabled conditions always send.
    """
    conditions = parse_conditions(raw)
    if not conditions or not conditions.enabled or not conditions.conditions:
        return True

    values = submission.field_values or {}
    results = [
        _evaluate_condition(condition, resolve_field_value(values, condition.field_key))
        for condition in conditions.conditions
    ]
    matched = all(results) if conditions.logic == "all" else any(results)
    return matched if conditions.send_rule == "send" else not matched


def resolve_field_value(values: dict, field_key: str) -> Any:
    """Look up ``field_key``; dotted keys walk into nested mappings."""
    key = field_key.strip().strip("{}").strip()
    if key.startswith("field."):
        key = key[len("field."):]
    current: Any = values
    for part in key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def _to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _evaluate_condition(condition: NotificationCondition, value: Any) -> bool:
    operator = condition.operator
    expected = condition.value

    if operator == "is_empty":
        return _is_empty(value)
    if operator == "is_not_empty":
        return not _is_empty(value)

    if operator == "equals":
        if isinstance(value, list):
            return expected in value
        return str(value) == str(expected) if value is not None else expected is None
    if operator == "not_equals":
        if isinstance(value, list):
            return expected not in value
        return str(value) != str(expected) if value is not None else expected is not None
    if operator == "contains":
        if isinstance(value, list):
            return expected in value
        return expected is not None and str(expected).lower() in str(value or "").lower()
    if operator == "not_contains":
        if isinstance(value, list):
            return expected not in value
        return expected is None or str(expected).lower() not in str(value or "").lower()

    left = _to_float(value)
    right = _to_float(expected)
    if left is None or right is None:
        return False
    if operator == "greater_than":
        return left > right
    if operator == "less_than":
        return left < right
    if operator == "greater_than_or_equal":
        return left >= right
    if operator == "less_than_or_equal":
        return left <= right

    return False
