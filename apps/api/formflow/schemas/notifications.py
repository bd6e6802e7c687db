"""Schemas for notification send conditions."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


ConditionOperator = Literal[
    "equals",
    "not_equals",
    "contains",
    "not_contains",
    "is_empty",
    "is_not_empty",
    "greater_than",
    "less_than",
    "greater_than_or_equal",
    "less_than_or_equal",
]


class NotificationCondition(BaseModel):
    field_key: str = Field(..., min_length=1, max_length=200)
    operator: ConditionOperator
    value: object | None = None


class NotificationConditions(BaseModel):
    """Whether a notification fires for a given submission."""

    enabled: bool = True
    send_rule: Literal["send", "dont_send"] = "send"
    logic: Literal["all", "any"] = "all"
    conditions: list[NotificationCondition] = Field(default_factory=list)
