"""Schemas for public submissions."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class SubmissionCreate(BaseModel):
    fields: dict[str, Any] = Field(default_factory=dict)
    title: str | None = Field(None, max_length=255)
    is_incomplete: bool = False


class SubmissionCreated(BaseModel):
    success: bool
    id: UUID | None = None
    is_incomplete: bool = False
    created_at: datetime | None = None
