"""Schemas for stencils (reusable form templates)."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from formflow.db.enums import DataRetention, FileUploadsAction, FormAvailability, UserDeletedAction

HANDLE_PATTERN = r"^[a-zA-Z][a-zA-Z0-9_\-]*$"


class StencilData(BaseModel):
    """Settings blob copied onto a form when a stencil is applied."""

    model_config = ConfigDict(extra="allow")

    settings: dict[str, Any] = Field(default_factory=dict)
    require_user: bool = False
    availability: FormAvailability = FormAvailability.ALWAYS
    availability_from: str | None = None
    availability_to: str | None = None
    availability_submissions: int | None = None
    user_deleted_action: UserDeletedAction = UserDeletedAction.RETAIN
    file_uploads_action: FileUploadsAction = FileUploadsAction.RETAIN
    data_retention: DataRetention = DataRetention.FOREVER
    data_retention_value: int | None = None
    pages: list[dict[str, Any]] = Field(default_factory=list)
    notifications: list[dict[str, Any]] = Field(default_factory=list)


class StencilDraft(BaseModel):
    """In-memory stencil before it is written to the config store."""

    id: UUID | None = None
    name: str = Field(..., min_length=1, max_length=255)
    handle: str = Field(..., min_length=1, max_length=100, pattern=HANDLE_PATTERN)
    data: StencilData = Field(default_factory=StencilData)
    template_id: UUID | None = None
    default_status_id: UUID | None = None
    submit_action_entry_id: UUID | None = None
    deleted_at: datetime | None = None

    _errors: dict[str, list[str]] = PrivateAttr(default_factory=dict)

    def add_error(self, field: str, message: str) -> None:
        self._errors.setdefault(field, []).append(message)

    @property
    def errors(self) -> dict[str, list[str]]:
        return self._errors

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def get_config(self) -> dict[str, Any]:
        """Project-config representation; references are stored by uid."""
        return {
            "name": self.name,
            "handle": self.handle,
            "data": self.data.model_dump(mode="json"),
            "template": str(self.template_id) if self.template_id else None,
            "defaultStatus": str(self.default_status_id) if self.default_status_id else None,
            "submitActionEntry": (
                str(self.submit_action_entry_id) if self.submit_action_entry_id else None
            ),
        }


class StencilWrite(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    handle: str = Field(..., min_length=1, max_length=100)
    data: dict[str, Any] = Field(default_factory=dict)
    template_id: UUID | None = None
    default_status_id: UUID | None = None
    submit_action_entry_id: UUID | None = None


class StencilRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    uid: str
    name: str
    handle: str
    data: dict[str, Any]
    template_id: UUID | None = None
    default_status_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


class StencilOption(BaseModel):
    value: UUID
    label: str
