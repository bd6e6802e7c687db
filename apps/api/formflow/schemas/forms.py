"""Schemas for form field layouts."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


FieldType = Literal[
    "text",
    "multi_line_text",
    "email",
    "number",
    "date",
    "dropdown",
    "checkboxes",
    "radio",
    "name",
    "phone",
    "address",
    "recipients",
    "group",
    "entries",
    "categories",
    "tags",
    "users",
    "products",
    "variants",
    "file_upload",
    "hidden",
]

RecipientsDisplayType = Literal["hidden", "dropdown", "checkboxes", "radio"]


class FieldOption(BaseModel):
    label: str
    value: str


class FieldDefinition(BaseModel):
    model_config = ConfigDict(extra="allow")

    handle: str = Field(..., min_length=1, max_length=100)
    label: str | None = None
    type: str = "text"
    options: list[FieldOption] = Field(default_factory=list)
    multi: bool = False
    display_type: RecipientsDisplayType | None = None
    use_multiple_fields: bool = False
    country_enabled: bool = False
    # Nested layout for group fields
    fields: list["FieldDefinition"] = Field(default_factory=list)


class FormPage(BaseModel):
    model_config = ConfigDict(extra="allow")

    label: str | None = None
    fields: list[FieldDefinition] = Field(default_factory=list)


def flatten_pages(pages: list[dict] | list[FormPage]) -> list[dict]:
    """Return every field definition across pages, in page order."""
    fields: list[dict] = []
    for page in pages:
        parsed = page if isinstance(page, FormPage) else FormPage.model_validate(page)
        fields.extend(field.model_dump(exclude_none=True) for field in parsed.fields)
    return fields


class FormRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    handle: str
    title: str
    settings: dict[str, Any]
    fields: list[dict[str, Any]]
    require_user: bool
    availability: str
    availability_from: datetime | None = None
    availability_to: datetime | None = None
    data_retention: str
    data_retention_value: int | None = None
    template_id: UUID | None = None
    default_status_id: UUID | None = None
