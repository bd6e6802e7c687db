"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formflow.db.base import Base
from formflow.db.enums import (
    DEFAULT_DATA_RETENTION,
    FileUploadsAction,
    FormAvailability,
    UserDeletedAction,
)
from formflow.db.models._helpers import utcnow


class Form(Base):
    """Form configuration read by the submission pipeline."""

    __tablename__ = "forms"
    __table_args__ = (Index("idx_forms_data_retention", "data_retention"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    handle: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    settings: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    # Field layout, flattened across pages
    fields: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    require_user: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    availability: Mapped[str] = mapped_column(
        String(20), default=FormAvailability.ALWAYS.value, nullable=False
    )
    availability_from: Mapped[datetime | None] = mapped_column(nullable=True)
    availability_to: Mapped[datetime | None] = mapped_column(nullable=True)
    availability_submissions: Mapped[int | None] = mapped_column(Integer, nullable=True)
    user_deleted_action: Mapped[str] = mapped_column(
        String(20), default=UserDeletedAction.RETAIN.value, nullable=False
    )
    file_uploads_action: Mapped[str] = mapped_column(
        String(20), default=FileUploadsAction.RETAIN.value, nullable=False
    )

    data_retention: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_DATA_RETENTION.value,
        server_default=text(f"'{DEFAULT_DATA_RETENTION.value}'"),
        nullable=False,
    )
    data_retention_value: Mapped[int | None] = mapped_column(Integer, nullable=True)

    template_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    default_status_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    notifications: Mapped[list["Notification"]] = relationship(
        back_populates="form",
        order_by=lambda: [Notification.sort_order, Notification.created_at],
        cascade="all, delete-orphan",
    )

    @property
    def enabled_notifications(self) -> list["Notification"]:
        """Enabled notifications in sort order."""
        return [n for n in self.notifications if n.enabled]


class Notification(Base):
    """Email notification sent for a form's submissions."""

    __tablename__ = "notifications"
    __table_args__ = (Index("idx_notifications_form", "form_id", "sort_order"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("forms.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Delivery template; {{handle}} variables resolve against the submission
    recipient: Mapped[str] = mapped_column(Text, nullable=False, default="")
    subject: Mapped[str] = mapped_column(Text, nullable=False, default="")
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # NotificationConditions schema; NULL means always send
    conditions: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    form: Mapped["Form"] = relationship(back_populates="notifications")
