"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formflow.db.base import Base
from formflow.db.models._helpers import utcnow
from formflow.db.models.forms import Form


class Submission(Base):
    """A submitted (or in-progress) form response."""

    __tablename__ = "submissions"
    __table_args__ = (
        Index("idx_submissions_form_created", "form_id", "created_at"),
        Index("idx_submissions_incomplete", "is_incomplete", "updated_at"),
        Index("idx_submissions_spam", "is_spam", "created_at"),
        Index("idx_submissions_user", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("forms.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)

    is_incomplete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_spam: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    spam_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Handle -> value; nested rows are lists of mappings
    field_values: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True)

    form: Mapped["Form"] = relationship()

    # Set once spam checks have run for this instance; never persisted
    spam_checked = False

    def mark_spam(self, reason: str) -> None:
        self.is_spam = True
        self.spam_reason = reason

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
