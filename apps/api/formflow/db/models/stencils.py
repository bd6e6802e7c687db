"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from formflow.db.base import Base
from formflow.db.models._helpers import utcnow


class Stencil(Base):
    """Reusable form template, written only by the config-applied handler."""

    __tablename__ = "stencils"
    __table_args__ = (
        Index("idx_stencils_handle", "handle"),
        Index("uq_stencils_uid", "uid", unique=True),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    uid: Mapped[str] = mapped_column(String(36), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Unique among non-deleted stencils only; enforced by the stencil service
    handle: Mapped[str] = mapped_column(String(100), nullable=False)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    template_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    default_status_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    submit_action_entry_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
