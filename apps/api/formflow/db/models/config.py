"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from formflow.db.base import Base
from formflow.db.models._helpers import utcnow


class ProjectConfigItem(Base):
    """One path in the project config store (e.g. ``formflow.stencils.<uid>``)."""

    __tablename__ = "project_config"

    path: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)
