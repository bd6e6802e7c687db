"""Form lookups."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from formflow.db.models import Form


def get_form_by_id(db: Session, form_id: UUID) -> Form | None:
    return db.query(Form).filter(Form.id == form_id).first()

