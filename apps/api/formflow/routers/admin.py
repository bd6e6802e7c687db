"""
Admin endpoints for form previews, stencil application and user content.

Protected by X-Internal-Secret header. The host application calls these
when an editor previews a form, picks a stencil, or deletes a user.
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from formflow.core.deps import get_db, verify_internal_secret
from formflow.db.models import Form, Submission
from formflow.routers.stencils import get_stencil_service
from formflow.schemas.forms import FormRead
from formflow.services import form_service, submission_service
from formflow.services.fake_data_service import populate_fake_submission
from formflow.services.stencil_service import StencilService

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(verify_internal_secret)],
)


# =============================================================================
# Schemas
# =============================================================================


class FormPreview(BaseModel):
    form_id: UUID
    field_values: dict[str, Any]


class UserContentRead(BaseModel):
    user_id: UUID
    submissions: int
    summary: list[str]


class UserSubmissionsDelete(BaseModel):
    inheritor_id: UUID | None = None


class UserSubmissionsResult(BaseModel):
    affected: int


# =============================================================================
# Forms
# =============================================================================


def _get_form_or_404(db: Session, form_id: UUID) -> Form:
    form = form_service.get_form_by_id(db, form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@router.get("/forms/{form_id}/preview", response_model=FormPreview)
def preview_form(form_id: UUID, db: Session = Depends(get_db)):
    """Fake field values for previewing the form's notifications."""
    form = _get_form_or_404(db, form_id)
    # Transient; never added to the session
    submission = Submission(form_id=form.id)
    populate_fake_submission(submission, form.fields or [])
    return FormPreview(form_id=form.id, field_values=submission.field_values)


@router.post("/forms/{form_id}/apply-stencil/{stencil_id}", response_model=FormRead)
def apply_stencil(
    form_id: UUID,
    stencil_id: UUID,
    db: Session = Depends(get_db),
    service: StencilService = Depends(get_stencil_service),
):
    form = _get_form_or_404(db, form_id)
    stencil = service.get_stencil_by_id(stencil_id)
    if not stencil:
        raise HTTPException(status_code=404, detail="Stencil not found")

    service.apply_stencil(form, stencil)
    db.commit()
    db.refresh(form)
    return form


# =============================================================================
# User content
# =============================================================================


@router.get("/users/{user_id}/content", response_model=UserContentRead)
def get_user_content(user_id: UUID, db: Session = Depends(get_db)):
    return UserContentRead(
        user_id=user_id,
        submissions=submission_service.count_user_submissions(db, user_id),
        summary=submission_service.describe_user_content(db, user_id),
    )


@router.post("/users/{user_id}/delete-submissions", response_model=UserSubmissionsResult)
def delete_user_submissions(
    user_id: UUID,
    data: UserSubmissionsDelete | None = None,
    db: Session = Depends(get_db),
):
    """Transfer submissions to ``inheritor_id``, or soft-delete them."""
    inheritor_id = data.inheritor_id if data else None
    if inheritor_id == user_id:
        raise HTTPException(status_code=422, detail="Inheritor must be a different user")
    affected = submission_service.delete_user_submissions(db, user_id, inheritor_id)
    return UserSubmissionsResult(affected=affected)


@router.post("/users/{user_id}/restore-submissions", response_model=UserSubmissionsResult)
def restore_user_submissions(user_id: UUID, db: Session = Depends(get_db)):
    return UserSubmissionsResult(affected=submission_service.restore_user_submissions(db, user_id))
