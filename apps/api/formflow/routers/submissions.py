"""Public submission endpoint."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from formflow.core.config import Settings
from formflow.core.deps import get_client_ip, get_db, get_email_sender, get_hooks, get_settings
from formflow.core.hooks import HookRegistry
from formflow.core.structured_logging import build_log_context
from formflow.db.models import Submission
from formflow.schemas.submissions import SubmissionCreate, SubmissionCreated
from formflow.services import form_service
from formflow.services.email_sender import EmailSender
from formflow.services.integration_dispatcher import RequestMeta
from formflow.services.pipeline import build_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forms", tags=["submissions"])


@router.post("/{form_id}/submissions", response_model=SubmissionCreated)
def submit_form(
    form_id: UUID,
    data: SubmissionCreate,
    request: Request,
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings),
    hook_registry: HookRegistry = Depends(get_hooks),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """
    Accept a submission and run it through the pipeline.

    Spam is only persisted when SAVE_SPAM is on; otherwise it is discarded
    and the response still reports success.
    """
    form = form_service.get_form_by_id(db, form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")

    ip_address = get_client_ip(request, app_settings)
    submission = Submission(
        form_id=form.id,
        title=data.title,
        is_incomplete=data.is_incomplete,
        is_spam=False,
        field_values=data.fields,
        ip_address=ip_address,
    )
    submission.form = form

    pipeline = build_pipeline(db, app_settings, hook_registry, email_sender)
    if not submission.is_incomplete:
        pipeline.spam.spam_checks(submission, form)

    pipeline.lifecycle.before(submission)

    persisted = False
    if submission.is_spam and not app_settings.SAVE_SPAM:
        success = True
    else:
        try:
            db.add(submission)
            db.commit()
            db.refresh(submission)
            success = persisted = True
        except SQLAlchemyError:
            db.rollback()
            logger.exception(
                "Failed to save submission",
                extra=build_log_context(form_id=form.id, route=request.url.path, method="POST"),
            )
            success = False

    pipeline.lifecycle.after(
        success,
        submission,
        RequestMeta(referrer=request.headers.get("referer"), ip_address=ip_address),
    )

    if not success:
        raise HTTPException(status_code=500, detail="Submission could not be saved")

    return SubmissionCreated(
        success=True,
        id=submission.id if persisted else None,
        is_incomplete=submission.is_incomplete,
        created_at=submission.created_at if persisted else None,
    )
