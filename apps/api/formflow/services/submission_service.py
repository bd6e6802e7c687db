"""Submission queries and user-ownership operations."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from formflow.core.structured_logging import build_log_context
from formflow.db.models import Submission

logger = logging.getLogger(__name__)


def query_submissions(
    db: Session,
    *,
    form_id: UUID | None = None,
    user_id: UUID | None = None,
    is_incomplete: bool | None = None,
    is_spam: bool | None = None,
    created_before: datetime | None = None,
    trashed: bool = False,
):
    """Base submission query. Soft-deleted rows are only returned with ``trashed``."""
    query = db.query(Submission)
    if trashed:
        query = query.filter(Submission.deleted_at.is_not(None))
    else:
        query = query.filter(Submission.deleted_at.is_(None))
    if form_id:
        query = query.filter(Submission.form_id == form_id)
    if user_id:
        query = query.filter(Submission.user_id == user_id)
    if is_incomplete is not None:
        query = query.filter(Submission.is_incomplete.is_(is_incomplete))
    if is_spam is not None:
        query = query.filter(Submission.is_spam.is_(is_spam))
    if created_before:
        query = query.filter(Submission.created_at < created_before)
    return query


def get_submission_by_id(db: Session, submission_id: UUID) -> Submission | None:
    return query_submissions(db).filter(Submission.id == submission_id).first()


def count_user_submissions(db: Session, user_id: UUID) -> int:
    return query_submissions(db, user_id=user_id).count()


def describe_user_content(db: Session, user_id: UUID) -> list[str]:
    """Content summary lines shown before a user is deleted."""
    count = count_user_submissions(db, user_id)
    if not count:
        return []
    return ["1 form submission" if count == 1 else f"{count} form submissions"]


def delete_user_submissions(
    db: Session,
    user_id: UUID,
    inheritor_id: UUID | None = None,
) -> int:
    """
    Handle a deleted user's submissions.

    With an inheritor, ownership moves in one bulk update. Otherwise each
    submission is soft-deleted; failures are logged and skipped.
    """
    if inheritor_id:
        count = (
            db.query(Submission)
            .filter(Submission.user_id == user_id)
            .update({Submission.user_id: inheritor_id}, synchronize_session=False)
        )
        db.commit()
        return count

    deleted = 0
    for submission in query_submissions(db, user_id=user_id).all():
        submission_id = submission.id
        try:
            submission.deleted_at = datetime.now(timezone.utc)
            db.commit()
            deleted += 1
        except Exception:
            db.rollback()
            logger.exception(
                "Failed to delete user submission with ID: #%s.",
                submission_id,
                extra=build_log_context(submission_id=submission_id),
            )
    return deleted


def restore_user_submissions(db: Session, user_id: UUID) -> int:
    """Undo the soft delete for a restored user's submissions."""
    restored = 0
    for submission in query_submissions(db, user_id=user_id, trashed=True).all():
        submission_id = submission.id
        try:
            submission.deleted_at = None
            db.commit()
            restored += 1
        except Exception:
            db.rollback()
            logger.exception(
                "Failed to restore user submission with ID: #%s.",
                submission_id,
                extra=build_log_context(submission_id=submission_id),
            )
    return restored
