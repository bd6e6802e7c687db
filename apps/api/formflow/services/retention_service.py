"""Retention sweeps: incomplete, spam-limit and per-form data retention."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.orm import Session

from formflow.core.structured_logging import build_log_context
from formflow.db.enums import DataRetention
from formflow.db.models import Form, Submission

logger = logging.getLogger(__name__)

Progress = Callable[[str], None]


@dataclass(frozen=True)
class RetentionInterval:
    """A retention window. Months and years are calendar months."""

    delta: timedelta = timedelta(0)
    months: int = 0

    def subtract_from(self, moment: datetime) -> datetime:
        return _subtract_months(moment, self.months) - self.delta


def _subtract_months(moment: datetime, months: int) -> datetime:
    if not months:
        return moment
    total = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def retention_interval(unit: str, value: int | None) -> RetentionInterval | None:
    """Translate a form's retention setting into an interval; None means keep forever."""
    if not value or value <= 0:
        return None
    if unit == DataRetention.MINUTES.value:
        return RetentionInterval(delta=timedelta(minutes=value))
    if unit == DataRetention.HOURS.value:
        return RetentionInterval(delta=timedelta(hours=value))
    if unit == DataRetention.DAYS.value:
        return RetentionInterval(delta=timedelta(days=value))
    if unit == DataRetention.WEEKS.value:
        return RetentionInterval(delta=timedelta(days=7 * value))
    if unit == DataRetention.MONTHS.value:
        return RetentionInterval(months=value)
    if unit == DataRetention.YEARS.value:
        return RetentionInterval(months=12 * value)
    return None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RetentionPruner:
    """
    Hard-deletes submissions that have aged out.

    Each deletion is committed on its own; a failure is rolled back, logged
    with the submission id, and the sweep moves on.
    """

    def __init__(self, db: Session, settings, now: Callable[[], datetime] = _utcnow):
        self.db = db
        self.settings = settings
        self.now = now

    def prune_incomplete(self, progress: Progress | None = None) -> int:
        """Delete stale incomplete submissions, then trim spam to the limit."""
        max_age = self.settings.MAX_INCOMPLETE_SUBMISSION_AGE
        if max_age <= 0:
            return 0

        cutoff = self.now() - timedelta(days=max_age)
        stale = (
            self.db.query(Submission)
            .filter(
                Submission.is_incomplete.is_(True),
                Submission.deleted_at.is_(None),
                Submission.updated_at < cutoff,
            )
            .all()
        )
        deleted = self._delete_all(stale, "incomplete submission", progress)
        return deleted + self.prune_spam(progress)

    def prune_spam(self, progress: Progress | None = None) -> int:
        """Keep only the newest SPAM_LIMIT spam submissions."""
        if not self.settings.SAVE_SPAM or self.settings.SPAM_LIMIT <= 0:
            return 0

        excess = (
            self.db.query(Submission)
            .filter(Submission.is_spam.is_(True), Submission.deleted_at.is_(None))
            .order_by(Submission.created_at.desc(), Submission.id.desc())
            .offset(self.settings.SPAM_LIMIT)
            .all()
        )
        return self._delete_all(excess, "spam submission", progress)

    def prune_by_retention(self, progress: Progress | None = None) -> int:
        """Delete completed submissions older than their form's retention window."""
        forms = (
            self.db.query(Form)
            .filter(Form.data_retention != DataRetention.FOREVER.value)
            .all()
        )
        deleted = 0
        for form in forms:
            interval = retention_interval(form.data_retention, form.data_retention_value)
            if interval is None:
                continue
            cutoff = interval.subtract_from(self.now())
            expired = (
                self.db.query(Submission)
                .filter(
                    Submission.form_id == form.id,
                    Submission.is_incomplete.is_(False),
                    Submission.deleted_at.is_(None),
                    Submission.created_at < cutoff,
                )
                .all()
            )
            deleted += self._delete_all(expired, "submission", progress)
        return deleted

    def _delete_all(self, submissions: list[Submission], label: str, progress: Progress | None) -> int:
        if submissions and progress:
            progress(f"Preparing to prune {len(submissions)} submissions.")

        deleted = 0
        for submission in submissions:
            submission_id = submission.id
            try:
                self.db.delete(submission)
                self.db.commit()
            except Exception as exc:
                self.db.rollback()
                logger.error(
                    "Failed to prune %s with ID: #%s. %s",
                    label,
                    submission_id,
                    type(exc).__name__,
                    extra=build_log_context(submission_id=submission_id),
                )
                if progress:
                    progress(f"Failed to prune {label} with ID: #{submission_id}. {exc}")
                continue

            deleted += 1
            if progress:
                progress(f"Pruned {label} with ID: #{submission_id}.")
        return deleted
