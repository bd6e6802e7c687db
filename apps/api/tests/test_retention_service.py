from datetime import timedelta

import pytest

from formflow.db.enums import DataRetention
from formflow.db.models import Submission
from formflow.services.retention_service import RetentionPruner, retention_interval

from factories import make_form, make_settings, make_submission, utc

NOW = utc(2024, 6, 15, 12, 0)


def _pruner(db, **settings_overrides):
    return RetentionPruner(db, make_settings(**settings_overrides), now=lambda: NOW)


def _remaining_ids(db):
    return {s.id for s in db.query(Submission).all()}


def test_incomplete_pruning_disabled_at_zero_age(db):
    form = make_form(db)
    make_submission(db, form, is_incomplete=True, updated_at=NOW - timedelta(days=400))

    assert _pruner(db, MAX_INCOMPLETE_SUBMISSION_AGE=0).prune_incomplete() == 0
    assert db.query(Submission).count() == 1


def test_incomplete_pruning_deletes_only_stale_incomplete(db):
    form = make_form(db)
    stale = make_submission(db, form, is_incomplete=True, updated_at=NOW - timedelta(days=31))
    fresh = make_submission(db, form, is_incomplete=True, updated_at=NOW - timedelta(days=29))
    complete = make_submission(db, form, updated_at=NOW - timedelta(days=90))
    stale_id = stale.id

    deleted = _pruner(db, MAX_INCOMPLETE_SUBMISSION_AGE=30).prune_incomplete()

    assert deleted == 1
    assert _remaining_ids(db) == {fresh.id, complete.id}
    assert stale_id not in _remaining_ids(db)


def test_incomplete_pruning_reports_progress(db):
    form = make_form(db)
    stale = make_submission(db, form, is_incomplete=True, updated_at=NOW - timedelta(days=60))
    stale_id = stale.id
    messages = []

    _pruner(db).prune_incomplete(messages.append)

    assert messages == [
        "Preparing to prune 1 submissions.",
        f"Pruned incomplete submission with ID: #{stale_id}.",
    ]


def test_spam_limit_keeps_newest(db):
    form = make_form(db)
    spam = [
        make_submission(db, form, is_spam=True, created_at=NOW - timedelta(days=days))
        for days in (1, 2, 3, 4)
    ]
    ham = make_submission(db, form, created_at=NOW - timedelta(days=10))

    deleted = _pruner(db, SPAM_LIMIT=2).prune_spam()

    assert deleted == 2
    assert _remaining_ids(db) == {spam[0].id, spam[1].id, ham.id}


def test_spam_limit_ignored_when_spam_not_saved(db):
    form = make_form(db)
    for _ in range(3):
        make_submission(db, form, is_spam=True)

    assert _pruner(db, SAVE_SPAM=False, SPAM_LIMIT=1).prune_spam() == 0
    assert db.query(Submission).count() == 3


def test_incomplete_sweep_also_trims_spam(db):
    form = make_form(db)
    make_submission(db, form, is_spam=True, created_at=NOW - timedelta(days=1))
    make_submission(db, form, is_spam=True, created_at=NOW - timedelta(days=2))

    assert _pruner(db, SPAM_LIMIT=1).prune_incomplete() == 1


def test_retention_deletes_expired_complete_submissions(db):
    form = make_form(db, data_retention=DataRetention.DAYS.value, data_retention_value=30)
    old = make_submission(db, form, created_at=NOW - timedelta(days=31))
    recent = make_submission(db, form, created_at=NOW - timedelta(days=29))
    old_incomplete = make_submission(db, form, is_incomplete=True, created_at=NOW - timedelta(days=31))
    forever_form = make_form(db)
    ancient = make_submission(db, forever_form, created_at=NOW - timedelta(days=3650))
    old_id = old.id

    deleted = _pruner(db).prune_by_retention()

    assert deleted == 1
    remaining = _remaining_ids(db)
    assert old_id not in remaining
    assert {recent.id, old_incomplete.id, ancient.id} <= remaining


def test_failed_delete_is_logged_and_skipped(db, monkeypatch, caplog):
    form = make_form(db)
    first = make_submission(db, form, is_incomplete=True, updated_at=NOW - timedelta(days=60))
    second = make_submission(db, form, is_incomplete=True, updated_at=NOW - timedelta(days=61))
    broken_id = first.id
    original_delete = db.delete

    def flaky_delete(instance):
        if instance.id == broken_id:
            raise RuntimeError("locked")
        return original_delete(instance)

    monkeypatch.setattr(db, "delete", flaky_delete)
    messages = []

    deleted = _pruner(db).prune_incomplete(messages.append)

    assert deleted == 1
    assert _remaining_ids(db) == {broken_id}
    assert f"Failed to prune incomplete submission with ID: #{broken_id}. locked" in messages
    assert f"Pruned incomplete submission with ID: #{second.id}." in messages
    assert f"Failed to prune incomplete submission with ID: #{broken_id}." in caplog.text


@pytest.mark.parametrize(
    "unit,value,moment,expected",
    [
        (DataRetention.DAYS.value, 2, utc(2024, 3, 3), utc(2024, 3, 1)),
        (DataRetention.WEEKS.value, 1, utc(2024, 3, 8), utc(2024, 3, 1)),
        (DataRetention.HOURS.value, 5, utc(2024, 3, 1, 10), utc(2024, 3, 1, 5)),
        (DataRetention.MINUTES.value, 30, utc(2024, 3, 1, 10, 30), utc(2024, 3, 1, 10)),
        (DataRetention.MONTHS.value, 1, utc(2024, 3, 31), utc(2024, 2, 29)),
        (DataRetention.MONTHS.value, 14, utc(2024, 3, 15), utc(2023, 1, 15)),
        (DataRetention.YEARS.value, 1, utc(2024, 2, 29), utc(2023, 2, 28)),
    ],
)
def test_retention_interval_cutoffs(unit, value, moment, expected):
    assert retention_interval(unit, value).subtract_from(moment) == expected


@pytest.mark.parametrize(
    "unit,value",
    [
        (DataRetention.FOREVER.value, 5),
        (DataRetention.DAYS.value, 0),
        (DataRetention.DAYS.value, None),
        (DataRetention.DAYS.value, -3),
        ("fortnights", 2),
    ],
)
def test_retention_interval_keeps_forever(unit, value):
    assert retention_interval(unit, value) is None
