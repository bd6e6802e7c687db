import logging
from dataclasses import dataclass, field

from formflow.core.hooks import HookEvent, HookResult
from formflow.services.integration_dispatcher import RequestMeta
from formflow.services.spam_service import SpamEvaluator
from formflow.services.submission_lifecycle import SubmissionLifecycle

from factories import build_submission, make_form, make_settings, make_submission


@dataclass
class RecordingDispatcher:
    calls: list = field(default_factory=list)

    def dispatch_all(self, submission, request_meta=None):
        self.calls.append((submission, request_meta))


def _lifecycle(hooks, **settings_overrides):
    settings = make_settings(**settings_overrides)
    notifications = RecordingDispatcher()
    integrations = RecordingDispatcher()
    lifecycle = SubmissionLifecycle(
        settings, hooks, SpamEvaluator(settings, hooks), notifications, integrations
    )
    return lifecycle, notifications, integrations


def test_successful_submission_dispatches_everything(db, hooks):
    lifecycle, notifications, integrations = _lifecycle(hooks)
    submission = make_submission(db, make_form(db))
    meta = RequestMeta(referrer="https://example.com", ip_address="10.0.0.1")

    result = lifecycle.after(True, submission, meta)

    assert result.success is True
    assert len(notifications.calls) == 1
    assert integrations.calls == [(submission, meta)]


def test_failed_save_never_dispatches(db, hooks):
    lifecycle, notifications, integrations = _lifecycle(hooks, SPAM_EMAIL_NOTIFICATIONS=True)
    submission = build_submission(make_form(db))

    result = lifecycle.after(False, submission)

    assert result.success is False
    assert notifications.calls == []
    assert integrations.calls == []


def test_spam_submission_dispatches_nothing_by_default(db, hooks):
    lifecycle, notifications, integrations = _lifecycle(hooks)
    submission = make_submission(db, make_form(db))
    submission.mark_spam("Contains banned keyword")
    submission.spam_checked = True

    result = lifecycle.after(True, submission)

    assert result.success is False
    assert notifications.calls == []
    assert integrations.calls == []


def test_spam_email_setting_sends_notifications_only(db, hooks):
    lifecycle, notifications, integrations = _lifecycle(hooks, SPAM_EMAIL_NOTIFICATIONS=True)
    submission = make_submission(db, make_form(db))
    submission.mark_spam("Contains banned keyword")
    submission.spam_checked = True

    result = lifecycle.after(True, submission)

    assert result.success is False
    assert result.notifications_dispatched is True
    assert len(notifications.calls) == 1
    assert integrations.calls == []


def test_spam_email_setting_does_not_rescue_a_failed_save(db, hooks):
    lifecycle, notifications, _ = _lifecycle(hooks, SPAM_EMAIL_NOTIFICATIONS=True)
    submission = build_submission(make_form(db))
    submission.mark_spam("Contains banned keyword")
    submission.spam_checked = True

    lifecycle.after(False, submission)

    assert notifications.calls == []


def test_spam_checks_run_when_not_already_checked(db, hooks):
    lifecycle, notifications, _ = _lifecycle(hooks, SPAM_KEYWORDS="casino")
    submission = make_submission(db, make_form(db), field_values={"message": "Best CASINO deals"})

    result = lifecycle.after(True, submission)

    assert submission.is_spam is True
    assert submission.spam_reason == 'Contains banned keyword: "casino"'
    assert result.success is False
    assert notifications.calls == []


def test_spam_is_logged_when_enabled(db, hooks, caplog):
    lifecycle, _, _ = _lifecycle(hooks, SPAM_KEYWORDS="casino", SPAM_LOGGING=True)
    submission = make_submission(db, make_form(db), field_values={"message": "casino", "empty": ""})

    with caplog.at_level(logging.INFO, logger="formflow.services.spam_service"):
        lifecycle.after(True, submission)

    messages = [record.getMessage() for record in caplog.records]
    assert 'Submission marked as spam - "Contains banned keyword: "casino"" - {"message": "casino"}.' in messages


def test_after_submission_hook_can_veto_success(db, hooks):
    lifecycle, notifications, integrations = _lifecycle(hooks)
    submission = make_submission(db, make_form(db))
    hooks.register(HookEvent.AFTER_SUBMISSION, lambda ctx: HookResult(success=False))

    result = lifecycle.after(True, submission)

    assert result.success is False
    assert notifications.calls == []
    assert integrations.calls == []


def test_hook_cannot_promote_spam_to_success(db, hooks):
    lifecycle, notifications, integrations = _lifecycle(hooks)
    submission = make_submission(db, make_form(db))
    submission.mark_spam("flagged")
    submission.spam_checked = True
    seen = []

    def hook(ctx):
        seen.append(ctx.success)
        return HookResult(success=True)

    hooks.register(HookEvent.AFTER_SUBMISSION, hook)

    result = lifecycle.after(True, submission)

    assert seen == [False]
    assert result.success is False
    assert integrations.calls == []


def test_incomplete_submission_is_handled_without_dispatch(db, hooks):
    lifecycle, notifications, integrations = _lifecycle(hooks)
    submission = make_submission(db, make_form(db), is_incomplete=True)

    result = lifecycle.after(True, submission)

    assert result.handled is True
    assert notifications.calls == []
    assert integrations.calls == []


def test_incomplete_hook_can_release_submission_to_pipeline(db, hooks):
    lifecycle, notifications, integrations = _lifecycle(hooks)
    submission = make_submission(db, make_form(db), is_incomplete=True)
    hooks.register(HookEvent.AFTER_INCOMPLETE_SUBMISSION, lambda ctx: HookResult(handled=False))

    result = lifecycle.after(True, submission)

    assert result.handled is False
    assert result.success is True
    assert len(notifications.calls) == 1
    assert len(integrations.calls) == 1


def test_before_fires_matching_hook(db, hooks):
    lifecycle, _, _ = _lifecycle(hooks)
    fired = []
    hooks.register(HookEvent.BEFORE_SUBMISSION, lambda ctx: fired.append("complete"))
    hooks.register(HookEvent.BEFORE_INCOMPLETE_SUBMISSION, lambda ctx: fired.append("incomplete"))
    form = make_form(db)

    lifecycle.before(build_submission(form))
    lifecycle.before(build_submission(form, is_incomplete=True))

    assert fired == ["complete", "incomplete"]
