from formflow.core.hooks import HookContext, HookEvent, HookRegistry, HookResult


def test_trigger_without_hooks_returns_defaults():
    registry = HookRegistry()

    outcome = registry.trigger(HookEvent.BEFORE_SUBMISSION, HookContext(success=True))

    assert outcome.cancelled is False
    assert outcome.is_valid is True
    assert outcome.handled is False
    assert outcome.success is True


def test_handled_default_is_passed_through():
    registry = HookRegistry()

    outcome = registry.trigger(HookEvent.AFTER_INCOMPLETE_SUBMISSION, HookContext(), handled=True)

    assert outcome.handled is True


def test_any_cancel_wins_regardless_of_order():
    registry = HookRegistry()
    registry.register(HookEvent.BEFORE_SEND_NOTIFICATION, lambda ctx: HookResult(cancelled=True))
    registry.register(HookEvent.BEFORE_SEND_NOTIFICATION, lambda ctx: HookResult(cancelled=False))

    outcome = registry.trigger(HookEvent.BEFORE_SEND_NOTIFICATION, HookContext())

    assert outcome.cancelled is True
    assert outcome.is_valid is False


def test_last_explicit_handled_and_success_win():
    registry = HookRegistry()
    registry.register("after_submission", lambda ctx: HookResult(handled=False, success=False))
    registry.register("after_submission", lambda ctx: None)
    registry.register("after_submission", lambda ctx: HookResult(success=True))

    outcome = registry.trigger(HookEvent.AFTER_SUBMISSION, HookContext(success=False), handled=True)

    assert outcome.handled is False
    assert outcome.success is True


def test_decorator_registration_and_unregister():
    registry = HookRegistry()
    seen = []

    @registry.on(HookEvent.BEFORE_SPAM_CHECK)
    def record(ctx):
        seen.append(ctx.submission)

    assert registry.has_hooks(HookEvent.BEFORE_SPAM_CHECK)
    registry.trigger(HookEvent.BEFORE_SPAM_CHECK, HookContext(submission="s1"))

    registry.unregister(HookEvent.BEFORE_SPAM_CHECK, record)
    registry.trigger(HookEvent.BEFORE_SPAM_CHECK, HookContext(submission="s2"))

    assert seen == ["s1"]
    assert not registry.has_hooks(HookEvent.BEFORE_SPAM_CHECK)
