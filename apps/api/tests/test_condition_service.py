from types import SimpleNamespace

from formflow.services.condition_service import evaluate_conditions, resolve_field_value


def _submission(**values):
    return SimpleNamespace(field_values=values)


def _conditions(*conditions, logic="all", send_rule="send", enabled=True):
    return {
        "enabled": enabled,
        "send_rule": send_rule,
        "logic": logic,
        "conditions": list(conditions),
    }


def test_no_conditions_always_send():
    assert evaluate_conditions(None, _submission()) is True
    assert evaluate_conditions(_conditions(), _submission()) is True
    disabled = _conditions({"field_key": "amount", "operator": "equals", "value": "1"}, enabled=False)
    assert evaluate_conditions(disabled, _submission(amount=2)) is True


def test_greater_than_uses_numeric_comparison():
    rule = _conditions({"field_key": "{field.amount}", "operator": "greater_than", "value": "100"})

    assert evaluate_conditions(rule, _submission(amount=50)) is False
    assert evaluate_conditions(rule, _submission(amount="150")) is True
    assert evaluate_conditions(rule, _submission(amount="n/a")) is False


def test_any_logic_and_dont_send_rule():
    rule = _conditions(
        {"field_key": "country", "operator": "equals", "value": "NZ"},
        {"field_key": "country", "operator": "equals", "value": "AU"},
        logic="any",
    )
    assert evaluate_conditions(rule, _submission(country="AU")) is True
    assert evaluate_conditions(rule, _submission(country="US")) is False

    rule["send_rule"] = "dont_send"
    assert evaluate_conditions(rule, _submission(country="AU")) is False


def test_list_values_match_by_membership():
    rule = _conditions({"field_key": "topics", "operator": "contains", "value": "sales"})

    assert evaluate_conditions(rule, _submission(topics=["support", "sales"])) is True
    assert evaluate_conditions(rule, _submission(topics=["support"])) is False


def test_empty_operators():
    empty = _conditions({"field_key": "phone", "operator": "is_empty"})
    assert evaluate_conditions(empty, _submission(phone="")) is True
    assert evaluate_conditions(empty, _submission()) is True
    assert evaluate_conditions(empty, _submission(phone="123")) is False


def test_invalid_conditions_are_treated_as_unconditional():
    assert evaluate_conditions({"logic": "sometimes", "conditions": "nope"}, _submission()) is True


def test_resolve_field_value_walks_nested_keys():
    values = {"address": {"city": "Wellington"}}

    assert resolve_field_value(values, "{field.address.city}") == "Wellington"
    assert resolve_field_value(values, "address.zip") is None
    assert resolve_field_value(values, "missing.deep") is None
