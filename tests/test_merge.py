from goaltrack.merge import (
    KEEP_IF_FALSY,
    NULLABLE,
    Blank,
    FieldPolicy,
    keep_if_falsy,
    merge_with_defaults,
    parse_float_or_none,
)

EXISTING = {"name": "Run", "description": "5k", "target": 5.0, "duration": 30}

POLICIES = {
    "name": KEEP_IF_FALSY,
    "description": NULLABLE,
    "target": FieldPolicy(
        null=Blank.CLEAR, empty=Blank.CLEAR, zero=Blank.CLEAR, parse=parse_float_or_none
    ),
    "duration": keep_if_falsy(int),
}


def test_absent_fields_keep_stored_values():
    assert merge_with_defaults(EXISTING, {}, POLICIES) == EXISTING


def test_keep_if_falsy_ignores_blank_values():
    merged = merge_with_defaults(EXISTING, {"name": "", "duration": 0}, POLICIES)
    assert merged["name"] == "Run"
    assert merged["duration"] == 30


def test_nullable_clears_on_null_but_stores_empty_string():
    assert merge_with_defaults(EXISTING, {"description": None}, POLICIES)["description"] is None
    assert merge_with_defaults(EXISTING, {"description": ""}, POLICIES)["description"] == ""


def test_target_clears_on_any_blank_and_parses_strings():
    for blank in (None, "", 0):
        assert merge_with_defaults(EXISTING, {"target": blank}, POLICIES)["target"] is None
    assert merge_with_defaults(EXISTING, {"target": "12.5"}, POLICIES)["target"] == 12.5
    assert merge_with_defaults(EXISTING, {"target": "abc"}, POLICIES)["target"] is None


def test_parser_applies_to_accepted_values():
    assert merge_with_defaults(EXISTING, {"duration": "45"}, POLICIES)["duration"] == 45


def test_fields_without_policy_are_ignored():
    merged = merge_with_defaults(EXISTING, {"user_id": "someone-else"}, POLICIES)
    assert "user_id" not in merged


def test_false_is_not_treated_as_zero():
    policies = {"recurring": keep_if_falsy()}
    assert merge_with_defaults({"recurring": True}, {"recurring": False}, policies) == {
        "recurring": False
    }
