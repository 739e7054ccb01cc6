from datetime import date

import pytest

from goaltrack.objectives.enums import TrackingType
from goaltrack.objectives.ledger import (
    CommentLedger,
    Ledger,
    LedgerError,
    iter_days,
    parse_day,
)


def test_parse_day_accepts_iso_strings_and_dates():
    assert parse_day("2024-03-01") == date(2024, 3, 1)
    assert parse_day(date(2024, 3, 1)) == date(2024, 3, 1)


@pytest.mark.parametrize("raw", ["2024-3-1", "01/03/2024", "2024-02-30", "", 20240301])
def test_parse_day_rejects_malformed(raw):
    with pytest.raises(LedgerError):
        parse_day(raw)


def test_iter_days_is_half_open():
    days = list(iter_days(date(2024, 1, 30), date(2024, 2, 2)))
    assert days == [date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1)]
    assert list(iter_days(date(2024, 1, 1), date(2024, 1, 1))) == []


def test_ledger_iterates_in_date_order():
    ledger = Ledger(
        TrackingType.BOOLEAN,
        {"2024-01-03": True, "2024-01-01": False, "2024-01-02": True},
    )
    assert list(ledger) == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
    assert list(ledger.to_json()) == ["2024-01-01", "2024-01-02", "2024-01-03"]


def test_boolean_ledger_rejects_numbers():
    ledger = Ledger(TrackingType.BOOLEAN)
    with pytest.raises(LedgerError):
        ledger["2024-01-01"] = 1


@pytest.mark.parametrize("value", [True, "5", -1, None])
def test_numeric_ledger_rejects_non_numbers_and_negatives(value):
    ledger = Ledger(TrackingType.NUMERIC)
    with pytest.raises(LedgerError):
        ledger["2024-01-01"] = value


@pytest.mark.parametrize("tracking_type", [TrackingType.NUMERIC, TrackingType.COUNTER])
@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_numeric_ledger_rejects_non_finite_values(tracking_type, value):
    with pytest.raises(LedgerError):
        Ledger(tracking_type, {"2024-01-01": value})


def test_numeric_ledger_accepts_floats_and_zero():
    ledger = Ledger(TrackingType.COUNTER, {"2024-01-01": 0, "2024-01-02": 2.5})
    assert ledger.get("2024-01-02") == 2.5
    assert ledger.get(date(2024, 1, 1)) == 0


def test_between_is_inclusive_and_bounds_are_optional():
    ledger = Ledger(
        TrackingType.COUNTER,
        {"2024-01-01": 1, "2024-01-02": 2, "2024-01-03": 3, "2024-01-04": 4},
    )
    assert [v for _, v in ledger.between(date(2024, 1, 2), date(2024, 1, 3))] == [2, 3]
    assert [v for _, v in ledger.between(end=date(2024, 1, 2))] == [1, 2]
    assert [v for _, v in ledger.between(start=date(2024, 1, 4))] == [4]


def test_from_json_rejects_non_objects():
    with pytest.raises(LedgerError):
        Ledger.from_json(TrackingType.BOOLEAN, ["2024-01-01"])
    assert len(Ledger.from_json(TrackingType.BOOLEAN, None)) == 0


def test_copy_is_independent():
    ledger = Ledger(TrackingType.BOOLEAN, {"2024-01-01": True})
    clone = ledger.copy()
    clone["2024-01-02"] = False
    assert "2024-01-02" not in ledger
    assert clone != ledger


def test_comment_ledger_requires_text():
    comments = CommentLedger({"2024-01-01": "tired"})
    assert comments.get("2024-01-01") == "tired"
    assert comments.get("not-a-date") is None
    with pytest.raises(LedgerError):
        comments["2024-01-02"] = 3
