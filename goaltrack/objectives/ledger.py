"""Date-keyed ledgers of daily progress values and comments.

A ledger is an ordered mapping from calendar day to value. It always iterates
in ascending date order and serialises to a JSON object keyed by ISO
``YYYY-MM-DD`` strings. Keys and values are validated against the
objective's tracking type on every write, including loads from storage and
request bodies.
"""

import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterator, Optional, Union

from .enums import TrackingType

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

LedgerValue = Union[bool, int, float]


class LedgerError(ValueError):
    """Raised when a ledger key or value is malformed."""


def utc_today() -> date:
    """Current calendar day in UTC, the reference day for all ledgers."""
    return datetime.now(timezone.utc).date()


def parse_day(value: Union[str, date]) -> date:
    """
    Parse an ISO ``YYYY-MM-DD`` string into a date.

    Args:
        value: ISO date string or date

    Returns:
        The parsed date

    Raises:
        LedgerError: If the value is not a well-formed calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE.match(value):
        raise LedgerError(f"Invalid date '{value}', expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise LedgerError(f"Invalid date '{value}', expected YYYY-MM-DD") from None


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day in the half-open range [start, end)."""
    day = start
    while day < end:
        yield day
        day += timedelta(days=1)


class _DateMapping:
    """Shared ordered date -> value storage."""

    def __init__(self):
        self._entries: dict[date, Any] = {}

    def _check(self, value: Any) -> Any:
        return value

    def __setitem__(self, day: Union[str, date], value: Any):
        self._entries[parse_day(day)] = self._check(value)

    def __getitem__(self, day: Union[str, date]) -> Any:
        return self._entries[parse_day(day)]

    def __contains__(self, day: object) -> bool:
        try:
            return parse_day(day) in self._entries
        except LedgerError:
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[date]:
        return iter(sorted(self._entries))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, _DateMapping):
            return self._entries == other._entries
        return NotImplemented

    def get(self, day: Union[str, date], default: Any = None) -> Any:
        try:
            return self._entries.get(parse_day(day), default)
        except LedgerError:
            return default

    def items(self) -> list[tuple[date, Any]]:
        """Entries in ascending date order."""
        return [(day, self._entries[day]) for day in sorted(self._entries)]

    def between(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[tuple[date, Any]]:
        """Entries with start <= day <= end; either bound may be omitted."""
        return [
            (day, value)
            for day, value in self.items()
            if (start is None or day >= start) and (end is None or day <= end)
        ]

    def to_json(self) -> dict[str, Any]:
        return {day.isoformat(): value for day, value in self.items()}


class Ledger(_DateMapping):
    """Progress values for one objective, tagged with its tracking type."""

    def __init__(self, tracking_type: TrackingType, entries: Optional[dict] = None):
        super().__init__()
        self.tracking_type = TrackingType(tracking_type)
        for day, value in (entries or {}).items():
            self[day] = value

    @classmethod
    def from_json(cls, tracking_type: TrackingType, raw: Any) -> "Ledger":
        """Build a validated ledger from a JSON object (or None)."""
        if raw is None:
            return cls(tracking_type)
        if not isinstance(raw, dict):
            raise LedgerError("Progress must be an object keyed by date")
        return cls(tracking_type, raw)

    def _check(self, value: Any) -> LedgerValue:
        if self.tracking_type == TrackingType.BOOLEAN:
            if not isinstance(value, bool):
                raise LedgerError(f"Boolean objectives only accept true/false, got {value!r}")
            return value

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise LedgerError(f"Progress value must be a number, got {value!r}")
        if not math.isfinite(value):
            raise LedgerError(f"Progress value must be finite, got {value!r}")
        if value < 0:
            raise LedgerError(f"Progress value must be non-negative, got {value!r}")
        return value

    def copy(self) -> "Ledger":
        clone = Ledger(self.tracking_type)
        clone._entries = dict(self._entries)
        return clone


class CommentLedger(_DateMapping):
    """Free-text annotations keyed by day."""

    def __init__(self, entries: Optional[dict] = None):
        super().__init__()
        for day, value in (entries or {}).items():
            self[day] = value

    @classmethod
    def from_json(cls, raw: Any) -> "CommentLedger":
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise LedgerError("Comments must be an object keyed by date")
        return cls(raw)

    def _check(self, value: Any) -> str:
        if not isinstance(value, str):
            raise LedgerError(f"Comment must be text, got {value!r}")
        return value


def format_number(value: Union[int, float]) -> str:
    """Plain decimal text for a numeric value, without exponent or rounding."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
