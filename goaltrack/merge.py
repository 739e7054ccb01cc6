"""Explicit merge of partial update bodies onto stored records.

Each updatable field declares what ``null``, the empty string and numeric zero
mean for it: keep the stored value, clear it, or store the value as given.
A field absent from the body always keeps its stored value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional


class Blank(str, Enum):
    KEEP = "keep"
    CLEAR = "clear"
    SET = "set"


@dataclass(frozen=True)
class FieldPolicy:
    """Behaviour of one field for blank-ish incoming values."""

    null: Blank = Blank.KEEP
    empty: Blank = Blank.KEEP
    zero: Blank = Blank.SET
    parse: Optional[Callable[[Any], Any]] = None


# any blank value keeps the stored one
KEEP_IF_FALSY = FieldPolicy(null=Blank.KEEP, empty=Blank.KEEP, zero=Blank.KEEP)

# null clears, everything else is stored as given
NULLABLE = FieldPolicy(null=Blank.CLEAR, empty=Blank.SET, zero=Blank.SET)


def keep_if_falsy(parse: Optional[Callable[[Any], Any]] = None) -> FieldPolicy:
    """KEEP_IF_FALSY with a parser applied to accepted values."""
    return FieldPolicy(null=Blank.KEEP, empty=Blank.KEEP, zero=Blank.KEEP, parse=parse)


def parse_float_or_none(value: Any) -> Optional[float]:
    """Lenient float parse; unparsable input and zero become None."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed or None


def _action(policy: FieldPolicy, value: Any) -> Blank:
    if value is None:
        return policy.null
    if isinstance(value, str) and value == "":
        return policy.empty
    if not isinstance(value, bool) and isinstance(value, (int, float)) and value == 0:
        return policy.zero
    return Blank.SET


def merge_with_defaults(
    existing: Mapping[str, Any],
    changes: Mapping[str, Any],
    policies: Mapping[str, FieldPolicy],
) -> dict[str, Any]:
    """
    Merge an update body onto a stored record.

    Args:
        existing: Current field values
        changes: Fields present in the request body (unset fields excluded)
        policies: Per-field policy; fields without one are ignored

    Returns:
        New dict of merged values
    """
    merged = dict(existing)

    for name, value in changes.items():
        policy = policies.get(name)
        if policy is None:
            continue

        action = _action(policy, value)
        if action == Blank.KEEP:
            continue
        if action == Blank.CLEAR:
            merged[name] = None
            continue

        merged[name] = policy.parse(value) if policy.parse else value

    return merged
