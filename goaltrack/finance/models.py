"""Finance ledger payloads and monthly statistics."""

from collections import defaultdict
import datetime
from datetime import date
from enum import Enum
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel

DEFAULT_CURRENCY = "FCFA"
DEFAULT_THEME = "light"
UNCATEGORIZED = "Uncategorized"
EVOLUTION_MONTHS = 6


class FinanceType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    SAVING = "saving"
    INVESTMENT = "investment"


class FinanceCreate(BaseModel):
    name: str
    type: FinanceType
    amount: float
    date: datetime.date
    currency: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    recurring: Optional[bool] = None
    frequency: Optional[str] = None


class FinanceUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[FinanceType] = None
    amount: Optional[float] = None
    date: Optional[Union[datetime.date, str]] = None
    currency: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    recurring: Optional[bool] = None
    frequency: Optional[str] = None


class SettingsUpdate(BaseModel):
    default_currency: Optional[str] = None
    theme: Optional[str] = None


def month_start(day: date, months_back: int = 0) -> date:
    """First day of the month ``months_back`` months before ``day``'s month."""
    index = day.year * 12 + (day.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)


def _in_month(entry: dict[str, Any], start: date) -> bool:
    end = month_start(start, -1)
    return start.isoformat() <= entry["date"] < end.isoformat()


def _total(entries: Iterable[dict[str, Any]], entry_type: FinanceType) -> float:
    return sum(e["amount"] for e in entries if e["type"] == entry_type.value)


def build_finance_stats(entries: list[dict[str, Any]], today: date) -> dict[str, Any]:
    """
    Summarize a user's finance entries around the current month.

    Args:
        entries: Finance rows (ISO ``date`` strings)
        today: Reference day selecting the current month

    Returns:
        Month totals per type, expenses grouped by category and a
        six-month income/expense evolution (oldest first)
    """
    current = month_start(today)
    this_month = [e for e in entries if _in_month(e, current)]

    by_category: dict[str, float] = defaultdict(float)
    for entry in this_month:
        if entry["type"] == FinanceType.EXPENSE.value:
            by_category[entry["category"] or UNCATEGORIZED] += entry["amount"]

    evolution = []
    for months_back in range(EVOLUTION_MONTHS - 1, -1, -1):
        start = month_start(today, months_back)
        month_entries = [e for e in entries if _in_month(e, start)]
        evolution.append(
            {
                "month": f"{start.month}/{start.year}",
                "income": _total(month_entries, FinanceType.INCOME),
                "expenses": _total(month_entries, FinanceType.EXPENSE),
            }
        )

    return {
        "income": _total(this_month, FinanceType.INCOME),
        "expenses": _total(this_month, FinanceType.EXPENSE),
        "savings": _total(this_month, FinanceType.SAVING),
        "investments": _total(this_month, FinanceType.INVESTMENT),
        "expenses_by_category": [
            {"category": category, "amount": amount}
            for category, amount in by_category.items()
        ],
        "evolution": evolution,
    }
