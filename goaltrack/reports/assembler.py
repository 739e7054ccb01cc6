"""Document model for progress reports.

The assembler turns objectives and their ledgers into plain dataclasses
(summary, per-category blocks, per-objective rows and chart series). The PDF
and Excel renderers only draw what they are given.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any, Optional

from ..objectives.enums import (
    CADENCE_LABELS,
    CATEGORY_LABELS,
    TRACKING_LABELS,
    Category,
    TrackingType,
)
from ..objectives.ledger import format_number
from ..objectives.models import Objective
from ..objectives.statistics import StatisticsAggregator

logger = logging.getLogger(__name__)


class Period(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


PERIOD_DAYS = {Period.WEEKLY: 7, Period.MONTHLY: 30}

PERIOD_TITLES = {
    Period.WEEKLY: "Weekly Objective Tracking Report",
    Period.MONTHLY: "Monthly Objective Tracking Report",
}

# (exclusive upper bound on the global rate, recommendations)
RECOMMENDATION_RULES = [
    (
        30,
        [
            "Your completion rate is low. Try simplifying your objectives or "
            "reducing their number to focus on the most important ones.",
            "Set up daily reminders to help you follow your objectives regularly.",
        ],
    ),
    (
        70,
        [
            "Your progress is decent, but there is still room for improvement. "
            "Identify the obstacles keeping you from reaching some objectives.",
            "Try building a daily routine that fits your objectives into your schedule.",
        ],
    ),
    (
        None,
        [
            "Excellent work! Your completion rate is very good. Consider slightly "
            "raising the difficulty of your objectives to keep progressing.",
            "Share your experience and methods with others to help them progress too.",
        ],
    ),
]

COMPLETED_LABEL = "completed"
NOT_COMPLETED_LABEL = "not completed"


@dataclass
class EntryRow:
    day: date
    value: Any
    display: str
    comment: str = ""


@dataclass
class ObjectiveBlock:
    id: str
    name: str
    description: Optional[str]
    tracking_type: TrackingType
    tracking_label: str
    cadence_label: str
    target: Optional[float]
    completion_rate: float
    entries: list[EntryRow] = field(default_factory=list)
    values: list[Any] = field(default_factory=list)
    chart: list[Optional[float]] = field(default_factory=list)


@dataclass
class CategoryBlock:
    category: Category
    title: str
    completion_rate: float
    objectives: list[ObjectiveBlock] = field(default_factory=list)


@dataclass
class Summary:
    total_objectives: int
    completion_rate: float
    top_performers: list[str]
    bottom_performers: list[str]
    category_counts: dict[Category, int]
    category_rates: dict[Category, float]
    daily_rates: list[float]


@dataclass
class Report:
    title: str
    owner: str
    period: Period
    generated_on: date
    days: list[date]
    summary: Summary
    categories: list[CategoryBlock]
    recommendations: list[str]


def period_days(today: date, count: int) -> list[date]:
    """The ``count`` days ending with ``today``, oldest first."""
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def display_value(tracking_type: TrackingType, value: Any) -> str:
    if tracking_type == TrackingType.BOOLEAN:
        return COMPLETED_LABEL if value else NOT_COMPLETED_LABEL
    return format_number(value)


def chart_point(objective: Objective, value: Any) -> Optional[float]:
    """
    Normalise one ledger value for plotting.

    Boolean values plot as 100/0, numeric values as a percentage of the target
    capped at 100, or raw when there is no positive target. Missing days plot
    as None.
    """
    if value is None:
        return None
    if objective.tracking_type == TrackingType.BOOLEAN:
        return 100.0 if value else 0.0
    if objective.target and objective.target > 0:
        return round(min(value / objective.target * 100, 100.0), 2)
    return float(value)


def recommendations_for(
    rate: float, top: list[str], bottom: list[str]
) -> list[str]:
    for bound, lines in RECOMMENDATION_RULES:
        if bound is None or rate < bound:
            recommendations = list(lines)
            break

    if bottom:
        recommendations.append(
            f"Focus on improving these objectives: {', '.join(bottom)}. "
            "Identify the obstacles and adjust your strategies."
        )
    if top:
        recommendations.append(
            f"Keep going with these high performers: {', '.join(top)}. "
            "Apply the strategies that work here to your other objectives."
        )
    return recommendations


def group_by_category(objectives: list[Objective]) -> dict[Category, list[Objective]]:
    """Objectives grouped in fixed category order; empty categories omitted."""
    grouped = {}
    for category in Category:
        members = [o for o in objectives if o.category == category]
        if members:
            grouped[category] = members
    return grouped


class ReportAssembler:
    """Builds Report documents for a reference day."""

    def __init__(self, today: date):
        self.today = today
        self.aggregator = StatisticsAggregator(today)

    def _objective_block(
        self, objective: Objective, days: list[date]
    ) -> ObjectiveBlock:
        start, end = days[0], days[-1]
        entries = [
            EntryRow(
                day=day,
                value=value,
                display=display_value(objective.tracking_type, value),
                comment=objective.comments.get(day, ""),
            )
            for day, value in reversed(objective.progress.between(start, end))
        ]
        values = [objective.progress.get(day) for day in days]

        return ObjectiveBlock(
            id=objective.id,
            name=objective.name,
            description=objective.description,
            tracking_type=objective.tracking_type,
            tracking_label=TRACKING_LABELS[objective.tracking_type],
            cadence_label=CADENCE_LABELS[objective.cadence],
            target=objective.target,
            completion_rate=self.aggregator.completion_rate(objective, start, end),
            entries=entries,
            values=values,
            chart=[chart_point(objective, value) for value in values],
        )

    def build(
        self,
        objectives: list[Objective],
        period: Period = Period.WEEKLY,
        owner: str = "",
    ) -> Report:
        """
        Assemble a report over the period ending today.

        Args:
            objectives: Objectives to report on
            period: weekly (last 7 days) or monthly (last 30 days)
            owner: Name shown on the cover

        Returns:
            The report document
        """
        period = Period(period)
        days = period_days(self.today, PERIOD_DAYS[period])
        start, end = days[0], days[-1]

        top, bottom = self.aggregator.rank_performers(objectives, start, end)
        top_names = [p.name for p in top]
        bottom_names = [p.name for p in bottom]
        global_rate = self.aggregator.rollup(objectives, start, end).rate

        grouped = group_by_category(objectives)
        summary = Summary(
            total_objectives=len(objectives),
            completion_rate=global_rate,
            top_performers=top_names,
            bottom_performers=bottom_names,
            category_counts={
                c: len(grouped.get(c, [])) for c in Category
            },
            category_rates={
                c: self.aggregator.rollup(grouped.get(c, []), start, end).rate
                for c in Category
            },
            daily_rates=[
                self.aggregator.rollup(objectives, day, day).rate for day in days
            ],
        )

        categories = [
            CategoryBlock(
                category=category,
                title=CATEGORY_LABELS[category],
                completion_rate=summary.category_rates[category],
                objectives=[self._objective_block(o, days) for o in members],
            )
            for category, members in grouped.items()
        ]

        logger.info(
            f"Assembled {period.value} report: {len(objectives)} objectives, "
            f"{global_rate}% complete"
        )

        return Report(
            title=PERIOD_TITLES[period],
            owner=owner,
            period=period,
            generated_on=self.today,
            days=days,
            summary=summary,
            categories=categories,
            recommendations=recommendations_for(global_rate, top_names, bottom_names),
        )
