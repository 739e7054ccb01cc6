"""Completion statistics computed from objective ledgers."""

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Iterable, Optional

from .enums import Category, Status, TrackingType
from .models import Objective

logger = logging.getLogger(__name__)

PERFORMER_LIMIT = 3


def is_completed(tracking_type: TrackingType, value: Any) -> bool:
    """
    Whether a single ledger value counts as a completed day.

    Boolean objectives need ``True``; counter and numeric objectives need a
    value strictly greater than zero.
    """
    if tracking_type == TrackingType.BOOLEAN:
        return value is True
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value > 0


@dataclass
class Tally:
    """Tracked and completed day counts, poolable across objectives."""

    tracked_days: int = 0
    completed_days: int = 0

    def add(self, other: "Tally") -> "Tally":
        self.tracked_days += other.tracked_days
        self.completed_days += other.completed_days
        return self

    @property
    def rate(self) -> float:
        """Completion percentage rounded to 2 decimals; 0 when nothing is tracked."""
        if self.tracked_days == 0:
            return 0
        return round(self.completed_days / self.tracked_days * 100, 2)


@dataclass
class Performance:
    """One objective's completion rate over a window."""

    objective_id: str
    name: str
    completion_rate: float
    tracked_days: int


@dataclass
class CategoryStats:
    total_objectives: int = 0
    active_objectives: int = 0
    completed_today: int = 0
    total_today: int = 0
    completion_rate: float = 0


@dataclass
class Statistics(CategoryStats):
    categories: dict[str, CategoryStats] = field(default_factory=dict)
    top_performers: list[Performance] = field(default_factory=list)
    bottom_performers: list[Performance] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class StatisticsAggregator:
    """Computes per-objective, per-category and global completion metrics."""

    def __init__(self, today: date):
        """
        Initialize with the reference day.

        Args:
            today: Day used for the "today" snapshot
        """
        self.today = today

    def tally(
        self,
        objective: Objective,
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
    ) -> Tally:
        """
        Count tracked and completed days for one objective.

        Only ledger entries with window_start <= day <= window_end that also
        fall inside the objective's active window are counted.
        """
        tally = Tally()
        for day, value in objective.progress.between(window_start, window_end):
            if not objective.is_active_on(day):
                continue
            tally.tracked_days += 1
            if is_completed(objective.tracking_type, value):
                tally.completed_days += 1
        return tally

    def completion_rate(
        self,
        objective: Objective,
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
    ) -> float:
        return self.tally(objective, window_start, window_end).rate

    def rollup(
        self,
        objectives: Iterable[Objective],
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
    ) -> Tally:
        """Pool tracked days across objectives (not an average of rates)."""
        total = Tally()
        for objective in objectives:
            total.add(self.tally(objective, window_start, window_end))
        return total

    def today_snapshot(self, objectives: Iterable[Objective]) -> tuple[int, int]:
        """
        Count today's completions among objectives that are due today.

        Returns:
            Tuple of (completed_today, total_today)
        """
        completed = 0
        total = 0
        for objective in objectives:
            if objective.status != Status.ACTIVE or not objective.is_active_on(self.today):
                continue
            total += 1
            value = objective.progress.get(self.today)
            if value is not None and is_completed(objective.tracking_type, value):
                completed += 1
        return completed, total

    def rank_performers(
        self,
        objectives: Iterable[Objective],
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
        limit: int = PERFORMER_LIMIT,
    ) -> tuple[list[Performance], list[Performance]]:
        """
        Rank objectives by completion rate, best first.

        Objectives without tracked days in the window carry no evidence and
        are left out of both lists.

        Returns:
            Tuple of (top performers, bottom performers)
        """
        performances = []
        for objective in objectives:
            tally = self.tally(objective, window_start, window_end)
            if tally.tracked_days == 0:
                continue
            performances.append(
                Performance(
                    objective_id=objective.id,
                    name=objective.name,
                    completion_rate=tally.rate,
                    tracked_days=tally.tracked_days,
                )
            )

        performances.sort(key=lambda p: p.completion_rate, reverse=True)
        return performances[:limit], performances[-limit:]

    def category_stats(
        self,
        objectives: list[Objective],
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
    ) -> CategoryStats:
        completed_today, total_today = self.today_snapshot(objectives)
        return CategoryStats(
            total_objectives=len(objectives),
            active_objectives=sum(1 for o in objectives if o.status == Status.ACTIVE),
            completed_today=completed_today,
            total_today=total_today,
            completion_rate=self.rollup(objectives, window_start, window_end).rate,
        )

    def summarize(
        self,
        objectives: list[Objective],
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
    ) -> Statistics:
        """Global statistics plus a block for every category."""
        overall = self.category_stats(objectives, window_start, window_end)
        top, bottom = self.rank_performers(objectives, window_start, window_end)

        categories = {
            category.value: self.category_stats(
                [o for o in objectives if o.category == category],
                window_start,
                window_end,
            )
            for category in Category
        }

        logger.debug(
            f"Statistics over {len(objectives)} objectives: "
            f"{overall.completion_rate}% complete, "
            f"{overall.completed_today}/{overall.total_today} today"
        )

        return Statistics(
            **asdict(overall),
            categories=categories,
            top_performers=top,
            bottom_performers=bottom,
        )
