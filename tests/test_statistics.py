from datetime import date, timedelta

from goaltrack.objectives.enums import Category, Status, TrackingType
from goaltrack.objectives.statistics import StatisticsAggregator, Tally, is_completed

from conftest import make_objective

TODAY = date(2024, 5, 10)
START = TODAY - timedelta(days=10)


def test_is_completed_per_tracking_type():
    assert is_completed(TrackingType.BOOLEAN, True)
    assert not is_completed(TrackingType.BOOLEAN, False)
    assert is_completed(TrackingType.NUMERIC, 0.5)
    assert not is_completed(TrackingType.COUNTER, 0)


def test_rate_rounds_to_two_decimals():
    objective = make_objective(
        start_date=START,
        progress={"2024-05-07": True, "2024-05-08": False, "2024-05-09": True},
    )
    assert StatisticsAggregator(TODAY).completion_rate(objective) == 66.67


def test_no_tracked_days_is_zero_not_an_error():
    assert Tally().rate == 0
    assert StatisticsAggregator(TODAY).completion_rate(make_objective(start_date=START)) == 0


def test_entries_outside_the_active_window_are_ignored():
    objective = make_objective(
        start_date=date(2024, 5, 5),
        duration=3,
        progress={
            "2024-05-04": True,  # before start
            "2024-05-05": False,
            "2024-05-07": True,
            "2024-05-08": True,  # start + duration is excluded
        },
    )
    tally = StatisticsAggregator(TODAY).tally(objective)
    assert (tally.tracked_days, tally.completed_days) == (2, 1)


def test_query_window_bounds_are_inclusive():
    objective = make_objective(
        tracking_type=TrackingType.COUNTER,
        start_date=START,
        progress={"2024-05-06": 1, "2024-05-07": 0, "2024-05-08": 3, "2024-05-09": 2},
    )
    aggregator = StatisticsAggregator(TODAY)
    assert aggregator.completion_rate(objective, date(2024, 5, 7), date(2024, 5, 8)) == 50


def test_rollup_pools_days_instead_of_averaging_rates():
    one_of_one = make_objective(name="A", start_date=START, progress={"2024-05-09": True})
    one_of_three = make_objective(
        name="B",
        start_date=START,
        progress={"2024-05-07": True, "2024-05-08": False, "2024-05-09": False},
    )
    tally = StatisticsAggregator(TODAY).rollup([one_of_one, one_of_three])
    # 2 of 4 pooled days, not the mean of 100% and 33.33%
    assert tally.rate == 50


def test_today_snapshot_counts_active_objectives_due_today():
    done = make_objective(name="Done", start_date=START, progress={"2024-05-10": True})
    pending = make_objective(name="Pending", start_date=START)
    paused = make_objective(
        name="Paused", start_date=START, status=Status.PAUSED, progress={"2024-05-10": True}
    )
    expired = make_objective(name="Expired", start_date=START, duration=5)

    completed, total = StatisticsAggregator(TODAY).today_snapshot(
        [done, pending, paused, expired]
    )
    assert (completed, total) == (1, 2)


def test_performers_exclude_untracked_objectives_and_sort_by_rate():
    objectives = [
        make_objective(name="Full", start_date=START, progress={"2024-05-09": True}),
        make_objective(name="Empty", start_date=START),
        make_objective(
            name="Half", start_date=START, progress={"2024-05-08": True, "2024-05-09": False}
        ),
        make_objective(name="None", start_date=START, progress={"2024-05-09": False}),
    ]
    top, bottom = StatisticsAggregator(TODAY).rank_performers(objectives, limit=2)

    assert [p.name for p in top] == ["Full", "Half"]
    assert [p.name for p in bottom] == ["Half", "None"]
    assert all(p.tracked_days > 0 for p in top + bottom)


def test_summarize_reports_every_category():
    spiritual = make_objective(
        name="Pray",
        category=Category.SPIRITUAL,
        start_date=START,
        progress={"2024-05-09": True, "2024-05-10": True},
    )
    finance = make_objective(
        name="Save",
        category=Category.FINANCE,
        tracking_type=TrackingType.NUMERIC,
        start_date=START,
        progress={"2024-05-09": 0},
    )
    stats = StatisticsAggregator(TODAY).summarize([spiritual, finance]).to_dict()

    assert set(stats["categories"]) == {"spiritual", "professional", "personal", "finance"}
    assert stats["total_objectives"] == 2
    assert stats["completion_rate"] == 66.67
    assert stats["completed_today"] == 1
    assert stats["total_today"] == 2
    assert stats["categories"]["spiritual"]["completion_rate"] == 100
    assert stats["categories"]["finance"]["completion_rate"] == 0
    assert stats["categories"]["professional"]["total_objectives"] == 0
    assert stats["top_performers"][0]["name"] == "Pray"
