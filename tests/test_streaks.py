from datetime import date

import pytest

from services.processing.models import DayBucket, WeekBucket
from services.processing.streaks import busiest_bucket, grind_day, longest_streak, most_active_month


def test_streak_resets_across_gap():
    days = ["2025-01-01", "2025-01-02", "2025-01-03", "2025-01-05", "2025-01-06"]
    streak = longest_streak(days)
    assert streak.length_days == 3
    assert (streak.start, streak.end) == ("2025-01-01", "2025-01-03")


def test_streak_grows_with_consecutive_days():
    days = ["2025-01-01", "2025-01-02", "2025-01-03", "2025-01-05", "2025-01-06"]
    before = longest_streak(days).length_days
    after = longest_streak(days + ["2025-01-04"]).length_days
    assert after >= before
    assert after == 6


def test_streak_handles_duplicates_order_and_dates():
    streak = longest_streak([date(2025, 3, 2), "2025-03-01", "2025-03-01"])
    assert streak.length_days == 2
    assert streak.start == "2025-03-01"


def test_streak_spans_month_boundary():
    assert longest_streak(["2024-02-28", "2024-02-29", "2024-03-01"]).length_days == 3


def test_empty_streak():
    streak = longest_streak([])
    assert streak.length_days == 0
    assert streak.start is None and streak.end is None


def week(key, seconds, sessions, first_index):
    return WeekBucket(week=key, label=key, seconds=seconds, sessions=sessions, first_index=first_index)


def test_busiest_by_seconds_ties_go_to_first_created():
    buckets = [week("2025-01-13", 3600, 1, 5), week("2025-01-06", 3600, 4, 0)]
    assert busiest_bucket(buckets).week == "2025-01-06"


def test_busiest_by_sessions_uses_seconds_second():
    buckets = [
        week("2025-01-06", 7200, 2, 0),
        week("2025-01-13", 3600, 3, 2),
        week("2025-01-20", 5400, 3, 5),
    ]
    assert busiest_bucket(buckets, by="sessions").week == "2025-01-20"
    assert busiest_bucket(buckets, by="seconds").week == "2025-01-06"


def test_busiest_ignores_empty_buckets():
    assert busiest_bucket([]) is None
    assert busiest_bucket([DayBucket(day="2025-01-01", seconds=0, sessions=1, first_index=0)]) is None


def test_busiest_rejects_unknown_key():
    with pytest.raises(ValueError):
        busiest_bucket([], by="calories")


def test_most_active_month():
    month = most_active_month({"2025-02": 3600, "2025-01": 3600, "2025-03": 0})
    assert month.month == "2025-01"
    assert month.name == "January"
    assert month.hours == pytest.approx(1.0)
    assert most_active_month({}) is None


def test_grind_day():
    weekdays = [(3600, 2), (0, 0), (7200, 2), (0, 0), (0, 0), (100, 1), (0, 0)]
    day = grind_day(weekdays)
    assert day.name == "Wednesday"
    assert day.sessions == 2
    assert grind_day([(0, 0)] * 7) is None
