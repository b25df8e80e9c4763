import csv
import io

import pytest

from services.processing import columns as col
from services.processing.activities import compute_activity_metrics
from services.processing.classifier import Sport
from tests.fixtures.wrapped_csv import ACTIVITIES_CSV, ACTIVITIES_FR_CSV, run_row


def fixture_rows(text=ACTIVITIES_CSV):
    return col.map_activity_rows(list(csv.reader(io.StringIO(text))))


def test_two_runs_end_to_end():
    rows = [
        run_row("2025-01-01", distance="3.1", time="0:28:00"),
        run_row("2025-01-02", distance="3.1", time="0:28:00"),
    ]
    snap = compute_activity_metrics(rows)
    assert snap.sessions == 2
    assert snap.total_distance_mi == pytest.approx(6.2)
    assert snap.longest_streak.length_days == 2
    assert snap.longest_streak.start == "2025-01-01"
    assert snap.longest_streak.end == "2025-01-02"


def test_fixture_totals():
    snap = compute_activity_metrics(fixture_rows())
    assert snap.sessions == 5
    assert snap.total_distance_mi == pytest.approx(19.7)
    assert snap.total_seconds == 10560
    assert snap.total_calories == pytest.approx(1510)
    assert snap.avg_hr == pytest.approx(134.5)
    assert snap.max_hr == 170
    assert snap.earth_percent == pytest.approx(19.7 / 24901 * 100)
    assert snap.avg_distance_mi == pytest.approx(19.7 / 5)
    assert snap.avg_duration_seconds == pytest.approx(2112)
    assert snap.start_date == "2025-01-01"
    assert snap.end_date == "2025-01-07"


def test_totals_equal_sum_of_sports():
    snap = compute_activity_metrics(fixture_rows())
    assert snap.total_distance_mi == pytest.approx(sum(s.distance_mi for s in snap.sports))
    assert snap.total_seconds == sum(s.seconds for s in snap.sports)
    assert [s.sport for s in snap.sports] == ["Run", "Bike", "Swim", "Strength"]


def test_sport_breakdown_and_longest_per_sport():
    snap = compute_activity_metrics(fixture_rows())
    run = snap.sport(Sport.RUN.value)
    assert run.sessions == 2
    assert run.distance_mi == pytest.approx(6.2)
    # Equal distances: the first run wins.
    assert run.longest.title == "Morning Run"
    assert snap.sport("Swim").longest.distance_mi == pytest.approx(1.0)
    assert snap.sport("Strength").longest is None
    assert snap.sport("Walk/Hike") is None


def test_meter_labels_convert_and_others_do_not():
    swim = compute_activity_metrics([run_row("2025-01-01", distance="1609.34", activity_type="Open Water Swimming")])
    bike = compute_activity_metrics([run_row("2025-01-01", distance="1609.34", activity_type="Cycling")])
    assert swim.total_distance_mi == pytest.approx(1.0)
    assert bike.total_distance_mi == pytest.approx(1609.34)


def test_pointers():
    snap = compute_activity_metrics(fixture_rows())
    assert snap.longest_activity.title == "Commute"
    assert snap.longest_activity.date == "2025-01-03"
    assert snap.highest_calorie.calories == pytest.approx(450)


def test_pointers_absent_without_positive_values():
    rows = [run_row("2025-01-01", distance="2", time="", Calories="0")]
    snap = compute_activity_metrics(rows)
    assert snap.sessions == 1
    assert snap.longest_activity is None
    assert snap.highest_calorie is None
    assert snap.longest_streak is None
    assert snap.busiest_day is None


def test_activity_types_ranked_by_count_then_first_seen():
    snap = compute_activity_metrics(fixture_rows())
    assert snap.activity_types_count == 4
    assert [t.name for t in snap.top_activity_types] == ["Running", "Cycling", "Pool Swim"]
    assert snap.favorite_activity.name == "Running"
    assert snap.favorite_activity.count == 2

    top_one = compute_activity_metrics(fixture_rows(), top_types=1)
    assert [t.name for t in top_one.top_activity_types] == ["Running"]


def test_buckets_and_busiest_periods():
    snap = compute_activity_metrics(fixture_rows())
    assert [d.day for d in snap.days] == ["2025-01-01", "2025-01-02", "2025-01-03", "2025-01-06", "2025-01-07"]
    assert [w.week for w in snap.weeks] == ["2024-12-30", "2025-01-06"]
    assert snap.busiest_week.week == "2024-12-30"
    assert snap.busiest_week.label == "Dec 30 – Jan 5"
    assert snap.busiest_week.sessions == 3
    assert snap.busiest_week_by_sessions.week == "2024-12-30"
    assert snap.busiest_day.day == "2025-01-03"
    assert snap.longest_streak.length_days == 3
    assert snap.most_active_month.month == "2025-01"
    assert snap.most_active_month.name == "January"
    assert snap.grind_day.name == "Friday"


def test_localized_export():
    snap = compute_activity_metrics(fixture_rows(ACTIVITIES_FR_CSV))
    assert snap.sessions == 2
    assert snap.total_distance_mi == pytest.approx(25.5)
    assert [s.sport for s in snap.sports] == ["Run", "Bike"]


def test_time_falls_back_to_moving_then_elapsed():
    rows = [
        {"Date": "2025-01-01", "Activity Type": "Running", "Moving Time": "0:20:00", "Elapsed Time": "0:25:00"},
        {"Date": "2025-01-02", "Activity Type": "Running", "Elapsed Time": "0:25:00"},
    ]
    snap = compute_activity_metrics(rows)
    assert snap.total_seconds == 1200 + 1500


def test_undated_rows_dropped_by_default():
    rows = [run_row("2025-01-01"), run_row("", distance="10")]
    snap = compute_activity_metrics(rows)
    assert snap.sessions == 1
    assert snap.total_distance_mi == pytest.approx(3.1)
    assert snap.undated_rows == 1


def test_undated_rows_counted_in_totals_when_enabled():
    rows = [run_row("2025-01-01"), run_row("", distance="10")]
    snap = compute_activity_metrics(rows, include_undated=True)
    assert snap.sessions == 2
    assert snap.total_distance_mi == pytest.approx(13.1)
    assert [d.day for d in snap.days] == ["2025-01-01"]
    assert snap.start_date == snap.end_date == "2025-01-01"


def test_no_recognized_rows_returns_none():
    assert compute_activity_metrics([]) is None
    assert compute_activity_metrics([{"Date": "2025-01-01", "Title": "Nothing"}]) is None


def test_idempotent():
    rows = fixture_rows()
    assert compute_activity_metrics(rows) == compute_activity_metrics(rows)


def test_timestamped_export_dates_are_kept():
    rows = [run_row("Jan 1, 2025, 7:00:00 AM"), run_row("1/2/2025 7:00:00 AM")]
    snap = compute_activity_metrics(rows)
    assert snap.sessions == 2
    assert snap.undated_rows == 0
    assert snap.longest_streak.length_days == 2
