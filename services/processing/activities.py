"""Single-pass aggregation of activity export rows into an ActivitySnapshot."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from . import columns as col
from .classifier import Sport, classify_sport, is_meter_distance
from .models import (
    ActivityRecord,
    ActivityRef,
    ActivitySnapshot,
    ActivityTypeSummary,
    DayBucket,
    SportBreakdown,
    WeekBucket,
)
from .normalizers import (
    meters_to_miles,
    month_key,
    parse_date,
    parse_duration_seconds,
    parse_number,
    text,
    week_key,
    week_range_label,
)
from .streaks import busiest_bucket, grind_day, longest_streak, most_active_month
from .trackers import RunningExtremum

EARTH_CIRCUMFERENCE_MI = 24901

# Sports whose single longest outing is reported, with the title used when the row has none.
LONGEST_DISTANCE_SPORTS = {
    Sport.RUN: "Longest run",
    Sport.BIKE: "Longest ride",
    Sport.SWIM: "Longest swim",
}


def distance_miles(raw: object, activity_type: str) -> float:
    value = parse_number(raw)
    if value <= 0:
        return 0.0
    if is_meter_distance(activity_type):
        return meters_to_miles(value)
    return value


def build_record(row: Mapping[str, object], ordinal: int) -> ActivityRecord:
    activity_type = text(row.get(col.TYPE))
    return ActivityRecord(
        ordinal=ordinal,
        day=parse_date(row.get(col.DATE)),
        sport=classify_sport(activity_type).value,
        activity_type=activity_type,
        title=text(row.get(col.TITLE)),
        seconds=max(parse_duration_seconds(col.probe(row, col.TIME_COLUMNS)), 0),
        distance_mi=distance_miles(row.get(col.DISTANCE), activity_type),
        calories=max(parse_number(row.get(col.CALORIES)), 0.0),
        avg_hr=parse_number(row.get(col.AVG_HR)),
        max_hr=parse_number(row.get(col.MAX_HR)),
        ascent=max(parse_number(row.get(col.TOTAL_ASCENT)), 0.0),
        max_elevation=parse_number(row.get(col.MAX_ELEVATION)),
    )


def activity_ref(record: ActivityRecord, fallback_title: str = "Unknown activity") -> ActivityRef:
    return ActivityRef(
        title=record.title or fallback_title,
        date=record.day.isoformat() if record.day else None,
        activity_type=record.activity_type,
        sport=record.sport,
        seconds=record.seconds,
        distance_mi=record.distance_mi,
        calories=record.calories,
    )


@dataclass
class _Totals:
    sessions: int = 0
    distance_mi: float = 0.0
    seconds: int = 0


@dataclass
class _Bucket:
    seconds: int = 0
    sessions: int = 0
    first_index: int = 0
    label: str = ""


@dataclass
class ActivityAccumulator:
    """Mutable state for one pass. Owned by a single compute call."""

    totals: _Totals = field(default_factory=_Totals)
    calories: float = 0.0
    hr_sum: float = 0.0
    hr_count: int = 0
    max_hr: float = 0.0
    ascent: float = 0.0
    max_elevation: float = 0.0
    sports: Dict[Sport, _Totals] = field(default_factory=dict)
    types: Dict[str, _Totals] = field(default_factory=dict)
    type_order: Dict[str, int] = field(default_factory=dict)
    days: Dict[str, _Bucket] = field(default_factory=dict)
    weeks: Dict[str, _Bucket] = field(default_factory=dict)
    months: Dict[str, float] = field(default_factory=dict)
    weekdays: List[Tuple[int, int]] = field(default_factory=lambda: [(0, 0)] * 7)
    earliest: Optional[date] = None
    latest: Optional[date] = None
    longest: RunningExtremum = field(default_factory=lambda: RunningExtremum(key=lambda r: r.seconds))
    highest_calorie: RunningExtremum = field(default_factory=lambda: RunningExtremum(key=lambda r: r.calories))
    longest_by_sport: Dict[Sport, RunningExtremum] = field(
        default_factory=lambda: {
            sport: RunningExtremum(key=lambda r: r.distance_mi) for sport in LONGEST_DISTANCE_SPORTS
        }
    )

    def add(self, record: ActivityRecord) -> None:
        self.totals.sessions += 1
        self.totals.distance_mi += record.distance_mi
        self.totals.seconds += record.seconds
        self.calories += record.calories

        if record.avg_hr > 0:
            self.hr_sum += record.avg_hr
            self.hr_count += 1
        self.max_hr = max(self.max_hr, record.max_hr)
        self.ascent += record.ascent
        self.max_elevation = max(self.max_elevation, record.max_elevation)

        sport = Sport(record.sport)
        per_sport = self.sports.setdefault(sport, _Totals())
        per_sport.sessions += 1
        per_sport.distance_mi += record.distance_mi
        per_sport.seconds += record.seconds

        if record.activity_type:
            self.type_order.setdefault(record.activity_type, len(self.type_order))
            per_type = self.types.setdefault(record.activity_type, _Totals())
            per_type.sessions += 1
            per_type.distance_mi += record.distance_mi
            per_type.seconds += record.seconds

        if record.day is not None:
            self._add_dated(record)

        self.longest.offer(record)
        self.highest_calorie.offer(record)
        if sport in self.longest_by_sport:
            self.longest_by_sport[sport].offer(record)

    def _add_dated(self, record: ActivityRecord) -> None:
        day = record.day
        day_bucket = self.days.setdefault(day.isoformat(), _Bucket(first_index=record.ordinal))
        day_bucket.seconds += record.seconds
        day_bucket.sessions += 1

        week_bucket = self.weeks.setdefault(
            week_key(day), _Bucket(first_index=record.ordinal, label=week_range_label(day))
        )
        week_bucket.seconds += record.seconds
        week_bucket.sessions += 1

        month = month_key(day)
        self.months[month] = self.months.get(month, 0) + record.seconds

        seconds, count = self.weekdays[day.weekday()]
        self.weekdays[day.weekday()] = (seconds + record.seconds, count + 1)

        if self.earliest is None or day < self.earliest:
            self.earliest = day
        if self.latest is None or day > self.latest:
            self.latest = day

    def _sport_breakdowns(self) -> Tuple[SportBreakdown, ...]:
        out = []
        for sport in Sport:
            totals = self.sports.get(sport)
            if totals is None:
                continue
            tracker = self.longest_by_sport.get(sport)
            longest = tracker.map(lambda r: activity_ref(r, LONGEST_DISTANCE_SPORTS[sport])) if tracker else None
            out.append(SportBreakdown(
                sport=sport.value,
                sessions=totals.sessions,
                distance_mi=totals.distance_mi,
                seconds=totals.seconds,
                longest=longest,
            ))
        return tuple(out)

    def _type_summaries(self) -> List[ActivityTypeSummary]:
        names = sorted(self.types, key=lambda name: (-self.types[name].sessions, self.type_order[name]))
        return [
            ActivityTypeSummary(
                name=name,
                count=self.types[name].sessions,
                distance_mi=self.types[name].distance_mi,
                seconds=self.types[name].seconds,
            )
            for name in names
        ]

    def build(self, top_types: int, undated_rows: int = 0) -> ActivitySnapshot:
        sessions = self.totals.sessions
        distance = self.totals.distance_mi
        day_buckets = tuple(
            DayBucket(day=key, seconds=b.seconds, sessions=b.sessions, first_index=b.first_index)
            for key, b in sorted(self.days.items())
        )
        week_buckets = tuple(
            WeekBucket(week=key, label=b.label, seconds=b.seconds, sessions=b.sessions, first_index=b.first_index)
            for key, b in sorted(self.weeks.items())
        )
        streak = longest_streak(b.day for b in day_buckets if b.seconds > 0)
        types = self._type_summaries()

        return ActivitySnapshot(
            sessions=sessions,
            total_distance_mi=distance,
            total_seconds=self.totals.seconds,
            total_calories=self.calories,
            earth_percent=(distance / EARTH_CIRCUMFERENCE_MI) * 100 if distance > 0 else 0.0,
            avg_hr=(self.hr_sum / self.hr_count) if self.hr_count else None,
            max_hr=self.max_hr or None,
            avg_distance_mi=(distance / sessions) if sessions else None,
            avg_duration_seconds=(self.totals.seconds / sessions) if sessions else None,
            total_ascent=self.ascent or None,
            max_elevation=self.max_elevation or None,
            sports=self._sport_breakdowns(),
            activity_types_count=len(types),
            top_activity_types=tuple(types[:top_types]),
            favorite_activity=types[0] if types else None,
            days=day_buckets,
            weeks=week_buckets,
            longest_activity=self.longest.map(activity_ref),
            highest_calorie=self.highest_calorie.map(activity_ref),
            longest_streak=streak if streak.length_days else None,
            busiest_week=busiest_bucket(week_buckets, by="seconds"),
            busiest_week_by_sessions=busiest_bucket(week_buckets, by="sessions"),
            busiest_day=busiest_bucket(day_buckets, by="seconds"),
            most_active_month=most_active_month(self.months),
            grind_day=grind_day(self.weekdays),
            start_date=self.earliest.isoformat() if self.earliest else None,
            end_date=self.latest.isoformat() if self.latest else None,
            undated_rows=undated_rows,
        )


def compute_activity_metrics(
    rows: Iterable[Mapping[str, object]],
    top_types: int = 3,
    include_undated: bool = False,
) -> Optional[ActivitySnapshot]:
    """Aggregate activity rows; ``None`` when no row carries any activity field.

    Rows without a resolvable date are dropped unless ``include_undated`` is
    set, in which case they count toward totals but never toward day/week
    buckets, streaks or date ranges.
    """
    acc = ActivityAccumulator()
    recognized = 0
    undated = 0
    for ordinal, row in enumerate(rows):
        if not col.has_activity_data(row):
            continue
        recognized += 1
        record = build_record(row, ordinal)
        if record.day is None:
            undated += 1
            if not include_undated:
                continue
        acc.add(record)

    if not recognized:
        return None
    return acc.build(top_types=top_types, undated_rows=undated)
