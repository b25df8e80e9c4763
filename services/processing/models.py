"""Immutable snapshot types produced by the aggregators."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional, Tuple


@dataclass(frozen=True)
class ActivityRecord:
    ordinal: int
    day: Optional[date]
    sport: str
    activity_type: str
    title: str
    seconds: int
    distance_mi: float
    calories: float
    avg_hr: float = 0.0
    max_hr: float = 0.0
    ascent: float = 0.0
    max_elevation: float = 0.0


@dataclass(frozen=True)
class ActivityRef:
    title: str
    date: Optional[str]
    activity_type: str
    sport: str
    seconds: int
    distance_mi: float
    calories: float


@dataclass(frozen=True)
class SportBreakdown:
    sport: str
    sessions: int
    distance_mi: float
    seconds: int
    longest: Optional[ActivityRef] = None


@dataclass(frozen=True)
class ActivityTypeSummary:
    name: str
    count: int
    distance_mi: float
    seconds: int


@dataclass(frozen=True)
class DayBucket:
    day: str
    seconds: int
    sessions: int
    first_index: int


@dataclass(frozen=True)
class WeekBucket:
    week: str
    label: str
    seconds: int
    sessions: int
    first_index: int


@dataclass(frozen=True)
class MonthSummary:
    month: str
    name: str
    hours: float


@dataclass(frozen=True)
class Streak:
    length_days: int
    start: Optional[str] = None
    end: Optional[str] = None


@dataclass(frozen=True)
class GrindDay:
    name: str
    hours: float
    sessions: int


@dataclass(frozen=True)
class ActivitySnapshot:
    sessions: int
    total_distance_mi: float
    total_seconds: int
    total_calories: float
    earth_percent: float
    avg_hr: Optional[float]
    max_hr: Optional[float]
    avg_distance_mi: Optional[float]
    avg_duration_seconds: Optional[float]
    total_ascent: Optional[float]
    max_elevation: Optional[float]
    sports: Tuple[SportBreakdown, ...]
    activity_types_count: int
    top_activity_types: Tuple[ActivityTypeSummary, ...]
    favorite_activity: Optional[ActivityTypeSummary]
    days: Tuple[DayBucket, ...]
    weeks: Tuple[WeekBucket, ...]
    longest_activity: Optional[ActivityRef]
    highest_calorie: Optional[ActivityRef]
    longest_streak: Optional[Streak]
    busiest_week: Optional[WeekBucket]
    busiest_week_by_sessions: Optional[WeekBucket]
    busiest_day: Optional[DayBucket]
    most_active_month: Optional[MonthSummary]
    grind_day: Optional[GrindDay]
    start_date: Optional[str]
    end_date: Optional[str]
    undated_rows: int = 0

    def sport(self, name: str) -> Optional[SportBreakdown]:
        for item in self.sports:
            if item.sport == name:
                return item
        return None


@dataclass(frozen=True)
class PeriodSteps:
    label: str
    steps: int
    days: int


@dataclass(frozen=True)
class StepsSnapshot:
    periods: int
    total_steps: int
    total_days: int
    avg_steps_per_day: float
    avg_steps_per_period: float
    period_rule: str
    default_period_days: int
    best_period: Optional[PeriodSteps]
    worst_period: Optional[PeriodSteps]
    distance_mi: float
    marathons: float
    five_ks: float


@dataclass(frozen=True)
class SleepPeriod:
    label: str
    score: Optional[float]
    duration_minutes: int


@dataclass(frozen=True)
class SleepSnapshot:
    periods: int
    avg_score: Optional[float]
    avg_duration_minutes: Optional[float]
    best_score_period: Optional[SleepPeriod]
    worst_score_period: Optional[SleepPeriod]
    longest_sleep_period: Optional[SleepPeriod]


def to_dict(snapshot) -> Optional[dict]:
    if snapshot is None:
        return None
    return asdict(snapshot)
