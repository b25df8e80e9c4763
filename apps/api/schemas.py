from __future__ import annotations

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str
    message: str
    request_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str
    run_mode: Optional[str] = None
    categories: List[str] = Field(default_factory=list)


class ActivityRef(BaseModel):
    title: str
    date: Optional[str] = None
    activity_type: str
    sport: str
    seconds: int
    distance_mi: float
    calories: float


class SportBreakdown(BaseModel):
    sport: str
    sessions: int
    distance_mi: float
    seconds: int
    longest: Optional[ActivityRef] = None


class ActivityTypeSummary(BaseModel):
    name: str
    count: int
    distance_mi: float
    seconds: int


class DayBucket(BaseModel):
    day: str
    seconds: int
    sessions: int
    first_index: int


class WeekBucket(BaseModel):
    week: str
    label: str
    seconds: int
    sessions: int
    first_index: int


class MonthSummary(BaseModel):
    month: str
    name: str
    hours: float


class Streak(BaseModel):
    length_days: int
    start: Optional[str] = None
    end: Optional[str] = None


class GrindDay(BaseModel):
    name: str
    hours: float
    sessions: int


class ActivitySnapshot(BaseModel):
    sessions: int
    total_distance_mi: float
    total_seconds: int
    total_calories: float
    earth_percent: float
    avg_hr: Optional[float] = None
    max_hr: Optional[float] = None
    avg_distance_mi: Optional[float] = None
    avg_duration_seconds: Optional[float] = None
    total_ascent: Optional[float] = None
    max_elevation: Optional[float] = None
    sports: List[SportBreakdown]
    activity_types_count: int
    top_activity_types: List[ActivityTypeSummary]
    favorite_activity: Optional[ActivityTypeSummary] = None
    days: List[DayBucket]
    weeks: List[WeekBucket]
    longest_activity: Optional[ActivityRef] = None
    highest_calorie: Optional[ActivityRef] = None
    longest_streak: Optional[Streak] = None
    busiest_week: Optional[WeekBucket] = None
    busiest_week_by_sessions: Optional[WeekBucket] = None
    busiest_day: Optional[DayBucket] = None
    most_active_month: Optional[MonthSummary] = None
    grind_day: Optional[GrindDay] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    undated_rows: int = 0


class PeriodSteps(BaseModel):
    label: str
    steps: int
    days: int


class StepsSnapshot(BaseModel):
    periods: int
    total_steps: int
    total_days: int
    avg_steps_per_day: float
    avg_steps_per_period: float
    period_rule: str
    default_period_days: int
    best_period: Optional[PeriodSteps] = None
    worst_period: Optional[PeriodSteps] = None
    distance_mi: float
    marathons: float
    five_ks: float


class SleepPeriod(BaseModel):
    label: str
    score: Optional[float] = None
    duration_minutes: int


class SleepSnapshot(BaseModel):
    periods: int
    avg_score: Optional[float] = None
    avg_duration_minutes: Optional[float] = None
    best_score_period: Optional[SleepPeriod] = None
    worst_score_period: Optional[SleepPeriod] = None
    longest_sleep_period: Optional[SleepPeriod] = None


class CategoryResultResponse(BaseModel):
    category: str
    status: str
    snapshot: Optional[Union[ActivitySnapshot, StepsSnapshot, SleepSnapshot]] = None
    error: Optional[str] = None
    upload_id: Optional[str] = None
