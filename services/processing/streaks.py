"""Streaks and busiest-period selection over day/week/month buckets."""
from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from .models import DayBucket, GrindDay, MonthSummary, Streak, WeekBucket

B = TypeVar("B", DayBucket, WeekBucket)

# Monday first, matching date.weekday().
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def longest_streak(days: Iterable[Union[str, date]]) -> Streak:
    """Longest run of consecutive calendar days among ``days`` (duplicates ignored)."""
    ordered = sorted({d if isinstance(d, date) else date.fromisoformat(d) for d in days})
    if not ordered:
        return Streak(length_days=0)

    best_len, best_start, best_end = 1, ordered[0], ordered[0]
    cur_len, cur_start = 1, ordered[0]
    for prev, curr in zip(ordered, ordered[1:]):
        if (curr - prev).days == 1:
            cur_len += 1
        else:
            cur_len, cur_start = 1, curr
        if cur_len > best_len:
            best_len, best_start, best_end = cur_len, cur_start, curr
    return Streak(length_days=best_len, start=best_start.isoformat(), end=best_end.isoformat())


def _bucket_key(bucket, by: str) -> Tuple:
    # Later first_index must lose ties, hence the negation.
    if by == "sessions":
        return (bucket.sessions, bucket.seconds, -bucket.first_index)
    return (bucket.seconds, -bucket.first_index)


def busiest_bucket(buckets: Sequence[B], by: str = "seconds") -> Optional[B]:
    if by not in ("seconds", "sessions"):
        raise ValueError(f"Unknown busiest key: {by}")
    candidates = [b for b in buckets if getattr(b, by) > 0]
    if not candidates:
        return None
    return max(candidates, key=lambda b: _bucket_key(b, by))


def most_active_month(months: Mapping[str, float]) -> Optional[MonthSummary]:
    active = [(key, seconds) for key, seconds in months.items() if seconds > 0]
    if not active:
        return None
    # Earliest month wins ties.
    key, seconds = min(active, key=lambda item: (-item[1], item[0]))
    month_idx = int(key.split("-")[1])
    return MonthSummary(month=key, name=MONTH_NAMES[month_idx - 1], hours=seconds / 3600)


def grind_day(weekdays: Sequence[Tuple[int, int]]) -> Optional[GrindDay]:
    """Weekday with the most sessions, then the most seconds; ``weekdays`` is (seconds, count) Monday first."""
    best_idx = -1
    for idx, (seconds, count) in enumerate(weekdays):
        if count == 0:
            continue
        if best_idx == -1:
            best_idx = idx
            continue
        best_seconds, best_count = weekdays[best_idx]
        if count > best_count or (count == best_count and seconds > best_seconds):
            best_idx = idx
    if best_idx == -1:
        return None
    seconds, count = weekdays[best_idx]
    return GrindDay(name=WEEKDAY_NAMES[best_idx], hours=seconds / 3600, sessions=count)
