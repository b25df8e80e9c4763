"""Sleep aggregation over periodic score/duration tables."""
from __future__ import annotations

from typing import Mapping, Optional, Sequence

from . import columns as col
from .models import SleepPeriod, SleepSnapshot
from .normalizers import parse_number, parse_sleep_minutes, text
from .trackers import RunningExtremum


def compute_sleep_metrics(rows: Sequence[Mapping[str, str]]) -> Optional[SleepSnapshot]:
    """Aggregate sleep periods; ``None`` when no row has a label and a measurement.

    Scores outside 1..100 and durations of zero do not count as measurements.
    """
    score_sum = 0.0
    score_count = 0
    duration_sum = 0
    duration_count = 0
    best_score: RunningExtremum = RunningExtremum(key=lambda p: p.score)
    worst_score: RunningExtremum = RunningExtremum(key=lambda p: p.score, lowest=True)
    longest: RunningExtremum = RunningExtremum(key=lambda p: p.duration_minutes)

    for row in rows:
        label = text(row.get(col.LABEL))
        score = parse_number(row.get(col.SCORE))
        minutes = parse_sleep_minutes(row.get(col.DURATION))
        has_score = 0 < score <= 100
        has_duration = minutes > 0
        if not label or not (has_score or has_duration):
            continue

        period = SleepPeriod(label=label, score=score if has_score else None, duration_minutes=minutes)
        if has_score:
            score_sum += score
            score_count += 1
            best_score.offer(period)
            worst_score.offer(period)
        if has_duration:
            duration_sum += minutes
            duration_count += 1
            longest.offer(period)

    if not (score_count or duration_count):
        return None
    return SleepSnapshot(
        periods=duration_count or score_count,
        avg_score=(score_sum / score_count) if score_count else None,
        avg_duration_minutes=(duration_sum / duration_count) if duration_count else None,
        best_score_period=best_score.best,
        worst_score_period=worst_score.best,
        longest_sleep_period=longest.best,
    )
