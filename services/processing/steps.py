"""Steps aggregation over periodic (weekly or daily) step-count tables."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from . import columns as col
from .classifier import normalize_key
from .models import PeriodSteps, StepsSnapshot
from .normalizers import parse_date, parse_int_strict, text
from .trackers import RunningExtremum

FEET_PER_STEP = 2.3
STEPS_PER_MILE = 5280 / FEET_PER_STEP
MARATHON_MI = 26.2188
FIVE_K_MI = 3.10686

_RANGE_RE = re.compile(r"\s[-–—]\s|[–—]|\bto\b", re.IGNORECASE)
_WEEK_HEADERS = ("week", "woche", "semaine", "semana")


@dataclass(frozen=True)
class StepsSample:
    rows: Sequence[Mapping[str, str]]
    label_header: str
    weekly_max_rows: int

    @property
    def labels(self) -> List[str]:
        return [text(r.get(col.LABEL)) for r in self.rows[: col.SNIFF_SAMPLE_ROWS]]


@dataclass(frozen=True)
class PeriodRule:
    name: str
    matches: Callable[[StepsSample], bool]
    days: int


def _has_week_header(sample: StepsSample) -> bool:
    header = normalize_key(sample.label_header)
    return any(word in header for word in _WEEK_HEADERS)


def _has_range_labels(sample: StepsSample) -> bool:
    return any(_RANGE_RE.search(label) for label in sample.labels)


def _has_daily_date_labels(sample: StepsSample) -> bool:
    dates = [parse_date(label) for label in sample.labels]
    if len(dates) < 2 or any(d is None for d in dates):
        return False
    ordered = sorted(set(dates))
    gaps = [(b - a).days for a, b in zip(ordered, ordered[1:])]
    return bool(gaps) and min(gaps) == 1


def _is_small_table(sample: StepsSample) -> bool:
    return 0 < len(sample.rows) <= sample.weekly_max_rows


# Evaluated in order; the first match sets the default days per period.
# A positive Days cell on a row always overrides the default for that row.
PERIOD_RULES: Tuple[PeriodRule, ...] = (
    PeriodRule("week_header", _has_week_header, 7),
    PeriodRule("range_label", _has_range_labels, 7),
    PeriodRule("daily_date_labels", _has_daily_date_labels, 1),
    PeriodRule("small_table", _is_small_table, 7),
)
FALLBACK_RULE = PeriodRule("daily", lambda sample: True, 1)


def detect_period_rule(
    rows: Sequence[Mapping[str, str]],
    label_header: str = "",
    weekly_max_rows: int = 53,
) -> PeriodRule:
    sample = StepsSample(rows=rows, label_header=label_header, weekly_max_rows=weekly_max_rows)
    for rule in PERIOD_RULES:
        if rule.matches(sample):
            return rule
    return FALLBACK_RULE


def detect_period_days(
    rows: Sequence[Mapping[str, str]],
    label_header: str = "",
    weekly_max_rows: int = 53,
) -> Tuple[str, int]:
    rule = detect_period_rule(rows, label_header, weekly_max_rows)
    return rule.name, rule.days


def compute_steps_metrics(
    rows: Sequence[Mapping[str, str]],
    label_header: str = "",
    weekly_max_rows: int = 53,
) -> Optional[StepsSnapshot]:
    """Aggregate step periods; ``None`` when no row has a positive step count."""
    rule = detect_period_rule(rows, label_header, weekly_max_rows)
    periods = 0
    total_steps = 0
    total_days = 0
    best: RunningExtremum = RunningExtremum(key=lambda p: p.steps)
    worst: RunningExtremum = RunningExtremum(key=lambda p: p.steps, lowest=True)

    for idx, row in enumerate(rows):
        steps = parse_int_strict(row.get(col.STEPS))
        if steps <= 0:
            continue
        days = parse_int_strict(row.get(col.DAYS))
        if days <= 0:
            days = rule.days
        periods += 1
        total_steps += steps
        total_days += days

        label = text(row.get(col.LABEL)) or f"Period {idx + 1}"
        period = PeriodSteps(label=label, steps=steps, days=days)
        best.offer(period)
        worst.offer(period)

    if not periods:
        return None
    distance_mi = total_steps / STEPS_PER_MILE
    return StepsSnapshot(
        periods=periods,
        total_steps=total_steps,
        total_days=total_days,
        avg_steps_per_day=total_steps / total_days,
        avg_steps_per_period=total_steps / periods,
        period_rule=rule.name,
        default_period_days=rule.days,
        best_period=best.best,
        worst_period=worst.best,
        distance_mi=distance_mi,
        marathons=distance_mi / MARATHON_MI,
        five_ks=distance_mi / FIVE_K_MI,
    )
