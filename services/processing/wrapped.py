"""Per-category pipeline: CSV payload -> mapped rows -> snapshot or categorized failure."""
from __future__ import annotations

import csv
import io
import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Union

from packages.config import INCLUDE_UNDATED, STEPS_WEEKLY_MAX_ROWS, TOP_ACTIVITY_TYPES
from packages.metrics import inc, labelled, timed
from packages.request_context import upload_context

from . import columns as col
from .activities import compute_activity_metrics
from .models import ActivitySnapshot, SleepSnapshot, StepsSnapshot
from .sleep import compute_sleep_metrics
from .steps import compute_steps_metrics

logger = logging.getLogger("fitness.wrapped")

ACTIVITIES = "activities"
STEPS = "steps"
SLEEP = "sleep"
CATEGORIES = (ACTIVITIES, STEPS, SLEEP)

STATUS_OK = "ok"
STATUS_NO_ROWS = "no_rows"
STATUS_PARSE_FAILURE = "parse_failure"

NO_ROWS_MESSAGES = {
    ACTIVITIES: "No activity rows found.",
    STEPS: "No steps rows found.",
    SLEEP: "No sleep rows found.",
}
PARSE_FAILURE_MESSAGES = {
    ACTIVITIES: "Failed reading that Activities CSV.",
    STEPS: "Failed to parse Steps CSV.",
    SLEEP: "Failed to parse Sleep CSV.",
}

Snapshot = Union[ActivitySnapshot, StepsSnapshot, SleepSnapshot]


class WrappedError(Exception):
    status = "error"


class NoRowsError(WrappedError):
    status = STATUS_NO_ROWS


class CsvParseError(WrappedError):
    status = STATUS_PARSE_FAILURE


class UnknownCategoryError(ValueError):
    pass


def read_table(payload: Union[bytes, str]) -> List[List[str]]:
    """Decode and split a delimited payload; undecodable or malformed input raises CsvParseError."""
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise CsvParseError(f"payload is not UTF-8: {exc}") from exc
    elif payload.startswith("\ufeff"):
        payload = payload[1:]
    try:
        return [row for row in csv.reader(io.StringIO(payload, newline=""), strict=True)]
    except csv.Error as exc:
        raise CsvParseError(str(exc)) from exc


def _activities(table, top_types: int, include_undated: bool, weekly_max_rows: int) -> Optional[ActivitySnapshot]:
    rows = col.map_activity_rows(table)
    return compute_activity_metrics(rows, top_types=top_types, include_undated=include_undated)


def _steps(table, top_types: int, include_undated: bool, weekly_max_rows: int) -> Optional[StepsSnapshot]:
    rows, label_header = col.map_steps_rows(table)
    return compute_steps_metrics(rows, label_header=label_header, weekly_max_rows=weekly_max_rows)


def _sleep(table, top_types: int, include_undated: bool, weekly_max_rows: int) -> Optional[SleepSnapshot]:
    return compute_sleep_metrics(col.map_sleep_rows(table))


AGGREGATORS: Dict[str, Callable[..., Optional[Snapshot]]] = {
    ACTIVITIES: _activities,
    STEPS: _steps,
    SLEEP: _sleep,
}


@dataclass(frozen=True)
class CategoryResult:
    category: str
    status: str
    snapshot: Optional[Snapshot] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


def aggregate(
    category: str,
    payload: Union[bytes, str],
    top_types: Optional[int] = None,
    include_undated: Optional[bool] = None,
    weekly_max_rows: Optional[int] = None,
) -> Snapshot:
    """Run one category and return its snapshot, raising NoRowsError or CsvParseError."""
    aggregator = AGGREGATORS.get(category)
    if aggregator is None:
        raise UnknownCategoryError(category)
    table = read_table(payload)
    if not table:
        raise NoRowsError(f"{category}: empty payload")
    snapshot = aggregator(
        table,
        TOP_ACTIVITY_TYPES if top_types is None else top_types,
        INCLUDE_UNDATED if include_undated is None else include_undated,
        STEPS_WEEKLY_MAX_ROWS if weekly_max_rows is None else weekly_max_rows,
    )
    if snapshot is None:
        raise NoRowsError(f"{category}: no usable rows")
    return snapshot


def run_category(
    category: str,
    payload: Union[bytes, str],
    upload_id: Optional[str] = None,
    **options,
) -> CategoryResult:
    """Like :func:`aggregate`, but category-level failures come back as values."""
    if category not in AGGREGATORS:
        raise UnknownCategoryError(category)
    with upload_context(upload_id or uuid.uuid4().hex), timed(labelled("wrapped_duration_seconds", category=category)):
        try:
            snapshot = aggregate(category, payload, **options)
            result = CategoryResult(category=category, status=STATUS_OK, snapshot=snapshot)
        except NoRowsError as exc:
            logger.warning("wrapped_no_rows %s", exc)
            result = CategoryResult(category, STATUS_NO_ROWS, error=NO_ROWS_MESSAGES[category])
        except CsvParseError:
            logger.exception("wrapped_parse_failure category=%s", category)
            result = CategoryResult(category, STATUS_PARSE_FAILURE, error=PARSE_FAILURE_MESSAGES[category])
        inc(labelled("wrapped_uploads_total", category=category, status=result.status))
        logger.info("wrapped %s -> %s", category, result.status)
    return result


@dataclass(frozen=True)
class WrappedState:
    """Latest result per category. ``apply`` returns a new state; nothing is mutated."""

    results: Dict[str, CategoryResult] = field(default_factory=dict)

    def apply(self, result: CategoryResult) -> "WrappedState":
        results = dict(self.results)
        results[result.category] = result
        return replace(self, results=results)

    def snapshot(self, category: str) -> Optional[Snapshot]:
        result = self.results.get(category)
        return result.snapshot if result is not None else None

    def error(self, category: str) -> Optional[str]:
        result = self.results.get(category)
        return result.error if result is not None else None
