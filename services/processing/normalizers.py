"""Scalar parsers for loosely formatted fitness export cells."""
from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from typing import Optional

METERS_PER_MILE = 1609.34

_SPACES_RE = re.compile(r"[\u00A0\u2007\u202F\s]")
_US_THOUSANDS_RE = re.compile(r"^\d{1,3}(,\d{3})+$")
_EU_THOUSANDS_RE = re.compile(r"^\d{1,3}(\.\d{3})+$")
_DOT_GROUP_RE = re.compile(r"\.(?=\d{3}(?:\D|$))")
_COMMA_GROUP_RE = re.compile(r",(?=\d{3}(?:\D|$))")
_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")
_FLOAT_PREFIX_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
_INT_PREFIX_RE = re.compile(r"\s*(-?\d+)")

_SLEEP_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_SLEEP_HOURS_RE = re.compile(r"(\d+)\s*h", re.IGNORECASE)
_SLEEP_MINUTES_RE = re.compile(r"(\d+)\s*m(?:in)?", re.IGNORECASE)

_SLASH_DATE_RE = re.compile(r"^(\d{1,2})[/\-](\d{1,2})[/\-](\d{2,4})(?:[ T]\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AaPp][Mm])?)?$")
_DOT_DATE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{2,4})(?:[ T]\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AaPp][Mm])?)?$")

DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%a, %b %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y %H:%M",
    "%b %d, %Y %I:%M %p",
    "%b %d, %Y %I:%M:%S %p",
    "%b %d, %Y, %I:%M %p",
    "%b %d, %Y, %I:%M:%S %p",
    "%B %d %Y",
    "%B %d, %Y, %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%a, %d %b %Y %H:%M:%S %Z",
    "%a, %d %b %Y %H:%M:%S %z",
)


def text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_number(value: object) -> float:
    """Parse a numeric cell, tolerating units, spaces and either thousands style.

    Anything that does not yield a finite number becomes ``0.0``.
    """
    if value is None:
        return 0.0
    s = _SPACES_RE.sub("", str(value).strip())
    has_comma = "," in s
    has_dot = "." in s

    if has_comma and has_dot:
        if s.rfind(",") > s.rfind("."):
            s = _DOT_GROUP_RE.sub("", s).replace(",", ".", 1)
        else:
            s = _COMMA_GROUP_RE.sub("", s)
    elif has_comma:
        if _US_THOUSANDS_RE.match(s):
            s = s.replace(",", "")
        else:
            s = s.replace(",", ".", 1)
    elif has_dot and _EU_THOUSANDS_RE.match(s):
        s = s.replace(".", "")

    s = _NON_NUMERIC_RE.sub("", s)
    match = _FLOAT_PREFIX_RE.match(s)
    if not match:
        return 0.0
    n = float(match.group(0))
    return n if math.isfinite(n) else 0.0


def parse_int_strict(value: object) -> int:
    s = re.sub(r"[^\d\-]", "", text(value))
    match = re.match(r"-?\d+", s)
    return int(match.group(0)) if match else 0


def _leading_int(segment: str) -> Optional[int]:
    match = _INT_PREFIX_RE.match(segment)
    return int(match.group(1)) if match else None


def parse_duration_seconds(value: object) -> int:
    """``H:M:S`` or ``M:S`` to seconds; any other shape is 0."""
    s = text(value)
    if not s:
        return 0
    parts = [_leading_int(p) for p in s.split(":")]
    if any(p is None for p in parts):
        return 0
    if len(parts) == 3:
        hours, minutes, seconds = parts
        return hours * 3600 + minutes * 60 + seconds
    if len(parts) == 2:
        minutes, seconds = parts
        return minutes * 60 + seconds
    return 0


def parse_sleep_minutes(value: object) -> int:
    """Sleep durations come as ``7:33`` or ``7h 33min``; either part may be missing."""
    s = text(value)
    if not s:
        return 0
    hhmm = _SLEEP_HHMM_RE.match(s)
    if hhmm:
        return int(hhmm.group(1)) * 60 + int(hhmm.group(2))
    hours = _SLEEP_HOURS_RE.search(s)
    minutes = _SLEEP_MINUTES_RE.search(s)
    total = 0
    if hours:
        total += int(hours.group(1)) * 60
    if minutes:
        total += int(minutes.group(1))
    return total


def _numeric_date(match: re.Match, day_first: bool) -> Optional[date]:
    a, b, year = int(match.group(1)), int(match.group(2)), int(match.group(3))
    if year < 100:
        year += 2000
    if day_first:
        day, month = a, b
    else:
        # Month-first unless the first number cannot be a month.
        day, month = (a, b) if a > 12 else (b, a)
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(value: object) -> Optional[date]:
    s = re.sub(r"\s+", " ", text(value).replace("\u00A0", " ")).strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    slash = _SLASH_DATE_RE.match(s)
    if slash:
        return _numeric_date(slash, day_first=False)
    dotted = _DOT_DATE_RE.match(s)
    if dotted:
        return _numeric_date(dotted, day_first=True)
    return None


def meters_to_miles(meters: float) -> float:
    return meters / METERS_PER_MILE


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def week_key(day: date) -> str:
    return week_start(day).isoformat()


def week_range_label(day: date) -> str:
    monday = week_start(day)
    sunday = monday + timedelta(days=6)
    return f"{monday:%b} {monday.day} – {sunday:%b} {sunday.day}"


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"
