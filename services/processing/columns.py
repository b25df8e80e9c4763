"""Header probing and positional schema sniffing for exported CSV tables.

Exports differ by platform, language and account settings. Activity tables
usually carry a header row whose names are localized; steps and sleep tables
are frequently exported with blank, split or missing headers. Everything here
turns a raw 2-D table into rows keyed by the canonical column names the
aggregators read.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .classifier import normalize_key
from .normalizers import parse_int_strict, text

Table = List[List[str]]
Row = Dict[str, str]

TYPE = "Activity Type"
DATE = "Date"
TITLE = "Title"
DISTANCE = "Distance"
CALORIES = "Calories"
TIME = "Time"
MOVING_TIME = "Moving Time"
ELAPSED_TIME = "Elapsed Time"
AVG_HR = "Avg HR"
MAX_HR = "Max HR"
TOTAL_ASCENT = "Total Ascent"
MAX_ELEVATION = "Max Elevation"
STEPS = "Steps"

# Probed in order; the first non-empty value wins.
TIME_COLUMNS = (TIME, MOVING_TIME, ELAPSED_TIME)

ACTIVITY_HEADER_ALIASES: Dict[str, Tuple[str, ...]] = {
    TYPE: ("Activity Type", "Type d’activité", "Type d activite", "Aktivitätsart", "Aktivitaetsart",
           "Tipo de actividad", "Soort activiteit", "Sport", "Type"),
    DATE: ("Date", "Datum", "Fecha", "Activity Date"),
    TITLE: ("Title", "Titre", "Titel", "Título", "Titulo", "Activity Name", "Name"),
    DISTANCE: ("Distance", "Distanz", "Distancia", "Afstand"),
    CALORIES: ("Calories", "Kalorien", "Calorías", "Calorias", "Calorieën"),
    TIME: ("Time", "Temps", "Zeit", "Tiempo", "Tijd", "Durée", "Duree", "Dauer", "Duration"),
    AVG_HR: ("Avg HR", "Average HR", "Average Heart Rate", "Fréquence cardiaque moyenne",
             "Durchschnittliche HF", "Durchschn HF", "Media FC", "Gemiddelde HF"),
    MAX_HR: ("Max HR", "Maximum HR", "Max Heart Rate", "Fréquence cardiaque maximale", "Maximale HF",
             "Máx FC", "Max FC"),
    TOTAL_ASCENT: ("Total Ascent", "Ascent", "Total climb", "Elevation Gain", "Dénivelé positif",
                   "Gesamter Aufstieg", "Ascenso total", "Totale stijging"),
    MOVING_TIME: ("Moving Time", "Temps de déplacement", "Bewegungszeit", "Tiempo en movimiento", "Beweegtijd"),
    ELAPSED_TIME: ("Elapsed Time", "Temps écoulé", "Verstrichene Zeit", "Tiempo transcurrido", "Verstreken tijd"),
    MAX_ELEVATION: ("Max Elevation", "Maximum Elevation", "Altitude max", "Altitude maximale", "Maximale Höhe",
                    "Altura máxima", "Maximale hoogte"),
    STEPS: ("Steps", "Pas", "Schritte", "Pasos", "Stappen"),
}

# Column positions of the stock Garmin Connect activities export, used when the
# header row matches none of the aliases.
GARMIN_ACTIVITY_COL_INDEX: Dict[str, int] = {
    TYPE: 0,
    DATE: 1,
    TITLE: 3,
    DISTANCE: 4,
    CALORIES: 5,
    TIME: 6,
    AVG_HR: 7,
    MAX_HR: 8,
    TOTAL_ASCENT: 14,
    STEPS: 29,
    MOVING_TIME: 40,
    ELAPSED_TIME: 41,
    MAX_ELEVATION: 43,
}

ACTIVITY_DATA_COLUMNS = (TYPE, DISTANCE, CALORIES) + TIME_COLUMNS

LABEL = "Label"
DAYS = "Days"
SCORE = "Avg Score"
DURATION = "Avg Duration"

STEPS_HEADER_ALIASES: Dict[str, Tuple[str, ...]] = {
    STEPS: ("Steps", "Total Steps", "Step Count", "Schritte", "Pas", "Pasos", "Stappen"),
    LABEL: ("Week", "Label", "Date", "Period", "Woche", "Semaine", "Datum"),
    DAYS: ("Days", "Day Count", "Number of Days"),
}

SLEEP_HEADER_ALIASES: Dict[str, Tuple[str, ...]] = {
    SCORE: ("Avg Score", "Average Score", "Sleep Score", "Score"),
    DURATION: ("Avg Duration", "Average Duration", "Sleep Duration", "Duration"),
    LABEL: ("Date", "Week", "Label", "Period", "Datum"),
}


@dataclass(frozen=True)
class PositionalSchema:
    name: str
    columns: int
    idx: Dict[str, int]


KNOWN_STEPS_SCHEMAS: Tuple[PositionalSchema, ...] = (
    PositionalSchema("steps-weekly-3", 3, {LABEL: 0, STEPS: 1, DAYS: 2}),
    PositionalSchema("steps-weekly-3b", 3, {LABEL: 0, DAYS: 1, STEPS: 2}),
    PositionalSchema("steps-weekly-4", 4, {LABEL: 0, STEPS: 2, DAYS: 3}),
)

KNOWN_SLEEP_SCHEMAS: Tuple[PositionalSchema, ...] = (
    PositionalSchema("sleep-weekly-4", 4, {LABEL: 0, SCORE: 1, DURATION: 2}),
    PositionalSchema("sleep-weekly-6", 6, {LABEL: 0, SCORE: 1, DURATION: 3}),
    PositionalSchema("sleep-weekly-7", 7, {LABEL: 0, SCORE: 1, DURATION: 3}),
)

SNIFF_SAMPLE_ROWS = 10


def cell(row: Sequence[str], idx: Optional[int]) -> str:
    if idx is None or idx < 0 or idx >= len(row):
        return ""
    return text(row[idx])


def probe(row: Row, names: Sequence[str]) -> str:
    for name in names:
        value = text(row.get(name))
        if value:
            return value
    return ""


def find_header_index(header: Sequence[str], candidates: Sequence[str]) -> Optional[int]:
    norm_header = [normalize_key(text(h)) for h in header]
    norm_candidates = [normalize_key(c) for c in candidates]

    for cand in norm_candidates:
        if cand in norm_header:
            return norm_header.index(cand)

    # Units and punctuation, e.g. "Max Elevation (ft)" or "Distance (km)".
    for cand in norm_candidates:
        for i, h in enumerate(norm_header):
            if h and (cand in h or h in cand):
                return i
    return None


def resolve_header(header: Sequence[str], aliases: Dict[str, Tuple[str, ...]]) -> Dict[str, int]:
    """Map canonical names to header positions, claiming each column once."""
    found: Dict[str, int] = {}
    norm_header = [normalize_key(text(h)) for h in header]
    for name, candidates in aliases.items():
        for cand in (normalize_key(c) for c in candidates):
            if cand in norm_header and norm_header.index(cand) not in found.values():
                found[name] = norm_header.index(cand)
                break
    for name, candidates in aliases.items():
        if name in found:
            continue
        idx = find_header_index(header, candidates)
        if idx is not None and idx not in found.values():
            found[name] = idx
    return found


def _non_empty(table: Table) -> Table:
    return [list(r) for r in table if r and any(text(c) for c in r)]


# ---------------------------------------------------------------- activities


def has_activity_data(row: Row) -> bool:
    return any(text(row.get(name)) for name in ACTIVITY_DATA_COLUMNS)


def map_activity_rows(table: Table) -> List[Row]:
    rows = _non_empty(table)
    if not rows:
        return []
    header = rows[0]
    idx = resolve_header(header, ACTIVITY_HEADER_ALIASES)
    if idx:
        body = rows[1:]
    else:
        idx = dict(GARMIN_ACTIVITY_COL_INDEX)
        body = rows

    out: List[Row] = []
    for r in body:
        row = {name: cell(r, i) for name, i in idx.items()}
        if has_activity_data(row):
            out.append(row)
    return out


# --------------------------------------------------------------------- steps


def is_likely_steps(value: object) -> bool:
    n = parse_int_strict(value)
    return 1000 <= n <= 500_000


def is_textual(value: object) -> bool:
    s = text(value)
    if not s:
        return False
    return not re.fullmatch(r"[\d\s,.\-]+", s)


def _best_column(sample: Table, col_count: int, predicate) -> Tuple[int, int]:
    best_col, best_hits = -1, -1
    for c in range(col_count):
        hits = sum(1 for r in sample if predicate(cell(r, c)))
        if hits > best_hits:
            best_col, best_hits = c, hits
    return best_col, best_hits


def _sniff_steps_columns(body: Table, col_count: int) -> Dict[str, int]:
    sample = body[:SNIFF_SAMPLE_ROWS]
    steps_col, _ = _best_column(sample, col_count, is_likely_steps)
    days_col, seven_hits = _best_column(sample, col_count, lambda v: parse_int_strict(v) == 7)
    if seven_hits <= 1:
        days_col = -1

    label_col = -1
    first = sample[0] if sample else []
    for c in range(col_count):
        if c in (steps_col, days_col):
            continue
        if is_textual(cell(first, c)):
            label_col = c
            break
    if label_col == -1:
        label_col = 0
    idx = {LABEL: label_col, STEPS: steps_col}
    if days_col != -1:
        idx[DAYS] = days_col
    return idx


def _known_steps_schema(body: Table, col_count: int) -> Optional[PositionalSchema]:
    sample = body[:SNIFF_SAMPLE_ROWS]
    for schema in KNOWN_STEPS_SCHEMAS:
        if schema.columns != col_count:
            continue
        hits = sum(1 for r in sample if is_likely_steps(cell(r, schema.idx[STEPS])))
        if sample and hits * 2 >= len(sample):
            return schema
    return None


def map_steps_rows(table: Table) -> Tuple[List[Row], str]:
    """Rows with ``Label``/``Steps``/``Days`` plus the header text of the label column."""
    rows = _non_empty(table)
    if not rows:
        return [], ""
    header = rows[0]
    col_count = max(len(r) for r in rows)
    named = resolve_header(header, STEPS_HEADER_ALIASES)

    if STEPS in named:
        idx = dict(named)
        if LABEL not in idx:
            blank = [i for i, h in enumerate(header) if not text(h) and i not in idx.values()]
            idx[LABEL] = blank[0] if blank else (0 if idx[STEPS] != 0 else -1)
        body = rows[1:]
        label_header = cell(header, idx[LABEL])
    else:
        has_header = not any(is_likely_steps(c) for c in header)
        body = rows[1:] if has_header else rows
        schema = _known_steps_schema(body, col_count)
        idx = dict(schema.idx) if schema else _sniff_steps_columns(body, col_count)
        label_header = cell(header, idx[LABEL]) if has_header else ""

    out: List[Row] = []
    for i, r in enumerate(body):
        out.append({
            LABEL: cell(r, idx.get(LABEL)) or f"Period {i + 1}",
            STEPS: cell(r, idx.get(STEPS)),
            DAYS: cell(r, idx.get(DAYS)),
        })
    return out, label_header


# --------------------------------------------------------------------- sleep


def is_duration_like(value: object) -> bool:
    s = text(value)
    return bool(re.fullmatch(r"\d{1,2}:\d{2}", s) or re.search(r"\d\s*h", s, re.I) or re.search(r"\d\s*min\b", s, re.I))


def is_score_like(value: object) -> bool:
    # Strict: "27-Dec" or "2024 - Jan 2" must not read as scores.
    s = text(value).replace("\u00A0", " ").strip()
    if not re.fullmatch(r"\d{1,3}", s):
        return False
    return 1 <= int(s) <= 100


def _sleep_row_by_scan(r: Sequence[str]) -> Optional[Row]:
    score_idx = next((i for i in range(len(r)) if is_score_like(r[i])), -1)
    if score_idx == -1:
        return None
    duration_idx = next((i for i in range(score_idx + 1, len(r)) if is_duration_like(r[i])), -1)
    # Year-spanning weeks get split into extra cells such as "2024".
    parts = [text(c).replace("\u00A0", " ") for c in r[:score_idx]]
    label = " ".join(p for p in parts if p and not re.fullmatch(r"\d{4}", p))
    return {
        LABEL: re.sub(r"\s+", " ", label).strip(),
        SCORE: cell(r, score_idx),
        DURATION: cell(r, duration_idx if duration_idx != -1 else None),
    }


def map_sleep_rows(table: Table) -> List[Row]:
    rows = _non_empty(table)
    if not rows:
        return []
    header = rows[0]
    named = resolve_header(header, SLEEP_HEADER_ALIASES)

    if SCORE in named or DURATION in named:
        label_idx = named.get(LABEL)
        if label_idx is None:
            label_idx = next((i for i in range(len(header)) if i not in named.values()), None)
        mapped: List[Row] = []
        for r in rows[1:]:
            if len(r) != len(header):
                # Year-spanning weeks shift every cell after the label.
                scanned = _sleep_row_by_scan(r)
                if scanned is not None:
                    mapped.append(scanned)
                continue
            mapped.append({
                LABEL: cell(r, label_idx),
                SCORE: cell(r, named.get(SCORE)),
                DURATION: cell(r, named.get(DURATION)),
            })
        return mapped

    has_header = not any(is_score_like(c) for c in header)
    body = rows[1:] if has_header else rows
    uniform = all(len(r) == len(header) for r in body)
    known = next((s for s in KNOWN_SLEEP_SCHEMAS if s.columns == len(header)), None)
    if uniform and known:
        return [{name: cell(r, i) for name, i in known.idx.items()} for r in body]

    out: List[Row] = []
    for r in body:
        row = _sleep_row_by_scan(r)
        if row is not None:
            out.append(row)
    return out
