"""Free-text activity labels to canonical sport categories."""
from __future__ import annotations

import re
import unicodedata
from enum import Enum
from typing import Tuple


class Sport(str, Enum):
    RUN = "Run"
    BIKE = "Bike"
    SWIM = "Swim"
    WALK_HIKE = "Walk/Hike"
    STRENGTH = "Strength"
    OTHER = "Other"


# Ordered: the first category with a matching keyword wins, so "Treadmill Running"
# lands in RUN before the WALK_HIKE "treadmill" keyword is consulted.
SPORT_KEYWORDS: Tuple[Tuple[Sport, Tuple[str, ...]], ...] = (
    (Sport.RUN, ("run", "jogging", "lauf", "courseapied", "correr", "corrida")),
    (Sport.BIKE, ("bike", "biking", "cycling", "ride", "cyclisme", "velo", "radfahren", "fahrrad", "spinning", "vtt")),
    (Sport.SWIM, ("swim", "natation", "schwimmen", "natacion", "freibad", "hallenbad")),
    (Sport.WALK_HIKE, ("walk", "hike", "hiking", "treadmill", "marche", "spaziergang", "wanderung", "randonn", "gehen")),
    (Sport.STRENGTH, ("strength", "lift", "weights", "musculation", "renforcement", "kraft", "haltere", "hiit")),
)

METER_DISTANCE_LABELS = frozenset(
    {"trackrunning", "poolswim", "swimming", "openwaterswimming"}
)


def normalize_key(value: str) -> str:
    """Lowercase, accent-free, alphanumeric-only form used for label and header matching."""
    decomposed = unicodedata.normalize("NFD", value or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[^a-z0-9]+", "", stripped.lower())


def classify_sport(label: str) -> Sport:
    key = normalize_key(label)
    if not key:
        return Sport.OTHER
    for sport, keywords in SPORT_KEYWORDS:
        if any(word in key for word in keywords):
            return sport
    return Sport.OTHER


def is_meter_distance(label: str) -> bool:
    return normalize_key(label) in METER_DISTANCE_LABELS
