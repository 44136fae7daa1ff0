"""Preference-weighted ranking of candidate stops."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Mapping, Optional, Sequence

from ...models.domain import Anchor, CandidateStop, PreferenceWeights, ScoreBreakdown
from ..geospatial import DISTANCE_SCALE_KM, haversine_km
from ..validation import coerce_instant, is_finite_number, validate_coordinates, validate_weights
from .availability import is_open_now

DEFAULT_RATING = 3.5
DEFAULT_COST_INDEX = 0.3
LOWEST_RANK_SCORE = float("-inf")

logger = logging.getLogger(__name__)


def _context_hint(value: float, name: str) -> float:
    if is_finite_number(value):
        return float(value)
    logger.warning("Ignoring non-finite %s hint %r; using 0.", name, value)
    return 0.0


def category_term(categories: frozenset[str] | Sequence[str], affinity: Mapping[str, float]) -> float:
    if not categories:
        return 0.0
    return sum(affinity.get(category, 0.0) for category in categories) / len(categories)


def score_candidate(
    anchor: Optional[Anchor],
    candidate: CandidateStop,
    prefs: PreferenceWeights,
    *,
    now: datetime,
    crowd_level: float,
    weather_penalty: float,
) -> ScoreBreakdown:
    distance_km = (
        haversine_km(anchor.latitude, anchor.longitude, candidate.latitude, candidate.longitude)
        if anchor is not None
        else 0.0
    )
    rating = candidate.rating if candidate.rating is not None else DEFAULT_RATING
    cost_index = candidate.cost_index if candidate.cost_index is not None else DEFAULT_COST_INDEX

    terms = {
        "distance": -prefs.distance * min(1.0, distance_km / DISTANCE_SCALE_KM),
        "rating": prefs.rating * rating / 5,
        "open_now": prefs.open_now * (1.0 if is_open_now(candidate, now) else 0.0),
        "category": category_term(candidate.categories, prefs.category_affinity),
        "weather": -prefs.weather * weather_penalty,
        "crowding": -prefs.crowding * max(crowd_level, 0.0),
        "cost": -prefs.cost * cost_index,
    }
    score = sum(terms.values())
    if not math.isfinite(score):
        logger.warning("Candidate %s produced a non-finite score; ranking it last.", candidate.candidate_id)
        score = LOWEST_RANK_SCORE
    return ScoreBreakdown(candidate_id=candidate.candidate_id, score=score, terms=terms)


def score_candidates(
    anchor: Optional[Anchor],
    candidates: Sequence[CandidateStop],
    prefs: PreferenceWeights,
    ambient_crowd_level: float = 0.0,
    *,
    now: datetime | None = None,
    weather_penalty: float = 0.0,
) -> list[ScoreBreakdown]:
    """Rank candidates against an anchor, best first.

    Ties keep their input order. ``weather_penalty`` and ``ambient_crowd_level``
    are live context hints supplied by the caller; ``now`` defaults to the
    current UTC time and drives the open-now term.
    """

    validate_weights(prefs)
    if anchor is not None:
        validate_coordinates(anchor.latitude, anchor.longitude, label=f"Anchor {anchor.anchor_id}")
    for candidate in candidates:
        validate_coordinates(candidate.latitude, candidate.longitude, label=f"Candidate {candidate.candidate_id}")

    instant = coerce_instant(now, label="scoring time") if now is not None else datetime.now(timezone.utc)
    crowd_level = _context_hint(ambient_crowd_level, "crowd level")
    weather = _context_hint(weather_penalty, "weather penalty")

    breakdowns = [
        score_candidate(anchor, candidate, prefs, now=instant, crowd_level=crowd_level, weather_penalty=weather)
        for candidate in candidates
    ]
    # sorted() with reverse=True keeps equal scores in input order
    return sorted(breakdowns, key=lambda item: item.score, reverse=True)


def rationale(terms: Mapping[str, float]) -> str:
    """Short human-readable reason for a score breakdown."""

    if terms.get("open_now", 0.0) > 0.5 and terms.get("rating", 0.0) > 0.5:
        return "Open now and highly rated"
    if terms.get("distance", 0.0) > -0.2:
        return "Nearby option with decent fit"
    return "Balanced tradeoff by preferences"
