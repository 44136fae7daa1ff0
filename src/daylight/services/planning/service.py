"""Suggestion orchestration: request models in, ranked suggestions out."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Optional

from ...config import settings
from ...models.domain import Anchor, CandidateStop, PreferenceWeights, ScoreBreakdown, TimeWindow
from ...schemas.planning import (
    AnchorModel,
    CandidateModel,
    PlanRequest,
    PlanResponse,
    ScoreBreakdownModel,
    SuggestionModel,
    TimeWindowModel,
    WeightsModel,
)
from ..geospatial import haversine_km
from ..scoring import is_open_now, rationale, score_candidates
from ..validation import PlanningInputError

logger = logging.getLogger(__name__)


def _window(model: TimeWindowModel) -> TimeWindow:
    return TimeWindow(start=model.start, end=model.end)


def to_weights(model: WeightsModel) -> PreferenceWeights:
    return PreferenceWeights(
        distance=model.distance,
        rating=model.rating,
        open_now=model.open_now,
        weather=model.weather,
        crowding=model.crowding,
        cost=model.cost,
        category_affinity=dict(model.category_affinity),
    )


def to_anchor(model: AnchorModel) -> Anchor:
    window = None
    if model.start is not None and model.end is not None:
        window = TimeWindow(start=model.start, end=model.end)
    return Anchor(
        anchor_id=model.id,
        name=model.name,
        latitude=model.lat,
        longitude=model.lng,
        time_window=window,
        locked=model.locked,
    )


def to_candidate(model: CandidateModel) -> CandidateStop:
    return CandidateStop(
        candidate_id=model.id,
        name=model.name,
        latitude=model.lat,
        longitude=model.lng,
        categories=frozenset(model.categories),
        rating=model.rating,
        cost_index=model.cost_index,
        open_windows=tuple(_window(window) for window in model.open_windows),
    )


def _breakdown_model(breakdown: ScoreBreakdown) -> ScoreBreakdownModel:
    score: Optional[float] = breakdown.score if math.isfinite(breakdown.score) else None
    return ScoreBreakdownModel(id=breakdown.candidate_id, score=score, terms=breakdown.terms)


def suggest_stops(payload: PlanRequest) -> PlanResponse:
    """Score every candidate and return the best ones with a short rationale.

    The first anchor, when given, is the distance reference.
    """

    anchor = to_anchor(payload.anchors[0]) if payload.anchors else None
    candidates = [to_candidate(model) for model in payload.candidates]
    lookup: dict[str, CandidateStop] = {}
    for candidate in candidates:
        if candidate.candidate_id in lookup:
            raise PlanningInputError(f"Duplicate candidate id '{candidate.candidate_id}'.")
        lookup[candidate.candidate_id] = candidate
    context = payload.context
    now = context.now if context and context.now else datetime.now(timezone.utc)
    limit = payload.limit or settings.suggestion_limit

    evaluations = score_candidates(
        anchor,
        candidates,
        to_weights(payload.weights),
        context.crowd_level_hint if context else 0.0,
        now=now,
        weather_penalty=context.weather_penalty if context else 0.0,
    )
    logger.info(
        "Scored %d candidates against anchor %s",
        len(candidates),
        anchor.anchor_id if anchor else "<none>",
    )

    suggestions: list[SuggestionModel] = []
    for rank, breakdown in enumerate(evaluations[:limit], start=1):
        candidate = lookup[breakdown.candidate_id]
        distance_km = (
            haversine_km(anchor.latitude, anchor.longitude, candidate.latitude, candidate.longitude)
            if anchor
            else None
        )
        model = _breakdown_model(breakdown)
        suggestions.append(
            SuggestionModel(
                id=candidate.candidate_id,
                name=candidate.name,
                lat=candidate.latitude,
                lng=candidate.longitude,
                rank=rank,
                score=model.score,
                reason=rationale(breakdown.terms),
                distance_km=distance_km,
                open_now=is_open_now(candidate, now),
                breakdown=model,
            )
        )

    return PlanResponse(
        suggestions=suggestions,
        evaluations=[_breakdown_model(breakdown) for breakdown in evaluations],
    )
