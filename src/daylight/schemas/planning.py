"""Suggestion request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class TimeWindowModel(BaseModel):
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindowModel":
        if self.end < self.start:
            raise ValueError("time window end must not precede its start")
        return self


class WeightsModel(BaseModel):
    distance: float = Field(1.0, ge=0, allow_inf_nan=False)
    rating: float = Field(1.0, ge=0, allow_inf_nan=False)
    open_now: float = Field(1.0, ge=0, allow_inf_nan=False)
    weather: float = Field(0.5, ge=0, allow_inf_nan=False)
    crowding: float = Field(0.5, ge=0, allow_inf_nan=False)
    cost: float = Field(0.3, ge=0, allow_inf_nan=False)
    category_affinity: Dict[str, float] = Field(
        default_factory=dict,
        description="Category label to affinity; negative values express dislike.",
    )


class AnchorModel(BaseModel):
    id: str
    name: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    locked: bool = False


class CandidateModel(BaseModel):
    id: str
    name: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    categories: List[str] = Field(default_factory=list)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    cost_index: Optional[float] = Field(default=None, ge=0, le=1)
    open_windows: List[TimeWindowModel] = Field(default_factory=list)


class PlanContext(BaseModel):
    crowd_level_hint: float = Field(0.0, allow_inf_nan=False)
    weather_penalty: float = Field(0.0, allow_inf_nan=False, description="0 for fair weather, 1 for poor.")
    now: Optional[datetime] = Field(default=None, description="Instant used for open-now checks; defaults to server time.")


class PlanRequest(BaseModel):
    anchors: List[AnchorModel] = Field(default_factory=list)
    candidates: List[CandidateModel] = Field(default_factory=list)
    weights: WeightsModel = Field(default_factory=WeightsModel)
    context: Optional[PlanContext] = None
    limit: Optional[int] = Field(default=None, ge=1, description="Suggestions to return; defaults to settings.")


class ScoreBreakdownModel(BaseModel):
    id: str
    score: Optional[float] = Field(description="Null when the score could not be computed.")
    terms: Dict[str, float]


class SuggestionModel(BaseModel):
    id: str
    name: str
    lat: float
    lng: float
    rank: int
    score: Optional[float]
    reason: str
    distance_km: Optional[float] = None
    open_now: bool
    breakdown: ScoreBreakdownModel


class PlanResponse(BaseModel):
    suggestions: List[SuggestionModel]
    evaluations: List[ScoreBreakdownModel]
