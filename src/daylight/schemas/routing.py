"""Routing request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .planning import TimeWindowModel, WeightsModel


class StopModel(BaseModel):
    id: str
    name: Optional[str] = None
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    window: Optional[TimeWindowModel] = None
    dwell_minutes: float = Field(0.0, ge=0, le=7 * 24 * 60, allow_inf_nan=False)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    cost_index: Optional[float] = Field(default=None, ge=0, le=1)
    categories: List[str] = Field(default_factory=list)
    anchor: bool = Field(default=False, description="Pin this stop as the route start.")


class RouteOptionsModel(BaseModel):
    time_window_mode: Optional[Literal["soft", "strict"]] = None
    speed_kmh: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    seed: Optional[int] = Field(default=None, description="Seed for reproducible annealing runs.")
    max_iterations: Optional[int] = Field(None, ge=1)
    time_limit_seconds: Optional[float] = Field(None, gt=0, le=60)


class RouteContext(BaseModel):
    traffic_congestion: Optional[float] = Field(
        default=None,
        ge=0,
        le=100,
        description="Congestion percentage from a traffic provider; slows the speed model.",
    )


class RoutingRequest(BaseModel):
    stops: List[StopModel]
    start_time: datetime
    weights: WeightsModel = Field(default_factory=WeightsModel)
    options: Optional[RouteOptionsModel] = None
    context: Optional[RouteContext] = None


class ScheduledStopModel(BaseModel):
    id: str
    name: Optional[str]
    sequence: int
    lat: float
    lng: float
    rating: Optional[float] = None
    cost_index: Optional[float] = None
    arrival: datetime
    departure: datetime
    distance_from_prev_km: float
    travel_min_from_prev: float
    window_status: Optional[Literal["early", "late"]] = None
    window_violation_min: float = 0.0


class RoutingResponse(BaseModel):
    solver: str
    objective: Optional[float] = Field(description="Lower is better; null when no finite value exists.")
    terms: Dict[str, float]
    total_distance_km: float
    total_travel_min: float
    total_duration_min: float
    total_cost_index: float = Field(0.0, description="Sum of the known cost indices of visited stops.")
    average_rating: Optional[float] = Field(None, description="Mean rating of visited stops that carry one.")
    feasible: bool
    violations: List[str]
    stops: List[ScheduledStopModel]
    metadata: dict
