"""Routing domain models."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, List, Optional, Protocol

from ...config import settings
from ...models.domain import Anchor, CandidateStop, PreferenceWeights, TimeWindow


class TimeWindowMode(str, Enum):
    SOFT = "soft"
    STRICT = "strict"


class Solver(str, Enum):
    EXACT = "exact"
    ANNEALING = "annealing"


class CancellationToken(Protocol):
    def is_set(self) -> bool: ...


@dataclass(slots=True)
class SolverOutcome:
    order: tuple[int, ...]
    objective: float
    solver: Solver
    stats: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class Stop:
    """A routable stop; anchors and candidates both map onto it."""

    stop_id: str
    latitude: float
    longitude: float
    name: Optional[str] = None
    time_window: Optional[TimeWindow] = None
    dwell: timedelta = timedelta(0)
    rating: Optional[float] = None
    cost_index: Optional[float] = None
    categories: frozenset[str] = frozenset()
    is_anchor: bool = False

    @classmethod
    def from_anchor(cls, anchor: Anchor, *, dwell: timedelta = timedelta(0)) -> "Stop":
        return cls(
            stop_id=anchor.anchor_id,
            latitude=anchor.latitude,
            longitude=anchor.longitude,
            name=anchor.name,
            time_window=anchor.time_window,
            dwell=dwell,
            is_anchor=True,
        )

    @classmethod
    def from_candidate(
        cls,
        candidate: CandidateStop,
        *,
        dwell: timedelta = timedelta(0),
        time_window: Optional[TimeWindow] = None,
    ) -> "Stop":
        # a single opening window doubles as the visit window
        if time_window is None and len(candidate.open_windows) == 1:
            time_window = candidate.open_windows[0]
        return cls(
            stop_id=candidate.candidate_id,
            latitude=candidate.latitude,
            longitude=candidate.longitude,
            name=candidate.name,
            time_window=time_window,
            dwell=dwell,
            rating=candidate.rating,
            cost_index=candidate.cost_index,
            categories=candidate.categories,
        )


@dataclass(slots=True)
class AnnealingSchedule:
    initial_temperature: float = settings.annealing_initial_temperature
    cooling_rate: float = settings.annealing_cooling_rate
    max_iterations: int = settings.annealing_max_iterations
    min_temperature: float = settings.annealing_min_temperature


@dataclass(slots=True)
class RouteOptions:
    start_time: datetime | float
    weights: PreferenceWeights = field(default_factory=PreferenceWeights)
    speed_kmh: float = settings.travel_speed_kmh
    exact_max_stops: int = settings.exact_solver_max_stops
    time_window_mode: TimeWindowMode = TimeWindowMode(settings.time_window_mode)
    time_window_penalty_per_hour: float = settings.time_window_penalty_per_hour
    infeasible_penalty: float = settings.infeasible_penalty
    schedule: AnnealingSchedule = field(default_factory=AnnealingSchedule)
    seed: Optional[int] = None
    rng: Optional[random.Random] = None
    time_limit_seconds: Optional[float] = settings.annealing_time_limit_seconds
    cancel_token: Optional[CancellationToken] = None
    clock: Callable[[], float] = time.monotonic


@dataclass(slots=True)
class ScheduledStop:
    stop: Stop
    sequence: int
    arrival: datetime
    departure: datetime
    distance_from_prev_km: float
    travel_minutes_from_prev: float
    window_status: Optional[str] = None
    window_violation_minutes: float = 0.0

    @property
    def stop_id(self) -> str:
        return self.stop.stop_id


@dataclass(slots=True)
class Route:
    stops: List[ScheduledStop]
    objective: float
    terms: dict[str, float]
    solver: str
    total_distance_km: float
    total_travel_minutes: float
    total_duration_minutes: float
    violations: List[str]
    feasible: bool
    metadata: dict[str, Any] = field(default_factory=dict)
    total_cost_index: float = 0.0
    average_rating: Optional[float] = None

    @property
    def order(self) -> list[str]:
        return [scheduled.stop_id for scheduled in self.stops]
