"""Domain models for anchors, candidate stops and preference weights."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Mapping, Optional

from ..services.validation import PlanningInputError, coerce_instant


@dataclass(slots=True, frozen=True)
class TimeWindow:
    """Inclusive interval during which a stop is open or a visit is permitted."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", coerce_instant(self.start, label="time window start"))
        object.__setattr__(self, "end", coerce_instant(self.end, label="time window end"))
        if self.end < self.start:
            raise PlanningInputError(f"Time window ends ({self.end.isoformat()}) before it starts ({self.start.isoformat()}).")

    def contains(self, instant: datetime) -> bool:
        instant = coerce_instant(instant)
        return self.start <= instant <= self.end

    def violation(self, instant: datetime) -> timedelta:
        """Distance from ``instant`` to the window, zero when inside it."""
        instant = coerce_instant(instant)
        if instant < self.start:
            return self.start - instant
        if instant > self.end:
            return instant - self.end
        return timedelta(0)


@dataclass(slots=True, frozen=True)
class Anchor:
    """A fixed point of the trip, such as the hotel."""

    anchor_id: str
    name: str
    latitude: float
    longitude: float
    time_window: Optional[TimeWindow] = None
    locked: bool = False


@dataclass(slots=True, frozen=True)
class CandidateStop:
    """A discovered point of interest, read-only for the planner."""

    candidate_id: str
    name: str
    latitude: float
    longitude: float
    categories: frozenset[str] = frozenset()
    rating: Optional[float] = None
    cost_index: Optional[float] = None
    open_windows: tuple[TimeWindow, ...] = ()


@dataclass(slots=True, frozen=True)
class PreferenceWeights:
    """Relative importance of each scoring and routing term. Zero disables a term."""

    distance: float = 1.0
    rating: float = 1.0
    open_now: float = 1.0
    weather: float = 0.5
    crowding: float = 0.5
    cost: float = 0.3
    category_affinity: Mapping[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class ScoreBreakdown:
    candidate_id: str
    score: float
    terms: dict[str, float]
