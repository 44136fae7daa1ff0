"""Route objective and schedule accounting shared by every solver.

The objective is a cost: lower is better. It combines

* travel: ``w.distance * total_km / DISTANCE_SCALE_KM``
* cost: ``w.cost * sum(cost_index)`` over visited (non-anchor) stops
* rating: ``-w.rating * sum(rating) / 5`` over visited stops
* time_window: violation hours times the per-hour penalty, plus a flat
  ``infeasible_penalty`` per violated stop in strict mode

Arrival at the first stop is the start time; every later arrival is the
previous departure plus travel time, and departure is arrival plus dwell.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..geospatial import DISTANCE_SCALE_KM, distance_matrix_km
from ..scoring.scorer import DEFAULT_COST_INDEX, DEFAULT_RATING
from ..validation import PlanningInputError, coerce_instant, is_finite_number, validate_coordinates, validate_weights
from .models import RouteOptions, Stop, TimeWindowMode

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StopTiming:
    index: int
    arrival_min: float
    departure_min: float
    distance_from_prev_km: float
    travel_min_from_prev: float
    window_status: Optional[str]
    violation_min: float


@dataclass(slots=True)
class RouteEvaluation:
    order: tuple[int, ...]
    objective: float
    terms: dict[str, float]
    timings: list[StopTiming]
    total_distance_km: float
    total_travel_min: float

    @property
    def violated(self) -> list[StopTiming]:
        return [timing for timing in self.timings if timing.window_status is not None]


def _finite_or_inf(value: float) -> float:
    return value if math.isfinite(value) else math.inf


def _stop_signal(stop: Stop, name: str, value: Optional[float]) -> Optional[float]:
    """Return ``value``, or None when it is missing or not a finite number."""

    if value is None:
        return None
    if not is_finite_number(value):
        logger.warning("Stop %s has non-finite %s %r; using the default.", stop.stop_id, name, value)
        return None
    return float(value)


def validate_stops(stops: Sequence[Stop]) -> None:
    seen: set[str] = set()
    anchors = 0
    for stop in stops:
        validate_coordinates(stop.latitude, stop.longitude, label=f"Stop {stop.stop_id}")
        if stop.stop_id in seen:
            raise PlanningInputError(f"Duplicate stop id '{stop.stop_id}'.")
        seen.add(stop.stop_id)
        if stop.dwell < timedelta(0):
            raise PlanningInputError(f"Stop {stop.stop_id} has a negative dwell duration.")
        if stop.is_anchor:
            anchors += 1
    if anchors > 1:
        raise PlanningInputError(f"At most one anchor stop can be pinned, got {anchors}.")


class RoutingProblem:
    """Precomputed distances and windows for one optimisation request."""

    def __init__(self, stops: Sequence[Stop], options: RouteOptions) -> None:
        validate_stops(stops)
        validate_weights(options.weights)
        if not is_finite_number(options.speed_kmh) or options.speed_kmh <= 0:
            raise PlanningInputError(f"speed_kmh must be a positive number, got {options.speed_kmh!r}.")

        self.stops: tuple[Stop, ...] = tuple(stops)
        self.options = options
        self.weights = options.weights
        self.start_time: datetime = coerce_instant(options.start_time, label="start_time")
        self.mode = TimeWindowMode(options.time_window_mode)

        self.distance_km = distance_matrix_km([(stop.latitude, stop.longitude) for stop in self.stops])
        minutes_per_km = 60.0 / options.speed_kmh
        self.travel_min = [[distance * minutes_per_km for distance in row] for row in self.distance_km]
        self.dwell_min = [stop.dwell.total_seconds() / 60.0 for stop in self.stops]
        self.windows_min: list[Optional[tuple[float, float]]] = [
            (
                (stop.time_window.start - self.start_time).total_seconds() / 60.0,
                (stop.time_window.end - self.start_time).total_seconds() / 60.0,
            )
            if stop.time_window is not None
            else None
            for stop in self.stops
        ]

        anchor_index = next((i for i, stop in enumerate(self.stops) if stop.is_anchor), None)
        self.fixed_prefix: tuple[int, ...] = (anchor_index,) if anchor_index is not None else ()
        self.movable: tuple[int, ...] = tuple(i for i in range(len(self.stops)) if i != anchor_index)

        visited = [self.stops[i] for i in self.movable]
        costs = [_stop_signal(stop, "cost_index", stop.cost_index) for stop in visited]
        ratings = [_stop_signal(stop, "rating", stop.rating) for stop in visited]
        self.cost_term = self.weights.cost * sum(
            value if value is not None else DEFAULT_COST_INDEX for value in costs
        )
        self.rating_term = -self.weights.rating * sum(
            value if value is not None else DEFAULT_RATING for value in ratings
        ) / 5

        # raw figures for reporting; unknown costs count as zero
        self.total_cost_index = float(sum(value for value in costs if value is not None))
        rated = [value for value in ratings if value is not None]
        self.average_rating: Optional[float] = sum(rated) / len(rated) if rated else None

    def __len__(self) -> int:
        return len(self.stops)

    def _window_violation(self, index: int, arrival_min: float) -> tuple[Optional[str], float]:
        window = self.windows_min[index]
        if window is None:
            return None, 0.0
        opens, closes = window
        if arrival_min < opens:
            return "early", opens - arrival_min
        if arrival_min > closes:
            return "late", arrival_min - closes
        return None, 0.0

    def _penalty(self, violation_min: float) -> float:
        penalty = violation_min / 60.0 * self.options.time_window_penalty_per_hour
        if self.mode is TimeWindowMode.STRICT:
            penalty += self.options.infeasible_penalty
        return penalty

    def evaluate(self, order: Sequence[int]) -> float:
        """Objective value of ``order``; the solvers' hot path."""

        total_km = 0.0
        penalty = 0.0
        clock = 0.0
        previous = None
        for index in order:
            if previous is not None:
                total_km += self.distance_km[previous][index]
                clock += self.travel_min[previous][index]
            status, violation = self._window_violation(index, clock)
            if status is not None:
                penalty += self._penalty(violation)
            clock += self.dwell_min[index]
            previous = index
        travel = self.weights.distance * total_km / DISTANCE_SCALE_KM
        return _finite_or_inf(travel + self.cost_term + self.rating_term + penalty)

    def schedule(self, order: Sequence[int]) -> RouteEvaluation:
        """Full timing and term breakdown for ``order``."""

        timings: list[StopTiming] = []
        total_km = 0.0
        total_travel = 0.0
        penalty = 0.0
        clock = 0.0
        previous = None
        for index in order:
            leg_km = 0.0
            leg_min = 0.0
            if previous is not None:
                leg_km = self.distance_km[previous][index]
                leg_min = self.travel_min[previous][index]
            total_km += leg_km
            total_travel += leg_min
            clock += leg_min
            status, violation = self._window_violation(index, clock)
            if status is not None:
                penalty += self._penalty(violation)
            arrival = clock
            clock += self.dwell_min[index]
            timings.append(
                StopTiming(
                    index=index,
                    arrival_min=arrival,
                    departure_min=clock,
                    distance_from_prev_km=leg_km,
                    travel_min_from_prev=leg_min,
                    window_status=status,
                    violation_min=violation,
                )
            )
            previous = index

        terms = {
            "travel": self.weights.distance * total_km / DISTANCE_SCALE_KM if order else 0.0,
            "cost": self.cost_term if order else 0.0,
            "rating": self.rating_term if order else 0.0,
            "time_window": penalty,
        }
        return RouteEvaluation(
            order=tuple(order),
            objective=_finite_or_inf(sum(terms.values())),
            terms=terms,
            timings=timings,
            total_distance_km=total_km,
            total_travel_min=total_travel,
        )

    def instant(self, offset_min: float) -> datetime:
        try:
            return self.start_time + timedelta(minutes=offset_min)
        except OverflowError as exc:
            raise PlanningInputError(
                f"Schedule runs {offset_min:.1f} min past {self.start_time.isoformat()}, beyond the supported date range."
            ) from exc
