"""Route optimisation entry point."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from ..validation import PlanningInputError, validate_schedule
from .dispatcher import run_solver, select_solver
from .models import Route, RouteOptions, ScheduledStop, SolverOutcome, Stop, TimeWindowMode
from .objective import RoutingProblem, StopTiming

# permutations grow factorially; 10 stops is already 362 880 orderings
EXACT_HARD_LIMIT = 10

logger = logging.getLogger(__name__)


def _violation_message(problem: RoutingProblem, timing: StopTiming) -> str:
    stop = problem.stops[timing.index]
    window = stop.time_window
    arrival = problem.instant(timing.arrival_min)
    return (
        f"Stop {stop.stop_id} arrival {arrival.isoformat()} is {timing.violation_min:.1f} min {timing.window_status} "
        f"for window [{window.start.isoformat()}, {window.end.isoformat()}]"
    )


def build_route(problem: RoutingProblem, outcome: SolverOutcome) -> Route:
    evaluation = problem.schedule(outcome.order)
    scheduled = [
        ScheduledStop(
            stop=problem.stops[timing.index],
            sequence=sequence,
            arrival=problem.instant(timing.arrival_min),
            departure=problem.instant(timing.departure_min),
            distance_from_prev_km=timing.distance_from_prev_km,
            travel_minutes_from_prev=timing.travel_min_from_prev,
            window_status=timing.window_status,
            window_violation_minutes=timing.violation_min,
        )
        for sequence, timing in enumerate(evaluation.timings, start=1)
    ]
    violations = [_violation_message(problem, timing) for timing in evaluation.violated]
    total_duration = evaluation.timings[-1].departure_min if evaluation.timings else 0.0
    feasible = math.isfinite(evaluation.objective) and not (violations and problem.mode is TimeWindowMode.STRICT)
    metadata = {
        "stop_count": len(problem),
        "time_window_mode": problem.mode.value,
        "speed_kmh": problem.options.speed_kmh,
        "start_time": problem.start_time.isoformat(),
        "within_time_windows": not violations,
        **outcome.stats,
    }
    return Route(
        stops=scheduled,
        objective=evaluation.objective,
        terms=evaluation.terms,
        solver=outcome.solver.value,
        total_distance_km=evaluation.total_distance_km,
        total_travel_minutes=evaluation.total_travel_min,
        total_duration_minutes=total_duration,
        violations=violations,
        feasible=feasible,
        metadata=metadata,
        total_cost_index=problem.total_cost_index,
        average_rating=problem.average_rating,
    )


def optimize_route(stops: Sequence[Stop], options: RouteOptions) -> Route:
    """Order ``stops`` into a timed itinerary.

    Up to ``options.exact_max_stops`` stops are solved exactly; larger sets
    use simulated annealing. An empty input yields an empty route with
    objective 0.0. Time-window misses are reported on the route, never raised.
    """

    if options.exact_max_stops > EXACT_HARD_LIMIT:
        raise PlanningInputError(
            f"exact_max_stops={options.exact_max_stops} exceeds the supported limit of {EXACT_HARD_LIMIT}."
        )
    validate_schedule(options.schedule)
    problem = RoutingProblem(stops, options)
    solver = select_solver(len(problem), options.exact_max_stops)
    logger.info("Optimising route over %d stops with the %s solver", len(problem), solver.value)

    outcome = run_solver(solver, problem, options)
    route = build_route(problem, outcome)
    if route.violations:
        logger.info("Route has %d time-window violation(s)", len(route.violations))
    return route
