"""Simulated annealing over visiting orders for larger stop sets.

Procedure:

1. Seed with a nearest-neighbour tour from the anchor (or the first stop).
2. Each iteration picks two movable positions and either swaps them or
   reverses the segment between them.
3. Moves that do not worsen the objective are always accepted; worsening
   moves are accepted with probability ``exp(-delta / T)``.
4. ``T`` is multiplied by the cooling rate every iteration and never drops
   below the schedule's minimum temperature.
5. The best order seen during the run is returned, not the final state.

All randomness is drawn from the ``random.Random`` passed in, so a fixed seed
reproduces a run exactly. The run stops at the iteration cap, when the
deadline passes, or when the cancellation token is set.
"""

from __future__ import annotations

import logging
import math
import random
import time
from typing import Callable, Optional

from ..validation import validate_schedule
from .models import AnnealingSchedule, CancellationToken, Solver, SolverOutcome
from .objective import RoutingProblem

logger = logging.getLogger(__name__)


def nearest_neighbour_order(problem: RoutingProblem) -> list[int]:
    """Greedy tour over the movable stops, starting next to the fixed prefix."""

    remaining = list(problem.movable)
    if not remaining:
        return []
    tour: list[int] = []
    if problem.fixed_prefix:
        current = problem.fixed_prefix[-1]
    else:
        current = remaining.pop(0)
        tour.append(current)
    while remaining:
        # min() keeps the earliest stop on distance ties
        nearest = min(remaining, key=lambda index: problem.distance_km[current][index])
        remaining.remove(nearest)
        tour.append(nearest)
        current = nearest
    return tour


def propose_move(tour: list[int], rng: random.Random) -> list[int]:
    """Return a neighbour of ``tour`` via a pairwise swap or a segment reversal."""

    first, second = sorted(rng.sample(range(len(tour)), 2))
    candidate = tour[:]
    if rng.random() < 0.5:
        candidate[first], candidate[second] = candidate[second], candidate[first]
    else:
        candidate[first : second + 1] = reversed(candidate[first : second + 1])
    return candidate


def solve_annealing(
    problem: RoutingProblem,
    *,
    rng: random.Random,
    schedule: AnnealingSchedule | None = None,
    time_limit_seconds: Optional[float] = None,
    cancel_token: Optional[CancellationToken] = None,
    clock: Callable[[], float] = time.monotonic,
) -> SolverOutcome:
    schedule = schedule or AnnealingSchedule()
    validate_schedule(schedule)
    prefix = problem.fixed_prefix

    current = nearest_neighbour_order(problem)
    current_cost = problem.evaluate(prefix + tuple(current))
    best = current[:]
    best_cost = current_cost

    stats = {
        "iterations": 0,
        "accepted_moves": 0,
        "improvements": 0,
        "initial_objective": current_cost,
        "stopped_reason": "completed",
    }
    if len(current) < 2:
        stats["stopped_reason"] = "trivial"
        return SolverOutcome(order=prefix + tuple(best), objective=best_cost, solver=Solver.ANNEALING, stats=stats)

    deadline = clock() + time_limit_seconds if time_limit_seconds is not None else None
    temperature = schedule.initial_temperature

    for iteration in range(schedule.max_iterations):
        if cancel_token is not None and cancel_token.is_set():
            stats["stopped_reason"] = "cancelled"
            break
        if deadline is not None and clock() >= deadline:
            stats["stopped_reason"] = "deadline"
            break

        candidate = propose_move(current, rng)
        candidate_cost = problem.evaluate(prefix + tuple(candidate))
        delta = candidate_cost - current_cost
        stats["iterations"] = iteration + 1

        if delta <= 0 or rng.random() < math.exp(-delta / temperature):
            current, current_cost = candidate, candidate_cost
            stats["accepted_moves"] += 1
            if current_cost < best_cost:
                best, best_cost = current[:], current_cost
                stats["improvements"] += 1

        temperature = max(temperature * schedule.cooling_rate, schedule.min_temperature)

    stats["final_temperature"] = temperature
    logger.debug(
        "Annealing finished after %d iterations (%s): %.4f -> %.4f",
        stats["iterations"],
        stats["stopped_reason"],
        stats["initial_objective"],
        best_cost,
    )
    return SolverOutcome(order=prefix + tuple(best), objective=best_cost, solver=Solver.ANNEALING, stats=stats)
