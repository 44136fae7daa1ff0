"""Solver selection based on problem size."""

from __future__ import annotations

import random

from ...config import settings
from .annealing import solve_annealing
from .exact import solve_exact
from .models import RouteOptions, Solver, SolverOutcome
from .objective import RoutingProblem


def select_solver(stop_count: int, exact_max_stops: int = settings.exact_solver_max_stops) -> Solver:
    if stop_count < 0:
        raise ValueError("stop_count must be >= 0")
    return Solver.EXACT if stop_count <= exact_max_stops else Solver.ANNEALING


def run_solver(solver: Solver, problem: RoutingProblem, options: RouteOptions) -> SolverOutcome:
    match solver:
        case Solver.EXACT:
            return solve_exact(problem)
        case Solver.ANNEALING:
            rng = options.rng if options.rng is not None else random.Random(options.seed)
            return solve_annealing(
                problem,
                rng=rng,
                schedule=options.schedule,
                time_limit_seconds=options.time_limit_seconds,
                cancel_token=options.cancel_token,
                clock=options.clock,
            )
        case _:
            raise ValueError(f"Unknown solver '{solver}'.")
