"""Exhaustive permutation search for small stop sets."""

from __future__ import annotations

import itertools
import logging
import math

from .models import Solver, SolverOutcome
from .objective import RoutingProblem

logger = logging.getLogger(__name__)


def solve_exact(problem: RoutingProblem) -> SolverOutcome:
    """Evaluate every ordering of the movable stops and keep the cheapest.

    The anchor, when present, stays at position 0. Ties resolve to the first
    permutation generated, so repeated runs return the same order.
    """

    best_order: tuple[int, ...] = problem.fixed_prefix + problem.movable
    best_value = math.inf
    evaluated = 0
    for permutation in itertools.permutations(problem.movable):
        order = problem.fixed_prefix + permutation
        value = problem.evaluate(order)
        evaluated += 1
        if value < best_value:
            best_value = value
            best_order = order

    logger.debug("Exact solver evaluated %d permutations of %d stops", evaluated, len(problem))
    return SolverOutcome(
        order=best_order,
        objective=best_value,
        solver=Solver.EXACT,
        stats={"permutations_evaluated": evaluated},
    )
