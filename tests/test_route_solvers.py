import itertools
import random
from datetime import datetime, timedelta, timezone

import pytest

from daylight.models.domain import PreferenceWeights, TimeWindow
from daylight.services.routing import AnnealingSchedule, RouteOptions, Solver, Stop, optimize_route, select_solver
from daylight.services.routing.annealing import nearest_neighbour_order, propose_move, solve_annealing
from daylight.services.routing.exact import solve_exact
from daylight.services.routing.objective import RoutingProblem
from daylight.services.validation import PlanningInputError

START = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)
TRAVEL_ONLY = PreferenceWeights(distance=1.0, rating=0.0, cost=0.0)
FAST_SCHEDULE = AnnealingSchedule(initial_temperature=1.0, cooling_rate=0.999, max_iterations=6000, min_temperature=1e-6)


def _stop(sid: str, lat: float, lng: float, **kwargs) -> Stop:
    return Stop(stop_id=sid, latitude=lat, longitude=lng, **kwargs)


def _scattered_stops(count: int, seed: int, *, anchor: bool = False) -> list[Stop]:
    rng = random.Random(seed)
    stops = [
        _stop(f"S{i:02d}", 34.0 + rng.uniform(-0.15, 0.15), -118.3 + rng.uniform(-0.2, 0.2), rating=rng.uniform(2, 5))
        for i in range(count)
    ]
    if anchor:
        stops[0] = _stop("hotel", 34.1381, -118.3534, is_anchor=True)
    return stops


def _options(**kwargs) -> RouteOptions:
    kwargs.setdefault("weights", TRAVEL_ONLY)
    kwargs.setdefault("speed_kmh", 40.0)
    kwargs.setdefault("exact_max_stops", 8)
    kwargs.setdefault("schedule", FAST_SCHEDULE)
    kwargs.setdefault("time_limit_seconds", None)
    return RouteOptions(start_time=START, **kwargs)


@pytest.mark.parametrize(
    "count, threshold, expected",
    [
        (0, 8, Solver.EXACT),
        (1, 8, Solver.EXACT),
        (8, 8, Solver.EXACT),
        (9, 8, Solver.ANNEALING),
        (6, 5, Solver.ANNEALING),
    ],
)
def test_select_solver_depends_only_on_size(count, threshold, expected):
    assert select_solver(count, threshold) is expected


def test_exact_solver_matches_brute_force():
    stops = _scattered_stops(7, seed=11)
    stops[3] = _stop("S03", stops[3].latitude, stops[3].longitude, time_window=TimeWindow(START, START + timedelta(minutes=20)))
    problem = RoutingProblem(stops, _options(weights=PreferenceWeights()))

    outcome = solve_exact(problem)

    brute_force = min(problem.evaluate(order) for order in itertools.permutations(range(len(stops))))
    assert outcome.objective == pytest.approx(brute_force)
    assert problem.evaluate(outcome.order) == pytest.approx(brute_force)
    assert outcome.stats["permutations_evaluated"] == 5040


def test_exact_solver_pins_anchor_first():
    stops = _scattered_stops(6, seed=5)
    stops.insert(3, _stop("hotel", 34.1381, -118.3534, is_anchor=True))

    route = optimize_route(stops, _options())

    assert route.solver == "exact"
    assert route.order[0] == "hotel"
    assert sorted(route.order) == sorted(stop.stop_id for stop in stops)
    assert route.metadata["permutations_evaluated"] == 720


def test_annealing_is_used_above_threshold():
    stops = _scattered_stops(12, seed=3, anchor=True)

    route = optimize_route(stops, _options(seed=7))

    assert route.solver == "annealing"
    assert route.order[0] == "hotel"
    assert sorted(route.order) == sorted(stop.stop_id for stop in stops)
    assert route.objective <= route.metadata["initial_objective"]


def test_annealing_is_reproducible_with_seed():
    stops = _scattered_stops(14, seed=21)

    first = optimize_route(stops, _options(seed=1234))
    second = optimize_route(stops, _options(seed=1234))

    assert first.order == second.order
    assert first.objective == second.objective
    assert first.metadata["accepted_moves"] == second.metadata["accepted_moves"]


def test_injected_rng_drives_annealing():
    stops = _scattered_stops(10, seed=8)

    first = optimize_route(stops, _options(rng=random.Random(99)))
    second = optimize_route(stops, _options(rng=random.Random(99)))

    assert first.order == second.order


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_annealing_is_close_to_exact_on_small_instances(seed):
    stops = _scattered_stops(8, seed=seed, anchor=True)
    problem = RoutingProblem(stops, _options())

    exact = solve_exact(problem)
    annealed = solve_annealing(problem, rng=random.Random(seed), schedule=FAST_SCHEDULE)

    assert annealed.objective <= exact.objective * 1.05 + 1e-9
    assert annealed.objective >= exact.objective - 1e-9


def test_four_stop_instance_matches_exact_distance():
    stops = [
        _stop("hotel", 34.1381, -118.3534, is_anchor=True),
        _stop("griffith", 34.1184, -118.3004),
        _stop("lacma", 34.0639, -118.3592),
        _stop("santa-monica", 34.0094, -118.4973),
    ]
    problem = RoutingProblem(stops, _options())

    exact = problem.schedule(solve_exact(problem).order)
    annealed = problem.schedule(
        solve_annealing(
            problem,
            rng=random.Random(0),
            schedule=AnnealingSchedule(initial_temperature=2.0, cooling_rate=0.999, max_iterations=20000),
        ).order
    )

    assert annealed.total_distance_km == pytest.approx(exact.total_distance_km)


def test_annealing_returns_best_seen_not_last_state():
    stops = _scattered_stops(10, seed=4)
    problem = RoutingProblem(stops, _options())
    # a hot schedule keeps accepting worse moves until the very end
    hot = AnnealingSchedule(initial_temperature=1e6, cooling_rate=0.999999, max_iterations=500, min_temperature=1e5)

    outcome = solve_annealing(problem, rng=random.Random(5), schedule=hot)

    assert outcome.objective == pytest.approx(problem.evaluate(outcome.order))
    assert outcome.objective <= outcome.stats["initial_objective"]


def test_cancelled_run_returns_seed_tour():
    class AlreadyCancelled:
        def is_set(self) -> bool:
            return True

    stops = _scattered_stops(10, seed=9)
    problem = RoutingProblem(stops, _options())

    outcome = solve_annealing(problem, rng=random.Random(1), cancel_token=AlreadyCancelled())

    assert outcome.stats["stopped_reason"] == "cancelled"
    assert outcome.stats["iterations"] == 0
    assert list(outcome.order) == nearest_neighbour_order(problem)


def test_deadline_stops_run_with_best_so_far():
    ticks = itertools.count()
    stops = _scattered_stops(10, seed=9)
    problem = RoutingProblem(stops, _options())

    outcome = solve_annealing(
        problem,
        rng=random.Random(1),
        schedule=FAST_SCHEDULE,
        time_limit_seconds=5,
        clock=lambda: next(ticks),
    )

    assert outcome.stats["stopped_reason"] == "deadline"
    assert outcome.stats["iterations"] == 4
    assert sorted(outcome.order) == list(range(10))
    assert outcome.objective <= outcome.stats["initial_objective"]


def test_propose_move_keeps_permutation():
    rng = random.Random(3)
    tour = list(range(9))
    for _ in range(200):
        tour = propose_move(tour, rng)
        assert sorted(tour) == list(range(9))


def test_nearest_neighbour_starts_after_anchor():
    stops = [
        _stop("far", 34.5, -118.3),
        _stop("hotel", 34.0, -118.3, is_anchor=True),
        _stop("near", 34.01, -118.3),
    ]
    problem = RoutingProblem(stops, _options())

    assert problem.fixed_prefix == (1,)
    assert nearest_neighbour_order(problem) == [2, 0]


def test_exact_threshold_above_hard_limit_is_rejected():
    with pytest.raises(PlanningInputError):
        optimize_route(_scattered_stops(3, seed=1), _options(exact_max_stops=11))


@pytest.mark.parametrize(
    "schedule",
    [
        AnnealingSchedule(initial_temperature=0.0, min_temperature=0.0),
        AnnealingSchedule(initial_temperature=-1.0),
        AnnealingSchedule(min_temperature=0.0),
        AnnealingSchedule(cooling_rate=1.0),
        AnnealingSchedule(cooling_rate=0.0),
        AnnealingSchedule(max_iterations=0),
        AnnealingSchedule(initial_temperature=float("nan")),
    ],
)
def test_invalid_annealing_schedule_is_rejected(schedule):
    problem = RoutingProblem(_scattered_stops(10, seed=2), _options())

    with pytest.raises(PlanningInputError):
        solve_annealing(problem, rng=random.Random(1), schedule=schedule)
    with pytest.raises(PlanningInputError):
        optimize_route(_scattered_stops(3, seed=2), _options(schedule=schedule))
