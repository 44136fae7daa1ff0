"""Route optimisation services."""

from .dispatcher import select_solver
from .models import AnnealingSchedule, Route, RouteOptions, ScheduledStop, Solver, Stop, TimeWindowMode
from .optimizer import optimize_route

__all__ = [
    "optimize_route",
    "select_solver",
    "AnnealingSchedule",
    "Route",
    "RouteOptions",
    "ScheduledStop",
    "Solver",
    "Stop",
    "TimeWindowMode",
]
