"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/solver", status_code=status.HTTP_200_OK)
def health_solver() -> dict:
    """Report the solver configuration in effect."""
    return {
        "exact_solver_max_stops": settings.exact_solver_max_stops,
        "annealing": {
            "initial_temperature": settings.annealing_initial_temperature,
            "cooling_rate": settings.annealing_cooling_rate,
            "max_iterations": settings.annealing_max_iterations,
            "min_temperature": settings.annealing_min_temperature,
            "time_limit_seconds": settings.annealing_time_limit_seconds,
        },
        "travel_speed_kmh": settings.travel_speed_kmh,
        "time_window_mode": settings.time_window_mode,
    }
