"""Structural validation for planner inputs.

Only inputs that cannot be planned with at all are rejected here. Missing
optional fields are handled by the documented defaults in the scorer and the
route objective and never reach this module.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

WEIGHT_FIELDS = ("distance", "rating", "open_now", "weather", "crowding", "cost")


class PlanningInputError(ValueError):
    """Raised for inputs that are structurally invalid for planning."""


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_coordinates(latitude: Any, longitude: Any, *, label: str) -> None:
    if not is_finite_number(latitude) or not is_finite_number(longitude):
        raise PlanningInputError(f"{label} has non-finite coordinates ({latitude!r}, {longitude!r}).")
    if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
        raise PlanningInputError(f"{label} has out-of-range coordinates ({latitude}, {longitude}).")


def validate_weights(weights: Any) -> None:
    for name in WEIGHT_FIELDS:
        value = getattr(weights, name)
        if not is_finite_number(value):
            raise PlanningInputError(f"Weight '{name}' must be a finite number, got {value!r}.")
        if value < 0:
            raise PlanningInputError(f"Weight '{name}' must not be negative, got {value}.")
    for category, value in weights.category_affinity.items():
        if not is_finite_number(value):
            raise PlanningInputError(f"Category affinity for '{category}' must be finite, got {value!r}.")


def validate_schedule(schedule: Any) -> None:
    for name in ("initial_temperature", "min_temperature"):
        value = getattr(schedule, name)
        if not is_finite_number(value) or value <= 0:
            raise PlanningInputError(f"Annealing {name} must be a positive number, got {value!r}.")
    cooling_rate = schedule.cooling_rate
    if not is_finite_number(cooling_rate) or not 0 < cooling_rate < 1:
        raise PlanningInputError(f"Annealing cooling_rate must lie strictly between 0 and 1, got {cooling_rate!r}.")
    max_iterations = schedule.max_iterations
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, int) or max_iterations < 1:
        raise PlanningInputError(f"Annealing max_iterations must be a positive integer, got {max_iterations!r}.")


def coerce_instant(value: Any, *, label: str = "instant") -> datetime:
    """Return a timezone-aware datetime for ``value``.

    Accepts aware datetimes, naive datetimes (read as UTC) and finite epoch
    seconds.
    """

    if isinstance(value, datetime):
        if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if is_finite_number(value):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise PlanningInputError(f"Invalid {label}: {value!r} is outside the supported range.") from exc
    raise PlanningInputError(f"Invalid {label}: expected a datetime or epoch seconds, got {value!r}.")
