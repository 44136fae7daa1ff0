"""Serializers for optimised itineraries."""

from __future__ import annotations

import csv
import io
import math

from ..routing.models import Route


def _finite(value: float) -> float | None:
    return value if math.isfinite(value) else None


def _known(value: float | None) -> float | None:
    return value if value is not None and math.isfinite(value) else None


def _cell(value: float | None) -> float | str:
    known = _known(value)
    return "" if known is None else known


def route_to_json(route: Route) -> dict:
    return {
        "solver": route.solver,
        "objective": _finite(route.objective),
        "terms": route.terms,
        "total_distance_km": route.total_distance_km,
        "total_travel_min": route.total_travel_minutes,
        "total_duration_min": route.total_duration_minutes,
        "total_cost_index": route.total_cost_index,
        "average_rating": route.average_rating,
        "feasible": route.feasible,
        "violations": list(route.violations),
        "metadata": {
            key: _finite(value) if isinstance(value, float) else value for key, value in route.metadata.items()
        },
        "stops": [
            {
                "id": scheduled.stop.stop_id,
                "name": scheduled.stop.name,
                "sequence": scheduled.sequence,
                "lat": scheduled.stop.latitude,
                "lng": scheduled.stop.longitude,
                "rating": _known(scheduled.stop.rating),
                "cost_index": _known(scheduled.stop.cost_index),
                "arrival": scheduled.arrival,
                "departure": scheduled.departure,
                "distance_from_prev_km": scheduled.distance_from_prev_km,
                "travel_min_from_prev": scheduled.travel_minutes_from_prev,
                "window_status": scheduled.window_status,
                "window_violation_min": scheduled.window_violation_minutes,
            }
            for scheduled in route.stops
        ],
    }


def route_to_csv(route: Route) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "stop_id",
        "name",
        "latitude",
        "longitude",
        "rating",
        "cost_index",
        "arrival",
        "departure",
        "distance_from_prev_km",
        "travel_min_from_prev",
        "window_status",
        "window_violation_min",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for scheduled in route.stops:
        writer.writerow(
            {
                "sequence": scheduled.sequence,
                "stop_id": scheduled.stop.stop_id,
                "name": scheduled.stop.name or "",
                "latitude": scheduled.stop.latitude,
                "longitude": scheduled.stop.longitude,
                "rating": _cell(scheduled.stop.rating),
                "cost_index": _cell(scheduled.stop.cost_index),
                "arrival": scheduled.arrival.isoformat(),
                "departure": scheduled.departure.isoformat(),
                "distance_from_prev_km": round(scheduled.distance_from_prev_km, 3),
                "travel_min_from_prev": round(scheduled.travel_minutes_from_prev, 1),
                "window_status": scheduled.window_status or "",
                "window_violation_min": round(scheduled.window_violation_minutes, 1),
            }
        )
    return buffer.getvalue()
