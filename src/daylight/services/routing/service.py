"""Routing orchestration service."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Optional

from ...config import settings
from ...models.domain import TimeWindow
from ...schemas.routing import RouteContext, RoutingRequest, RoutingResponse, StopModel
from ..export.geojson import route_to_feature_collection
from ..outputs.itinerary_formatter import route_to_json
from ..planning.service import to_weights
from .models import AnnealingSchedule, Route, RouteOptions, Stop, TimeWindowMode
from .optimizer import optimize_route

# Heavy congestion halves the effective speed at most.
MAX_CONGESTION_SLOWDOWN = 0.5

logger = logging.getLogger(__name__)


def to_stop(model: StopModel) -> Stop:
    window = TimeWindow(start=model.window.start, end=model.window.end) if model.window else None
    return Stop(
        stop_id=model.id,
        latitude=model.lat,
        longitude=model.lng,
        name=model.name,
        time_window=window,
        dwell=timedelta(minutes=model.dwell_minutes),
        rating=model.rating,
        cost_index=model.cost_index,
        categories=frozenset(model.categories),
        is_anchor=model.anchor,
    )


def effective_speed_kmh(base_speed_kmh: float, context: Optional[RouteContext]) -> float:
    if context is None or context.traffic_congestion is None:
        return base_speed_kmh
    slowdown = MAX_CONGESTION_SLOWDOWN * context.traffic_congestion / 100.0
    return base_speed_kmh * (1.0 - slowdown)


def build_options(payload: RoutingRequest) -> RouteOptions:
    overrides = payload.options
    base_speed = overrides.speed_kmh if overrides and overrides.speed_kmh is not None else settings.travel_speed_kmh
    options = RouteOptions(
        start_time=payload.start_time,
        weights=to_weights(payload.weights),
        speed_kmh=effective_speed_kmh(base_speed, payload.context),
    )
    if overrides is None:
        return options
    if overrides.time_window_mode is not None:
        options.time_window_mode = TimeWindowMode(overrides.time_window_mode)
    if overrides.seed is not None:
        options.seed = overrides.seed
    if overrides.time_limit_seconds is not None:
        options.time_limit_seconds = overrides.time_limit_seconds
    if overrides.max_iterations is not None:
        options.schedule = replace(AnnealingSchedule(), max_iterations=overrides.max_iterations)
    return options


def plan_route(payload: RoutingRequest) -> Route:
    stops = [to_stop(model) for model in payload.stops]
    options = build_options(payload)
    route = optimize_route(stops, options)
    logger.info(
        "Planned %d-stop route with %s solver: %.2f km, objective %.4f",
        len(route.stops),
        route.solver,
        route.total_distance_km,
        route.objective,
    )
    return route


def optimize_itinerary(payload: RoutingRequest) -> RoutingResponse:
    route = plan_route(payload)
    body = route_to_json(route)
    if len(route.stops) >= 2:
        body["metadata"].setdefault("map_overlays", {})
        body["metadata"]["map_overlays"]["route"] = route_to_feature_collection(route)
    return RoutingResponse(**body)
