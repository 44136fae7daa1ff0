"""GeoJSON export of itineraries for map overlays."""

from __future__ import annotations

from typing import Any, Dict, List

from shapely.geometry import LineString, Point, mapping

from ..routing.models import Route


def route_path(route: Route) -> LineString | None:
    """Straight-line path through the stops in visiting order."""

    coordinates = [(scheduled.stop.longitude, scheduled.stop.latitude) for scheduled in route.stops]
    if len(coordinates) < 2:
        return None
    return LineString(coordinates)


def route_to_feature_collection(route: Route) -> Dict[str, Any]:
    """Build a FeatureCollection with one Point per stop and the connecting LineString.

    Coordinates follow GeoJSON order (lon, lat).
    """

    features: List[Dict[str, Any]] = []
    path = route_path(route)
    if path is not None:
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(path),
                "properties": {
                    "kind": "path",
                    "solver": route.solver,
                    "total_distance_km": round(route.total_distance_km, 3),
                    "wkt": path.wkt,
                },
            }
        )
    for scheduled in route.stops:
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(Point(scheduled.stop.longitude, scheduled.stop.latitude)),
                "properties": {
                    "kind": "stop",
                    "stop_id": scheduled.stop.stop_id,
                    "name": scheduled.stop.name,
                    "sequence": scheduled.sequence,
                    "arrival": scheduled.arrival.isoformat(),
                    "window_status": scheduled.window_status,
                },
            }
        )
    collection: Dict[str, Any] = {"type": "FeatureCollection", "features": features}
    if path is not None:
        min_x, min_y, max_x, max_y = path.bounds
        collection["bbox"] = [min_x, min_y, max_x, max_y]
    return collection
