import csv
import io
from datetime import datetime, timedelta, timezone

from daylight.models.domain import PreferenceWeights, TimeWindow
from daylight.services.export import route_to_feature_collection
from daylight.services.outputs import route_to_csv, route_to_json
from daylight.services.routing import RouteOptions, Stop, optimize_route

START = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)


def _route():
    stops = [
        Stop(stop_id="hotel", latitude=34.1381, longitude=-118.3534, name="Hotel", is_anchor=True),
        Stop(stop_id="lacma", latitude=34.0639, longitude=-118.3592, name="LACMA", dwell=timedelta(minutes=90)),
        Stop(
            stop_id="pier",
            latitude=34.0094,
            longitude=-118.4973,
            name="Pier",
            time_window=TimeWindow(START, START + timedelta(minutes=15)),
        ),
    ]
    return optimize_route(stops, RouteOptions(start_time=START, weights=PreferenceWeights(), speed_kmh=40.0))


def test_route_to_csv_lists_stops_in_visiting_order():
    route = _route()

    rows = list(csv.DictReader(io.StringIO(route_to_csv(route))))

    assert [row["stop_id"] for row in rows] == route.order
    assert [row["sequence"] for row in rows] == ["1", "2", "3"]
    assert rows[0]["stop_id"] == "hotel"
    assert any(row["window_status"] == "late" for row in rows)


def test_route_to_json_mirrors_route():
    route = _route()

    payload = route_to_json(route)

    assert payload["solver"] == "exact"
    assert [stop["id"] for stop in payload["stops"]] == route.order
    assert payload["objective"] == route.objective
    assert payload["violations"] == route.violations


def test_feature_collection_has_path_and_points():
    route = _route()

    collection = route_to_feature_collection(route)

    kinds = [feature["properties"]["kind"] for feature in collection["features"]]
    assert kinds == ["path", "stop", "stop", "stop"]
    path = collection["features"][0]["geometry"]
    assert path["type"] == "LineString"
    assert len(path["coordinates"]) == 3
    # GeoJSON is lon, lat
    assert tuple(path["coordinates"][0]) == (-118.3534, 34.1381)
    assert len(collection["bbox"]) == 4


def test_outputs_carry_stop_rating_and_cost():
    route = _route()

    rows = list(csv.DictReader(io.StringIO(route_to_csv(route))))
    payload = route_to_json(route)

    assert all(row["rating"] == "" for row in rows)
    assert payload["total_cost_index"] == 0.0
    assert payload["average_rating"] is None
    assert payload["stops"][0]["rating"] is None
