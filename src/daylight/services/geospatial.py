"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

EARTH_RADIUS_KM = 6371.0
# Distance at which the scorer's distance penalty saturates; the route
# objective divides by the same scale so both speak one weight language.
DISTANCE_SCALE_KM = 50.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # rounding can push antipodal pairs just past 1
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_matrix_km(points: Sequence[tuple[float, float]]) -> list[list[float]]:
    """Symmetric great-circle distance matrix for (lat, lon) points."""

    n = len(points)
    matrix = [[0.0] * n for _ in range(n)]
    for i in range(n):
        lat1, lon1 = points[i]
        for j in range(i + 1, n):
            lat2, lon2 = points[j]
            distance = haversine_km(lat1, lon1, lat2, lon2)
            matrix[i][j] = distance
            matrix[j][i] = distance
    return matrix
