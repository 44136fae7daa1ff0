"""Export services."""

from .geojson import route_path, route_to_feature_collection

__all__ = ["route_to_feature_collection", "route_path"]
