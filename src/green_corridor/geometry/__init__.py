"""
Geometry Package
Great-circle distances and polyline helpers
"""

from .distance import (
    LatLon,
    EARTH_RADIUS_KM,
    distance_km,
    distances_km,
    polyline_length_km,
    interpolate_point,
    nearest_waypoint_index,
)

__all__ = [
    "LatLon",
    "EARTH_RADIUS_KM",
    "distance_km",
    "distances_km",
    "polyline_length_km",
    "interpolate_point",
    "nearest_waypoint_index",
]
