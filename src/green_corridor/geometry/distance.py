"""
Geographic helpers on (latitude, longitude) pairs in degrees.

All distances are great-circle (haversine) distances in kilometres.
"""

import math
from typing import Sequence, Tuple

import numpy as np

LatLon = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Sequence[float], b: Sequence[float]) -> float:
    """Haversine distance between two points in km"""
    d_lat = math.radians(b[0] - a[0])
    d_lon = math.radians(b[1] - a[1])
    lat1 = math.radians(a[0])
    lat2 = math.radians(b[0])

    x = (math.sin(d_lat / 2) ** 2
         + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(x), math.sqrt(1 - x))


def distances_km(points: Sequence[Sequence[float]], location: Sequence[float]) -> np.ndarray:
    """Vectorised haversine distance from every point to one location"""
    pts = np.radians(np.asarray(points, dtype=float).reshape(-1, 2))
    lat0, lon0 = np.radians(location[0]), np.radians(location[1])

    d_lat = lat0 - pts[:, 0]
    d_lon = lon0 - pts[:, 1]
    x = np.sin(d_lat / 2) ** 2 + np.cos(pts[:, 0]) * np.cos(lat0) * np.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(x), np.sqrt(1 - x))


def polyline_length_km(points: Sequence[Sequence[float]]) -> float:
    """Sum of consecutive segment distances; 0 for fewer than two points"""
    total = 0.0
    for i in range(len(points) - 1):
        total += distance_km(points[i], points[i + 1])
    return total


def interpolate_point(a: Sequence[float], b: Sequence[float], t: float) -> LatLon:
    """Linear interpolation between a and b at fraction t"""
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def nearest_waypoint_index(points: Sequence[Sequence[float]], location: Sequence[float]) -> int:
    """Index of the waypoint closest to location (first one on ties)"""
    if len(points) == 0:
        raise ValueError("points is empty")
    return int(np.argmin(distances_km(points, location)))
