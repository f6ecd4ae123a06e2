"""
Geographic primitives for route processing.
Great-circle distance and bearing on a spherical Earth.
"""

from math import radians, cos, sin, sqrt, atan2, degrees
from typing import List, Sequence

EARTH_RADIUS_M = 6371000


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on earth in meters.
    """
    phi1, phi2 = radians(lat1), radians(lat2)
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)

    a = sin(dlat / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_M * c


def calculate_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the initial bearing from point 1 to point 2 in degrees [0, 360).

    Coincident points have no defined bearing and yield 0.0.
    """
    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])

    dlon = lon2 - lon1
    y = sin(dlon) * cos(lat2)
    x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)

    bearing = degrees(atan2(y, x))
    bearing = (bearing + 360) % 360

    # (-tiny + 360) % 360 can round to exactly 360.0
    return 0.0 if bearing >= 360 else bearing


def cumulative_distances(points: Sequence) -> List[float]:
    """
    Running along-track distance in meters for each point.

    Args:
        points: Sequence of objects with ``latitude`` and ``longitude``

    Returns:
        One distance per point, starting at 0.0
    """
    if not points:
        return []

    distances = [0.0]
    for prev, curr in zip(points, points[1:]):
        distances.append(distances[-1] + haversine_distance(
            prev.latitude, prev.longitude, curr.latitude, curr.longitude
        ))
    return distances
