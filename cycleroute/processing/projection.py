"""
Along-track distance for arbitrary points.

Two distinct distance definitions are provided and intentionally kept apart:

* ``snap_distance_along_track`` snaps to the nearest track vertex. FIT course
  points use this one.
* ``distance_along_track`` projects onto the nearest segment and interpolates
  within it. Used for showing how far along the route a single POI lies.
"""

from typing import List, Optional, Sequence

from .geo import haversine_distance, cumulative_distances
from .models import TrackPoint


def snap_distance_along_track(lat: float, lon: float,
                              track_points: Sequence[TrackPoint],
                              cumulative: Optional[List[float]] = None) -> float:
    """
    Along-track distance of the track vertex closest to (lat, lon).

    Args:
        lat: Query latitude
        lon: Query longitude
        track_points: Track geometry
        cumulative: Precomputed ``cumulative_distances(track_points)``, if available

    Returns:
        Cumulative distance in meters of the nearest vertex; ties resolve to
        the lowest index. A single-point track yields the direct distance.
    """
    if not track_points:
        return 0.0
    if len(track_points) == 1:
        only = track_points[0]
        return haversine_distance(only.latitude, only.longitude, lat, lon)

    if cumulative is None:
        cumulative = cumulative_distances(track_points)

    best_dist = float('inf')
    best_along_track = 0.0
    for point, along_track in zip(track_points, cumulative):
        d = haversine_distance(lat, lon, point.latitude, point.longitude)
        if d < best_dist:
            best_dist = d
            best_along_track = along_track

    return best_along_track


def distance_along_track(lat: float, lon: float, track_points: Sequence[TrackPoint]) -> float:
    """
    Distance from the start of the track to the closest position on it.

    Each segment is treated as a straight line in lat/lon space for the
    projection; the closeness test and the segment length use great-circle
    distance.

    Args:
        lat: Query latitude
        lon: Query longitude
        track_points: Track geometry

    Returns:
        Along-track distance in meters
    """
    if not track_points:
        return 0.0
    if len(track_points) == 1:
        only = track_points[0]
        return haversine_distance(only.latitude, only.longitude, lat, lon)

    min_dist = float('inf')
    best_segment_index = 0
    best_fraction = 0.0

    for i in range(len(track_points) - 1):
        a = track_points[i]
        b = track_points[i + 1]

        dx = b.longitude - a.longitude
        dy = b.latitude - a.latitude
        len_sq = dx * dx + dy * dy

        fraction = 0.0
        if len_sq > 0:
            fraction = ((lon - a.longitude) * dx + (lat - a.latitude) * dy) / len_sq
            fraction = max(0.0, min(1.0, fraction))

        proj_lat = a.latitude + fraction * dy
        proj_lon = a.longitude + fraction * dx
        dist = haversine_distance(proj_lat, proj_lon, lat, lon)

        if dist < min_dist:
            min_dist = dist
            best_segment_index = i
            best_fraction = fraction

    distance = 0.0
    for i in range(best_segment_index):
        distance += haversine_distance(
            track_points[i].latitude, track_points[i].longitude,
            track_points[i + 1].latitude, track_points[i + 1].longitude,
        )

    seg_start = track_points[best_segment_index]
    seg_end = track_points[best_segment_index + 1]
    seg_length = haversine_distance(seg_start.latitude, seg_start.longitude,
                                    seg_end.latitude, seg_end.longitude)

    return distance + seg_length * best_fraction
