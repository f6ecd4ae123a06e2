"""
Track processing for CycleRoute Planner.

This package provides:
- Great-circle distance and bearing primitives
- GPX parsing into a normalized track with summary metrics
- Along-track projection of arbitrary points
- Merging of turn cues and points of interest into course points
"""

from .models import TrackPoint, Bounds, ParsedTrack, CuePoint, PointOfInterest, CoursePoint
from .geo import haversine_distance, calculate_bearing, cumulative_distances
from .route_processor import RouteProcessor, parse_gpx
from .projection import snap_distance_along_track, distance_along_track
from .course_points import merge_course_points, map_instruction_to_type, map_poi_category_to_type

__all__ = [
    'TrackPoint', 'Bounds', 'ParsedTrack', 'CuePoint', 'PointOfInterest', 'CoursePoint',
    'haversine_distance', 'calculate_bearing', 'cumulative_distances',
    'RouteProcessor', 'parse_gpx',
    'snap_distance_along_track', 'distance_along_track',
    'merge_course_points', 'map_instruction_to_type', 'map_poi_category_to_type',
]
