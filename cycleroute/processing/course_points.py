"""
Course-point merging.

Turn cues and points of interest are converted to one common CoursePoint
shape, then stable-sorted by along-track distance so markers appear on the
device in the order the rider reaches them.
"""

from typing import Iterable, List, Optional, Sequence

from ..config.logging_config import get_logger
from .geo import cumulative_distances
from .models import CoursePoint, CuePoint, PointOfInterest, TrackPoint
from .projection import snap_distance_along_track

logger = get_logger(__name__)

MAX_NAME_LENGTH = 32

POI_CATEGORIES = ('FOOD', 'WATER', 'RESTROOM', 'VIEWPOINT', 'CAUTION', 'OTHER')

POI_CATEGORY_CONFIG = {
    'FOOD': {'label': 'Food', 'color': '#f97316', 'icon': 'Utensils'},
    'WATER': {'label': 'Water', 'color': '#3b82f6', 'icon': 'Droplet'},
    'RESTROOM': {'label': 'Restroom', 'color': '#8b5cf6', 'icon': 'DoorOpen'},
    'VIEWPOINT': {'label': 'Viewpoint', 'color': '#22c55e', 'icon': 'Camera'},
    'CAUTION': {'label': 'Caution', 'color': '#ef4444', 'icon': 'AlertTriangle'},
    'OTHER': {'label': 'Other', 'color': '#6b7280', 'icon': 'MapPin'},
}

# Values are FIT profile course_point type names
INSTRUCTION_TO_COURSE_POINT_TYPE = {
    'turn left': 'left',
    'left': 'left',
    'turn right': 'right',
    'right': 'right',
    'straight': 'straight',
    'continue': 'straight',
    'sharp left': 'sharp_left',
    'sharp right': 'sharp_right',
    'slight left': 'slight_left',
    'bear left': 'slight_left',
    'slight right': 'slight_right',
    'bear right': 'slight_right',
    'u-turn': 'u_turn',
    'food': 'food',
    'rest stop': 'food',
    'water': 'water',
}

POI_CATEGORY_TO_COURSE_POINT_TYPE = {
    'FOOD': 'food',
    'WATER': 'water',
    'RESTROOM': 'rest_area',
    'VIEWPOINT': 'summit',
    'CAUTION': 'danger',
    'OTHER': 'generic',
}


def map_instruction_to_type(instruction: str) -> str:
    """Course point type for a cue instruction; unknown text maps to generic."""
    normalized = instruction.lower().strip()
    return INSTRUCTION_TO_COURSE_POINT_TYPE.get(normalized, 'generic')


def map_poi_category_to_type(category: str) -> str:
    """Course point type for a POI category; unknown categories map to generic."""
    return POI_CATEGORY_TO_COURSE_POINT_TYPE.get(category, 'generic')


def truncate_name(name: str, limit: int = MAX_NAME_LENGTH) -> str:
    return name[:limit]


def cue_to_course_point(cue: CuePoint) -> CoursePoint:
    return CoursePoint(
        name=truncate_name(cue.instruction),
        latitude=cue.latitude,
        longitude=cue.longitude,
        distance_m=cue.distance_m if cue.distance_m is not None else 0.0,
        type=map_instruction_to_type(cue.instruction),
    )


def poi_to_course_point(poi: PointOfInterest, track_points: Sequence[TrackPoint],
                        cumulative: Optional[List[float]] = None) -> CoursePoint:
    return CoursePoint(
        name=truncate_name(poi.name),
        latitude=poi.latitude,
        longitude=poi.longitude,
        distance_m=snap_distance_along_track(poi.latitude, poi.longitude, track_points, cumulative),
        type=map_poi_category_to_type(poi.category),
    )


def merge_course_points(cues: Iterable[CuePoint], pois: Iterable[PointOfInterest],
                        track_points: Sequence[TrackPoint]) -> List[CoursePoint]:
    """
    Merge cues and POIs into one list ordered by along-track distance.

    Args:
        cues: Routing instructions carrying their own along-track distance
        pois: Points of interest, snapped to the nearest track vertex
        track_points: Track geometry used for snapping

    Returns:
        Course points sorted by non-decreasing distance. The sort is stable,
        so equal distances keep cues ahead of POIs and input order within each.
    """
    cumulative = cumulative_distances(track_points)

    merged = [cue_to_course_point(cue) for cue in cues]
    merged.extend(poi_to_course_point(poi, track_points, cumulative) for poi in pois)
    merged.sort(key=lambda cp: cp.distance_m)

    logger.debug(f"Merged {len(merged)} course points")
    return merged
