"""
Track and annotation data models.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class TrackPoint:
    """One raw coordinate of a route, in traversal order."""
    latitude: float
    longitude: float
    elevation: Optional[float] = None


@dataclass(frozen=True)
class Bounds:
    """Latitude/longitude bounding box of a track."""
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def to_dict(self) -> dict:
        return {
            'min_lat': self.min_lat,
            'max_lat': self.max_lat,
            'min_lon': self.min_lon,
            'max_lon': self.max_lon,
        }


@dataclass(frozen=True)
class ParsedTrack:
    """
    Normalized track geometry plus summary metrics.

    Every field is derived from ``points``; a track is re-parsed from its raw
    document rather than updated in place.
    """
    name: str
    points: Tuple[TrackPoint, ...]
    total_distance_m: float
    elevation_gain_m: Optional[float]
    bounds: Bounds

    @property
    def has_elevation(self) -> bool:
        return self.elevation_gain_m is not None


@dataclass(frozen=True)
class CuePoint:
    """A turn-by-turn routing instruction with a precomputed along-track distance."""
    instruction: str
    latitude: float
    longitude: float
    distance_m: Optional[float] = None


@dataclass(frozen=True)
class PointOfInterest:
    """A user-placed marker with a category from ``POI_CATEGORIES``."""
    name: str
    latitude: float
    longitude: float
    category: str
    description: Optional[str] = None


@dataclass(frozen=True)
class CoursePoint:
    """A named, typed, distance-tagged course marker for device export."""
    name: str
    latitude: float
    longitude: float
    distance_m: float
    type: str
