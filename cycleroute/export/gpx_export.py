"""
GPX export.

Writes the track with its points of interest as a GPX 1.1 document. Every
parsed point is written back unchanged; POIs become waypoints typed with the
Garmin waypoint vocabulary.
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

import gpxpy
import gpxpy.gpx

from ..config.config import ExportConfig
from ..config.logging_config import get_logger
from ..processing.models import PointOfInterest, TrackPoint

logger = get_logger(__name__)

GARMIN_TYPE_MAP = {
    'FOOD': 'FOOD',
    'WATER': 'WATER',
    'RESTROOM': 'TOILET',
    'VIEWPOINT': 'OVERLOOK',
    'CAUTION': 'DANGER',
    'OTHER': 'GENERIC',
}


def map_poi_category_to_gpx_type(category: str) -> str:
    return GARMIN_TYPE_MAP.get(category, 'GENERIC')


def build_export_gpx(name: str, track_points: Sequence[TrackPoint],
                     waypoints: Sequence[PointOfInterest] = (),
                     description: Optional[str] = None,
                     generated_at: Optional[datetime] = None,
                     config: ExportConfig = None) -> str:
    """
    Build a GPX document for a route.

    Args:
        name: Route name, used for the metadata and the track
        track_points: Track geometry
        waypoints: Points of interest to emit as ``<wpt>`` elements
        description: Optional route description
        generated_at: Generation timestamp (defaults to now, UTC)
        config: Export settings (creator string)

    Returns:
        The GPX document as a string
    """
    config = config or ExportConfig()
    generated_at = (generated_at or datetime.now(timezone.utc)).astimezone(timezone.utc)

    gpx = gpxpy.gpx.GPX()
    gpx.creator = config.creator
    gpx.name = name
    # Metadata time carries millisecond precision
    gpx.time = generated_at.replace(microsecond=generated_at.microsecond // 1000 * 1000)
    if description:
        gpx.description = description

    for wpt in waypoints:
        gpx.waypoints.append(gpxpy.gpx.GPXWaypoint(
            latitude=wpt.latitude,
            longitude=wpt.longitude,
            name=wpt.name,
            description=wpt.description or None,
            type=map_poi_category_to_gpx_type(wpt.category),
        ))

    gpx_track = gpxpy.gpx.GPXTrack(name=name)
    gpx.tracks.append(gpx_track)

    gpx_segment = gpxpy.gpx.GPXTrackSegment()
    gpx_track.segments.append(gpx_segment)

    for pt in track_points:
        gpx_segment.points.append(gpxpy.gpx.GPXTrackPoint(
            latitude=pt.latitude,
            longitude=pt.longitude,
            elevation=pt.elevation,
        ))

    logger.debug(f"Built GPX export '{name}': {len(track_points)} points, {len(waypoints)} waypoints")
    return gpx.to_xml(version='1.1')
