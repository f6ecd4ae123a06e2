"""
Route processing module for CycleRoute Planner.
Handles GPX parsing into a normalized track and derives summary metrics
(distance, elevation gain, bounding box).
"""

import time
from typing import Dict, List, Optional, Sequence, Union

import gpxpy
import gpxpy.gpx

from ..config.config import AppConfig
from ..config.logging_config import get_logger, log_function_entry, log_function_exit, log_performance, log_error
from ..errors import TrackParseError
from .geo import haversine_distance
from .models import Bounds, ParsedTrack, TrackPoint

logger = get_logger(__name__)

DEFAULT_ROUTE_NAME = "Unnamed Route"


def _first_track_geometry(gpx: gpxpy.gpx.GPX):
    """Return (name, gpxpy points) of the first track or route carrying points."""
    for track in gpx.tracks:
        # Multi-segment tracks are flattened in document order
        points = [point for segment in track.segments for point in segment.points]
        if points:
            return track.name, points

    for route in gpx.routes:
        if route.points:
            return route.name, list(route.points)

    return None, []


def compute_elevation_gain(points: Sequence[TrackPoint]) -> Optional[float]:
    """
    Sum of positive elevation deltas between consecutive points.

    Returns None when no point carries elevation. Pairs where either side
    lacks elevation contribute nothing.
    """
    if not any(p.elevation is not None for p in points):
        return None

    gain = 0.0
    for prev, curr in zip(points, points[1:]):
        if prev.elevation is not None and curr.elevation is not None and curr.elevation > prev.elevation:
            gain += curr.elevation - prev.elevation
    return gain


def compute_bounds(points: Sequence[TrackPoint]) -> Bounds:
    """Min/max latitude and longitude over all points."""
    lats = [p.latitude for p in points]
    lons = [p.longitude for p in points]
    return Bounds(min_lat=min(lats), max_lat=max(lats), min_lon=min(lons), max_lon=max(lons))


def compute_total_distance(points: Sequence[TrackPoint]) -> float:
    """Sum of great-circle distances between consecutive points, in meters."""
    total = 0.0
    for prev, curr in zip(points, points[1:]):
        total += haversine_distance(prev.latitude, prev.longitude, curr.latitude, curr.longitude)
    return total


def parse_gpx(gpx_content: Union[str, bytes]) -> ParsedTrack:
    """
    Parse GPX content into a ParsedTrack.

    Args:
        gpx_content: GPX document as text or UTF-8 bytes

    Returns:
        ParsedTrack with points and derived metrics

    Raises:
        TrackParseError: If the document is malformed, has no track geometry,
            or the geometry has no points
    """
    if isinstance(gpx_content, bytes):
        try:
            gpx_content = gpx_content.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise TrackParseError("Invalid GPX file: Unable to decode as UTF-8") from e

    try:
        gpx = gpxpy.parse(gpx_content)
    except (gpxpy.gpx.GPXException, ValueError) as e:
        raise TrackParseError(f"Error parsing GPX file: {str(e)}") from e

    geometry_name, raw_points = _first_track_geometry(gpx)

    if not gpx.tracks and not gpx.routes:
        raise TrackParseError("No track found in GPX file")
    if not raw_points:
        raise TrackParseError("No track points found in GPX file")

    points = tuple(
        TrackPoint(latitude=p.latitude, longitude=p.longitude, elevation=p.elevation)
        for p in raw_points
    )

    name = gpx.name or geometry_name or DEFAULT_ROUTE_NAME

    return ParsedTrack(
        name=name,
        points=points,
        total_distance_m=compute_total_distance(points),
        elevation_gain_m=compute_elevation_gain(points),
        bounds=compute_bounds(points),
    )


class RouteProcessor:
    """Handles route file parsing and summary statistics."""

    def __init__(self, app_config: AppConfig = None):
        """Initialize the route processor.

        Args:
            app_config: Application settings (upload limits, accepted file types)
        """
        self.app_config = app_config or AppConfig()
        self.logger = get_logger(__name__)
        self.logger.debug(f"RouteProcessor initialized - file types: {self.app_config.supported_file_types}")

    def parse_gpx_file(self, gpx_content: Union[str, bytes]) -> ParsedTrack:
        """Parse GPX file content and extract the normalized track.

        Args:
            gpx_content: String or bytes content of the GPX file

        Returns:
            ParsedTrack for the first track geometry in the document
        """
        start_time = time.time()
        track = parse_gpx(gpx_content)
        log_performance(self.logger, "parse_gpx_file", time.time() - start_time,
                        f"points={len(track.points)}, distance_m={track.total_distance_m:.0f}")
        return track

    def parse_route_file(self, file_content: bytes, filename: str) -> ParsedTrack:
        """Parse an uploaded route file (GPX only).

        Args:
            file_content: File content as bytes
            filename: Original filename to determine file type

        Returns:
            ParsedTrack

        Raises:
            TrackParseError: For unsupported, oversized or malformed files
        """
        log_function_entry(self.logger, "parse_route_file", filename=filename, size_bytes=len(file_content))

        try:
            file_extension = filename.lower().rsplit('.', 1)[-1] if '.' in filename else ''
            if file_extension not in self.app_config.supported_file_types:
                self.logger.warning(f"Unsupported file type attempted: {file_extension} for file {filename}")
                raise TrackParseError(
                    f"Unsupported file type: {file_extension or 'none'}. Only GPX files are supported."
                )

            max_bytes = self.app_config.max_file_size_mb * 1024 * 1024
            if len(file_content) > max_bytes:
                raise TrackParseError(
                    f"File too large: {len(file_content)} bytes exceeds {self.app_config.max_file_size_mb} MB"
                )

            self.logger.info(f"Starting GPX file parsing: {filename}")
            result = self.parse_gpx_file(file_content)

        except TrackParseError as e:
            log_error(self.logger, e, f"Failed to parse route file {filename}")
            raise

        log_function_exit(self.logger, "parse_route_file", result)
        return result

    def calculate_route_statistics(self, track: ParsedTrack) -> Dict:
        """Summarize a parsed track for display.

        Args:
            track: Parsed track

        Returns:
            Dictionary of route statistics in display units
        """
        elevations: List[float] = [p.elevation for p in track.points if p.elevation is not None]

        loss = None
        if elevations:
            loss = 0.0
            for prev, curr in zip(track.points, track.points[1:]):
                if prev.elevation is not None and curr.elevation is not None and curr.elevation < prev.elevation:
                    loss += prev.elevation - curr.elevation

        return {
            'name': track.name,
            'total_points': len(track.points),
            'total_distance_m': track.total_distance_m,
            'total_distance_km': round(track.total_distance_m / 1000, 2),
            'total_elevation_gain_m': round(track.elevation_gain_m, 1) if track.elevation_gain_m is not None else None,
            'total_elevation_loss_m': round(loss, 1) if loss is not None else None,
            'max_elevation_m': max(elevations) if elevations else None,
            'min_elevation_m': min(elevations) if elevations else None,
            'bounds': track.bounds.to_dict(),
        }
