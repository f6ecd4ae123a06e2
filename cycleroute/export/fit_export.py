"""
FIT course export.

Writes the track and its course points as a FIT course file. Track records
use a synthetic clock of one second per point from a fixed base time, and
course point timestamps are interpolated on that clock by their fraction of
the total distance.
"""

from datetime import timedelta
from typing import Sequence

from ..config.config import ExportConfig
from ..config.logging_config import get_logger
from ..processing.geo import cumulative_distances
from ..processing.models import CoursePoint, TrackPoint
from .fit_encoder import FitEncoder, round_half_up

logger = get_logger(__name__)

SEMICIRCLES_PER_DEGREE = 2 ** 31 / 180


def to_semicircles(degrees: float) -> int:
    """Encode an angle in degrees as FIT semicircles."""
    return round_half_up(degrees * SEMICIRCLES_PER_DEGREE)


def build_export_fit(name: str, track_points: Sequence[TrackPoint],
                     course_points: Sequence[CoursePoint],
                     config: ExportConfig = None) -> bytes:
    """
    Build a FIT course file.

    Args:
        name: Course name, truncated to the format limit
        track_points: Track geometry (at least one point)
        course_points: Merged course points, ideally sorted by distance
        config: Export settings (base time, serial number, name limit)

    Returns:
        The encoded FIT file
    """
    if not track_points:
        raise ValueError("Cannot export a course without track points")

    config = config or ExportConfig()
    max_name = config.max_name_length
    base_time = config.fit_base_time

    cumulative = cumulative_distances(track_points)
    total_distance = cumulative[-1]
    total_time_seconds = len(track_points) - 1

    start_time = base_time
    end_time = base_time + timedelta(seconds=total_time_seconds)
    first = track_points[0]
    last = track_points[-1]

    encoder = FitEncoder()

    encoder.write_message('file_id', {
        'type': 'course',
        'manufacturer': 'development',
        'product': 0,
        'serial_number': config.fit_serial_number,
        'time_created': start_time,
    })

    encoder.write_message('course', {
        'name': name[:max_name],
        'sport': 'cycling',
    })

    encoder.write_message('lap', {
        'timestamp': start_time,
        'start_time': start_time,
        'start_position_lat': to_semicircles(first.latitude),
        'start_position_long': to_semicircles(first.longitude),
        'end_position_lat': to_semicircles(last.latitude),
        'end_position_long': to_semicircles(last.longitude),
        'total_distance': total_distance,
        'total_timer_time': total_time_seconds,
        'total_elapsed_time': total_time_seconds,
    })

    encoder.write_message('event', {
        'timestamp': start_time,
        'event': 'timer',
        'event_type': 'start',
        'event_group': 0,
    })

    for i, (point, distance) in enumerate(zip(track_points, cumulative)):
        encoder.write_message('record', {
            'timestamp': base_time + timedelta(seconds=i),
            'position_lat': to_semicircles(point.latitude),
            'position_long': to_semicircles(point.longitude),
            'distance': distance,
            'altitude': point.elevation,
        })

    for i, cp in enumerate(course_points):
        time_fraction = min(cp.distance_m / total_distance, 1) if total_distance > 0 else 0
        encoder.write_message('course_point', {
            'message_index': i,
            'timestamp': base_time + timedelta(seconds=time_fraction * total_time_seconds),
            'position_lat': to_semicircles(cp.latitude),
            'position_long': to_semicircles(cp.longitude),
            'distance': cp.distance_m,
            'type': cp.type,
            'name': cp.name[:max_name],
        })

    encoder.write_message('event', {
        'timestamp': end_time,
        'event': 'timer',
        'event_type': 'stop_all',
        'event_group': 0,
    })

    data = encoder.close()
    logger.info(f"Built FIT course '{name[:max_name]}': {len(track_points)} records, "
                f"{len(course_points)} course points, {len(data)} bytes")
    return data
