"""
Download packaging for exported route files.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..config.config import ExportConfig
from ..processing.models import CoursePoint, PointOfInterest, TrackPoint
from .fit_export import build_export_fit
from .gpx_export import build_export_gpx

GPX_CONTENT_TYPE = 'application/gpx+xml'
FIT_CONTENT_TYPE = 'application/octet-stream'

_UNSAFE_FILENAME_CHARS = re.compile(r'[^a-zA-Z0-9_-]')


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content_type: str
    data: bytes


def sanitize_filename(name: str) -> str:
    """Replace every character other than letters, digits, ``_`` and ``-`` with ``_``."""
    return _UNSAFE_FILENAME_CHARS.sub('_', name)


def export_filename(name: str, extension: str, today: Optional[date] = None) -> str:
    """``{sanitized-name}-{YYYY-MM-DD}.{extension}``"""
    today = today or date.today()
    return f"{sanitize_filename(name)}-{today.isoformat()}.{extension}"


def export_gpx_file(name: str, track_points: Sequence[TrackPoint],
                    waypoints: Sequence[PointOfInterest] = (),
                    description: Optional[str] = None,
                    today: Optional[date] = None,
                    config: ExportConfig = None) -> ExportFile:
    xml = build_export_gpx(name, track_points, waypoints, description=description, config=config)
    return ExportFile(
        filename=export_filename(name, 'gpx', today),
        content_type=GPX_CONTENT_TYPE,
        data=xml.encode('utf-8'),
    )


def export_fit_file(name: str, track_points: Sequence[TrackPoint],
                    course_points: Sequence[CoursePoint],
                    today: Optional[date] = None,
                    config: ExportConfig = None) -> ExportFile:
    return ExportFile(
        filename=export_filename(name, 'fit', today),
        content_type=FIT_CONTENT_TYPE,
        data=build_export_fit(name, track_points, course_points, config=config),
    )
