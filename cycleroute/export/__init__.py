"""
Route export to GPX and FIT course files.
"""

from .gpx_export import build_export_gpx, map_poi_category_to_gpx_type, GARMIN_TYPE_MAP
from .fit_export import build_export_fit, to_semicircles
from .fit_encoder import FitEncoder
from .download import (
    ExportFile,
    sanitize_filename,
    export_filename,
    export_gpx_file,
    export_fit_file,
    GPX_CONTENT_TYPE,
    FIT_CONTENT_TYPE,
)

__all__ = [
    'build_export_gpx', 'map_poi_category_to_gpx_type', 'GARMIN_TYPE_MAP',
    'build_export_fit', 'to_semicircles', 'FitEncoder',
    'ExportFile', 'sanitize_filename', 'export_filename', 'export_gpx_file', 'export_fit_file',
    'GPX_CONTENT_TYPE', 'FIT_CONTENT_TYPE',
]
