"""
Route planning service.

Wires parsing, sampling, weather enrichment, course-point merging and export
together behind one explicitly constructed object. Callers build a
RoutePlanner with the settings and HTTP session they want; nothing here
relies on process-wide state.
"""

from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

import requests

from .config.config import AppConfig, ExportConfig, RouteConfig, WeatherConfig
from .config.logging_config import get_logger, log_execution_time
from .errors import RouteTooShortError
from .export.download import ExportFile, export_fit_file, export_gpx_file
from .processing.course_points import merge_course_points
from .processing.models import CoursePoint, CuePoint, ParsedTrack, PointOfInterest
from .processing.projection import distance_along_track
from .processing.route_processor import RouteProcessor
from .validation import validate_forecast_request, validate_poi
from .weather.models import WeatherPoint
from .weather.route_sampler import require_samples, sample_route_points
from .weather.weather_analyzer import WeatherAnalyzer

logger = get_logger(__name__)


class RoutePlanner:
    """Per-operation service context for the route planning pipeline."""

    def __init__(self, app_config: AppConfig = None, route_config: RouteConfig = None,
                 weather_config: WeatherConfig = None, export_config: ExportConfig = None,
                 session: requests.Session = None):
        self.app_config = app_config or AppConfig()
        self.route_config = route_config or RouteConfig()
        self.weather_config = weather_config or WeatherConfig()
        self.export_config = export_config or ExportConfig()
        self.processor = RouteProcessor(self.app_config)
        self.weather = WeatherAnalyzer(self.weather_config, session=session)

    @classmethod
    def from_config(cls, config_manager, session: requests.Session = None) -> "RoutePlanner":
        """Build a planner from a ConfigManager's sections."""
        return cls(
            app_config=config_manager.app,
            route_config=config_manager.route,
            weather_config=config_manager.weather,
            export_config=config_manager.export,
            session=session,
        )

    def analyze(self, file_content: bytes, filename: str) -> Dict:
        """
        Parse an uploaded GPX file and summarize it.

        Returns:
            Dictionary with the parsed ``track`` and its display ``stats``
        """
        track = self.processor.parse_route_file(file_content, filename)
        return {
            'track': track,
            'stats': self.processor.calculate_route_statistics(track),
        }

    @log_execution_time()
    def forecast(self, track: ParsedTrack, start_time: datetime,
                 avg_speed_kmh: float) -> List[WeatherPoint]:
        """
        Forecast weather along the route for a planned ride.

        Raises:
            ValidationError: For a naive start time or out-of-range speed
            RouteTooShortError: If the route is shorter than one sample interval
            WeatherFetchError: If any forecast request failed
        """
        validate_forecast_request(start_time, avg_speed_kmh, self.route_config)

        interval = self.route_config.sample_interval_m
        samples = sample_route_points(track.points, start_time, avg_speed_kmh, interval)
        try:
            require_samples(samples, track.total_distance_m, interval)
        except RouteTooShortError as e:
            logger.warning(str(e))
            raise

        logger.info(f"Fetching weather for {len(samples)} sample points on '{track.name}'")
        return self.weather.enrich_sample_points(samples)

    def poi_distances(self, track: ParsedTrack,
                      pois: Sequence[PointOfInterest]) -> List[float]:
        """Along-track distance of each POI using segment projection."""
        return [distance_along_track(poi.latitude, poi.longitude, track.points) for poi in pois]

    def course_points(self, track: ParsedTrack, cues: Sequence[CuePoint],
                      pois: Sequence[PointOfInterest]) -> List[CoursePoint]:
        """Merge cues and POIs into distance-ordered course points."""
        for poi in pois:
            validate_poi(poi)
        return merge_course_points(cues, pois, track.points)

    def export_gpx(self, track: ParsedTrack, name: str,
                   pois: Sequence[PointOfInterest] = (),
                   description: Optional[str] = None,
                   today: Optional[date] = None) -> ExportFile:
        """Export the route and its POIs as a GPX download."""
        return export_gpx_file(name, track.points, pois, description=description,
                               today=today, config=self.export_config)

    @log_execution_time()
    def export_fit(self, track: ParsedTrack, name: str,
                   cues: Sequence[CuePoint] = (),
                   pois: Sequence[PointOfInterest] = (),
                   today: Optional[date] = None) -> ExportFile:
        """Export the route with merged course points as a FIT course download."""
        course_points = self.course_points(track, cues, pois)
        return export_fit_file(name, track.points, course_points,
                               today=today, config=self.export_config)
