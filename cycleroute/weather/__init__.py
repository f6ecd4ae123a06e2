"""
Weather along the route.

This package provides:
- Fixed-interval route sampling with arrival times and travel bearings
- Hourly forecast enrichment from Open-Meteo
- Headwind/tailwind/crosswind classification relative to travel direction
"""

from .models import SamplePoint, WeatherPoint
from .wind import WindType, WindClassification, classify_wind, normalize_angle
from .route_sampler import sample_route_points, require_samples, SAMPLE_INTERVAL_M
from .weather_analyzer import WeatherAnalyzer, find_closest_hour_index

__all__ = [
    'SamplePoint', 'WeatherPoint',
    'WindType', 'WindClassification', 'classify_wind', 'normalize_angle',
    'sample_route_points', 'require_samples', 'SAMPLE_INTERVAL_M',
    'WeatherAnalyzer', 'find_closest_hour_index',
]
