"""
Sampled route and forecast data models.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional

from .wind import WindClassification


@dataclass(frozen=True)
class SamplePoint:
    """A point placed at a fixed distance along the route with its expected arrival."""
    latitude: float
    longitude: float
    elevation: Optional[float]
    distance_from_start_m: float
    estimated_arrival_time: datetime
    travel_direction_deg: float


@dataclass(frozen=True)
class WeatherPoint(SamplePoint):
    """A sample point with the forecast hour nearest its arrival time."""
    temp_c: Optional[float] = None
    feels_like_c: Optional[float] = None
    precip_probability: Optional[float] = None
    precip_mm: Optional[float] = None
    wind_speed_kmh: Optional[float] = None
    wind_gusts_kmh: Optional[float] = None
    wind_direction_deg: Optional[float] = None
    cloud_cover_percent: Optional[float] = None
    weather_code: Optional[int] = None
    wind_classification: Optional[WindClassification] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data['estimated_arrival_time'] = self.estimated_arrival_time.isoformat()
        data['wind_classification'] = self.wind_classification.to_dict() if self.wind_classification else None
        return data
