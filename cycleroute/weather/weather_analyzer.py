"""
Weather analysis module for CycleRoute Planner.
Enriches sampled route points with hourly Open-Meteo forecasts and
summarizes conditions along the ride.
"""

import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
import requests

from ..config.config import WeatherConfig
from ..config.logging_config import get_logger, log_function_entry, log_performance, log_error
from ..errors import WeatherFetchError
from .models import SamplePoint, WeatherPoint
from .wind import WindType, classify_wind

logger = get_logger(__name__)


def _parse_forecast_time(time_str: str, utc_offset_seconds: Optional[int],
                         target: datetime) -> datetime:
    """Interpret an hourly forecast timestamp so it compares with ``target``."""
    parsed = datetime.fromisoformat(time_str.replace('Z', '+00:00'))

    if parsed.tzinfo is None and target.tzinfo is not None:
        if utc_offset_seconds is not None:
            parsed = parsed.replace(tzinfo=timezone(timedelta(seconds=utc_offset_seconds)))
        else:
            parsed = parsed.replace(tzinfo=target.tzinfo)
    elif parsed.tzinfo is not None and target.tzinfo is None:
        parsed = parsed.replace(tzinfo=None)

    return parsed


def find_closest_hour_index(times: Sequence[str], target_time: datetime,
                            utc_offset_seconds: Optional[int] = None) -> Optional[int]:
    """
    Index of the forecast hour closest to ``target_time``.

    Args:
        times: ISO timestamps of the hourly series
        target_time: Estimated arrival time
        utc_offset_seconds: Offset of naive forecast timestamps from UTC

    Returns:
        Index with the minimum absolute time difference (earliest on ties),
        or None for an empty series
    """
    closest_idx = None
    closest_diff = None

    for i, time_str in enumerate(times):
        diff = abs((_parse_forecast_time(time_str, utc_offset_seconds, target_time) - target_time).total_seconds())
        if closest_diff is None or diff < closest_diff:
            closest_diff = diff
            closest_idx = i

    return closest_idx


class WeatherAnalyzer:
    """Fetches hourly forecasts per sample point and attaches them to the route."""

    def __init__(self, config: WeatherConfig = None, session: requests.Session = None):
        """Initialize the weather analyzer.

        Args:
            config: Weather service settings
            session: Optional HTTP session for forecast requests. It is shared
                by the enrichment worker threads, so it must tolerate concurrent
                use. Without one, each request goes through ``requests.get``.
        """
        self.config = config or WeatherConfig()
        self.session = session

    def _request_params(self, lat: float, lon: float) -> Dict[str, str]:
        return {
            'latitude': f"{lat:.4f}",
            'longitude': f"{lon:.4f}",
            'hourly': ','.join(self.config.hourly_fields),
            'timezone': 'auto',
        }

    def fetch_forecast(self, lat: float, lon: float) -> Dict:
        """
        Get the hourly forecast for a location.

        Non-success responses and network errors are retried with linear
        backoff (``retry_backoff_seconds`` times the attempt number).

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            Decoded Open-Meteo response

        Raises:
            WeatherFetchError: When every attempt failed or the payload is not JSON
        """
        params = self._request_params(lat, lon)
        max_retries = self.config.max_retries
        last_error = None

        http = self.session or requests

        for attempt in range(max_retries + 1):
            try:
                response = http.get(
                    self.config.base_url,
                    params=params,
                    timeout=self.config.timeout_seconds,
                )
            except requests.exceptions.RequestException as e:
                last_error = f"{type(e).__name__}: {e}"
            else:
                if response.ok:
                    try:
                        return response.json()
                    except ValueError as e:
                        raise WeatherFetchError(
                            f"Open-Meteo returned invalid JSON for {params['latitude']},{params['longitude']}"
                        ) from e
                last_error = f"HTTP {response.status_code}"

            if attempt < max_retries:
                delay = self.config.retry_backoff_seconds * (attempt + 1)
                logger.warning(f"Weather request failed ({last_error}), retrying in {delay:.0f}s "
                               f"[attempt {attempt + 1}/{max_retries + 1}]")
                time.sleep(delay)

        raise WeatherFetchError(
            f"Open-Meteo request failed for {params['latitude']},{params['longitude']} "
            f"after {max_retries + 1} attempts: {last_error}"
        )

    def _build_weather_point(self, point: SamplePoint, forecast: Dict) -> WeatherPoint:
        hourly = forecast.get('hourly') or {}
        missing = [f for f in ['time'] + list(self.config.hourly_fields) if f not in hourly]
        if missing:
            raise WeatherFetchError(f"Incomplete forecast data, missing: {', '.join(missing)}")

        idx = find_closest_hour_index(hourly['time'], point.estimated_arrival_time,
                                      forecast.get('utc_offset_seconds'))
        if idx is None:
            raise WeatherFetchError("Forecast contains no hourly data")

        wind_direction = hourly['wind_direction_10m'][idx]
        weather_code = hourly['weather_code'][idx]

        return WeatherPoint(
            latitude=point.latitude,
            longitude=point.longitude,
            elevation=point.elevation,
            distance_from_start_m=point.distance_from_start_m,
            estimated_arrival_time=point.estimated_arrival_time,
            travel_direction_deg=point.travel_direction_deg,
            temp_c=hourly['temperature_2m'][idx],
            feels_like_c=hourly['apparent_temperature'][idx],
            precip_probability=hourly['precipitation_probability'][idx],
            precip_mm=hourly['precipitation'][idx],
            wind_speed_kmh=hourly['wind_speed_10m'][idx],
            wind_gusts_kmh=hourly['wind_gusts_10m'][idx],
            wind_direction_deg=wind_direction,
            cloud_cover_percent=hourly['cloud_cover'][idx],
            weather_code=int(weather_code) if weather_code is not None else None,
            wind_classification=(classify_wind(point.travel_direction_deg, wind_direction)
                                 if wind_direction is not None else None),
        )

    def enrich_point(self, point: SamplePoint) -> WeatherPoint:
        """Fetch and attach the forecast hour nearest to one point's arrival."""
        forecast = self.fetch_forecast(point.latitude, point.longitude)
        return self._build_weather_point(point, forecast)

    def enrich_sample_points(self, sample_points: Sequence[SamplePoint]) -> List[WeatherPoint]:
        """
        Attach forecasts to every sample point.

        Requests go out in batches of ``config.concurrency``; a batch finishes
        before the next starts. Any failed point aborts the whole enrichment.

        Args:
            sample_points: Points produced by the route sampler

        Returns:
            Weather points in the same order as the input

        Raises:
            WeatherFetchError: If any forecast could not be retrieved
        """
        log_function_entry(logger, "enrich_sample_points", points=len(sample_points))
        start_time = time.time()
        batch_size = max(1, self.config.concurrency)
        results: List[WeatherPoint] = []

        try:
            with ThreadPoolExecutor(max_workers=batch_size) as executor:
                for i in range(0, len(sample_points), batch_size):
                    batch = sample_points[i:i + batch_size]
                    results.extend(executor.map(self.enrich_point, batch))
        except WeatherFetchError as e:
            log_error(logger, e, "Weather enrichment aborted")
            raise

        log_performance(logger, "enrich_sample_points", time.time() - start_time,
                        f"points={len(results)}")
        return results

    def summarize(self, weather_points: Sequence[WeatherPoint]) -> Dict:
        """
        Summarize conditions along the route.

        Args:
            weather_points: Enriched points

        Returns:
            Summary statistics and recommendations
        """
        if not weather_points:
            return {'analysis_available': False, 'reason': 'No weather data points'}

        def values(attr: str) -> np.ndarray:
            raw = [getattr(wp, attr) for wp in weather_points]
            return np.array([v for v in raw if v is not None], dtype=float)

        temps = values('temp_c')
        feels_like = values('feels_like_c')
        precip_prob = values('precip_probability')
        precip_mm = values('precip_mm')
        gusts = values('wind_gusts_kmh')

        wind_counts = Counter(
            wp.wind_classification.type.value
            for wp in weather_points if wp.wind_classification is not None
        )
        dominant_wind = wind_counts.most_common(1)[0][0] if wind_counts else None

        summary = {
            'analysis_available': True,
            'total_points_analyzed': len(weather_points),
            'min_temperature_c': round(float(np.min(temps)), 1) if temps.size else None,
            'max_temperature_c': round(float(np.max(temps)), 1) if temps.size else None,
            'avg_temperature_c': round(float(np.mean(temps)), 1) if temps.size else None,
            'max_feels_like_c': round(float(np.max(feels_like)), 1) if feels_like.size else None,
            'max_precipitation_probability': float(np.max(precip_prob)) if precip_prob.size else None,
            'expected_total_precipitation_mm': round(float(np.sum(precip_mm)), 1) if precip_mm.size else None,
            'max_wind_gust_kmh': round(float(np.max(gusts)), 1) if gusts.size else None,
            'wind_type_counts': {wind_type.value: wind_counts.get(wind_type.value, 0) for wind_type in WindType},
            'dominant_wind_type': dominant_wind,
        }
        summary['recommendations'] = self._generate_recommendations(summary)
        return summary

    def _generate_recommendations(self, summary: Dict) -> List[str]:
        """Generate practical weather recommendations."""
        recommendations = []
        total = summary['total_points_analyzed']
        counts = summary['wind_type_counts']

        if counts[WindType.HEADWIND.value] > total / 2:
            recommendations.append("💨 Headwinds for most of the ride - allow extra time and energy")
        elif counts[WindType.TAILWIND.value] > total / 2:
            recommendations.append("🚀 Tailwinds for most of the ride - expect a faster day")

        max_gust = summary['max_wind_gust_kmh']
        if max_gust is not None and max_gust > 50:
            recommendations.append(f"🌪️ Gusts up to {max_gust} km/h - take care on exposed sections")

        max_rain = summary['max_precipitation_probability']
        if max_rain is not None and max_rain > 70:
            recommendations.append("🌧️ High chance of rain - bring waterproof gear")
        elif max_rain is not None and max_rain > 40:
            recommendations.append("☔ Moderate chance of rain - pack a rain jacket")

        max_temp = summary['max_temperature_c']
        min_temp = summary['min_temperature_c']
        if max_temp is not None and max_temp > 30:
            recommendations.append("🌡️ High temperatures - carry extra water and electrolytes")
        if min_temp is not None and min_temp < 5:
            recommendations.append("🧤 Cold conditions - dress in layers")

        if not recommendations:
            recommendations.append("✅ Good weather conditions expected for cycling")

        return recommendations

    @staticmethod
    def to_dataframe(weather_points: Sequence[WeatherPoint]) -> pd.DataFrame:
        """One row per weather point, wind classification flattened into columns."""
        rows = []
        for wp in weather_points:
            row = wp.to_dict()
            classification = row.pop('wind_classification') or {}
            row['wind_type'] = classification.get('type')
            row['wind_relative_angle'] = classification.get('relative_angle')
            row['distance_km'] = round(wp.distance_from_start_m / 1000, 2)
            rows.append(row)
        return pd.DataFrame(rows)
