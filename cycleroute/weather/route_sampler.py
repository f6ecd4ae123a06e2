"""
Route sampling for weather lookups.

Walks a track at a fixed along-track interval and produces timestamped,
bearing-tagged sample points for a ride starting at a given time and
average speed.
"""

from datetime import datetime, timedelta
from typing import List, Sequence

from ..config.logging_config import get_logger
from ..errors import RouteTooShortError
from ..processing.geo import haversine_distance, calculate_bearing
from ..processing.models import TrackPoint
from .models import SamplePoint

logger = get_logger(__name__)

SAMPLE_INTERVAL_M = 10000.0
# A final sample is only added when the track end is further than this
# fraction of the interval past the last regular sample
END_SAMPLE_THRESHOLD = 0.1


def _arrival_time(start_time: datetime, distance_m: float, speed_ms: float) -> datetime:
    return start_time + timedelta(seconds=distance_m / speed_ms)


def sample_route_points(track_points: Sequence[TrackPoint], start_time: datetime,
                        avg_speed_kmh: float,
                        interval_m: float = SAMPLE_INTERVAL_M) -> List[SamplePoint]:
    """
    Sample a track every ``interval_m`` meters.

    Args:
        track_points: Track geometry in traversal order
        start_time: Planned departure time
        avg_speed_kmh: Average riding speed
        interval_m: Along-track distance between samples

    Returns:
        Sample points with non-decreasing distance, starting at distance 0.
        Tracks with fewer than two points return an empty list.
    """
    if avg_speed_kmh <= 0:
        raise ValueError(f"Average speed must be positive, got {avg_speed_kmh}")
    if interval_m <= 0:
        raise ValueError(f"Sample interval must be positive, got {interval_m}")
    if len(track_points) < 2:
        return []

    speed_ms = avg_speed_kmh * 1000 / 3600
    first, second = track_points[0], track_points[1]

    samples = [SamplePoint(
        latitude=first.latitude,
        longitude=first.longitude,
        elevation=first.elevation,
        distance_from_start_m=0.0,
        estimated_arrival_time=start_time,
        travel_direction_deg=calculate_bearing(first.latitude, first.longitude,
                                               second.latitude, second.longitude),
    )]

    last_index = len(track_points) - 1
    cumulative_distance = 0.0
    next_sample_distance = interval_m

    for i in range(1, len(track_points)):
        prev = track_points[i - 1]
        curr = track_points[i]
        segment_dist = haversine_distance(prev.latitude, prev.longitude, curr.latitude, curr.longitude)
        cumulative_distance += segment_dist

        # A long segment can cross several interval boundaries
        while cumulative_distance >= next_sample_distance:
            lookahead = track_points[min(i + 1, last_index)]
            travel_dir = calculate_bearing(prev.latitude, prev.longitude,
                                           lookahead.latitude, lookahead.longitude)

            overshoot = cumulative_distance - next_sample_distance
            fraction = 1 - overshoot / segment_dist if segment_dist > 0 else 1.0

            if prev.elevation is not None and curr.elevation is not None:
                elevation = prev.elevation + (curr.elevation - prev.elevation) * fraction
            else:
                elevation = curr.elevation

            samples.append(SamplePoint(
                latitude=prev.latitude + (curr.latitude - prev.latitude) * fraction,
                longitude=prev.longitude + (curr.longitude - prev.longitude) * fraction,
                elevation=elevation,
                distance_from_start_m=next_sample_distance,
                estimated_arrival_time=_arrival_time(start_time, next_sample_distance, speed_ms),
                travel_direction_deg=travel_dir,
            ))

            next_sample_distance += interval_m

    total_distance = cumulative_distance
    last_sample_distance = samples[-1].distance_from_start_m

    if total_distance - last_sample_distance > interval_m * END_SAMPLE_THRESHOLD:
        before_last = track_points[-2]
        last = track_points[-1]
        samples.append(SamplePoint(
            latitude=last.latitude,
            longitude=last.longitude,
            elevation=last.elevation,
            distance_from_start_m=total_distance,
            estimated_arrival_time=_arrival_time(start_time, total_distance, speed_ms),
            travel_direction_deg=calculate_bearing(before_last.latitude, before_last.longitude,
                                                   last.latitude, last.longitude),
        ))

    logger.debug(f"Sampled {len(samples)} points over {total_distance:.0f} m at {interval_m:.0f} m intervals")
    return samples


def require_samples(samples: Sequence[SamplePoint], total_distance_m: float,
                    interval_m: float = SAMPLE_INTERVAL_M) -> Sequence[SamplePoint]:
    """
    Reject samplings of routes shorter than one interval.

    Raises:
        RouteTooShortError: If there are no samples or the route does not
            reach the first interval boundary
    """
    if not samples or total_distance_m < interval_m:
        raise RouteTooShortError(total_distance_m, interval_m)
    return samples
