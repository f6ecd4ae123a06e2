#!/usr/bin/env python3
"""
Tests for distance-interval route sampling.
"""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from cycleroute.errors import RouteTooShortError
from cycleroute.processing.geo import haversine_distance
from cycleroute.processing.models import TrackPoint
from cycleroute.weather.route_sampler import sample_route_points, require_samples

START = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)
# Degrees of longitude per meter on the equator
DEG_PER_M = 0.1 / haversine_distance(0, 0, 0, 0.1)


def equator_track(total_km, step_km=1.0):
    steps = int(round(total_km / step_km))
    return [
        TrackPoint(0.0, i * step_km * 1000 * DEG_PER_M, 100.0 + i)
        for i in range(steps + 1)
    ]


def test_25km_track_produces_regular_and_final_samples():
    """Samples at 0, 10 and 20 km plus one at the track end."""
    samples = sample_route_points(equator_track(25), START, 20)

    assert 3 <= len(samples) <= 4
    assert samples[0].distance_from_start_m == 0
    assert samples[1].distance_from_start_m == pytest.approx(10000)
    assert samples[2].distance_from_start_m == pytest.approx(20000)
    assert samples[-1].distance_from_start_m == pytest.approx(25000, abs=1)

    distances = [s.distance_from_start_m for s in samples]
    assert distances == sorted(distances)
    print(f"✅ Sampled {len(samples)} points: {[round(d) for d in distances]}")


def test_first_sample_is_track_start():
    track = equator_track(25)
    first = sample_route_points(track, START, 20)[0]

    assert first.latitude == track[0].latitude
    assert first.longitude == track[0].longitude
    assert first.elevation == track[0].elevation
    assert first.estimated_arrival_time == START
    assert first.travel_direction_deg == pytest.approx(90.0)


def test_arrival_times_follow_average_speed():
    # 36 km/h is exactly 10 m/s
    samples = sample_route_points(equator_track(25), START, 36)

    assert samples[1].estimated_arrival_time == START + timedelta(seconds=1000)
    assert samples[2].estimated_arrival_time == START + timedelta(seconds=2000)
    arrivals = [s.estimated_arrival_time for s in samples]
    assert arrivals == sorted(arrivals)


def test_long_segment_crosses_several_boundaries():
    """A single 25 km segment yields interpolated samples at 10 and 20 km."""
    end_lon = 25000 * DEG_PER_M
    track = [TrackPoint(0.0, 0.0, 0.0), TrackPoint(0.0, end_lon, 250.0)]

    samples = sample_route_points(track, START, 25)

    assert len(samples) == 4
    assert samples[1].longitude == pytest.approx(end_lon * 0.4)
    assert samples[1].elevation == pytest.approx(100.0)
    assert samples[2].longitude == pytest.approx(end_lon * 0.8)
    assert samples[2].elevation == pytest.approx(200.0)
    assert samples[3].longitude == end_lon
    assert samples[3].elevation == 250.0


def test_no_final_sample_when_end_is_close():
    """The track end is not sampled when within 10% of an interval of the last sample."""
    samples = sample_route_points(equator_track(20.5, step_km=0.5), START, 20)
    assert [round(s.distance_from_start_m) for s in samples] == [0, 10000, 20000]


def test_missing_elevation_propagates():
    track = [TrackPoint(0.0, lon * 1000 * DEG_PER_M) for lon in range(0, 16)]
    samples = sample_route_points(track, START, 20)
    assert all(s.elevation is None for s in samples)


def test_fewer_than_two_points_yields_nothing():
    assert sample_route_points([], START, 20) == []
    assert sample_route_points([TrackPoint(1.0, 1.0)], START, 20) == []


def test_invalid_speed_or_interval_rejected():
    track = equator_track(5)
    with pytest.raises(ValueError):
        sample_route_points(track, START, 0)
    with pytest.raises(ValueError):
        sample_route_points(track, START, 20, interval_m=0)


def test_short_route_is_rejected():
    """A 5 km route never reaches the first 10 km boundary."""
    track = equator_track(5)
    samples = sample_route_points(track, START, 20)
    total = haversine_distance(0, 0, 0, track[-1].longitude)

    with pytest.raises(RouteTooShortError, match="Route too short to sample") as excinfo:
        require_samples(samples, total)
    assert excinfo.value.interval_m == 10000


def test_require_samples_rejects_empty_sampling():
    with pytest.raises(RouteTooShortError):
        require_samples([], 50000)


def main():
    """Run sampler tests."""
    print("=== Route Sampler Tests ===")
    test_25km_track_produces_regular_and_final_samples()
    test_arrival_times_follow_average_speed()
    test_long_segment_crosses_several_boundaries()
    print("\n🎉 Route sampler tests passed")


if __name__ == "__main__":
    main()
