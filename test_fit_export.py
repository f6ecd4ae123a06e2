#!/usr/bin/env python3
"""
Tests for the FIT course encoder, decoded back with fitparse.
"""

import io
import os
import struct
import sys
from datetime import date, datetime

import pytest
from fitparse import FitFile

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from cycleroute.export.download import export_fit_file, FIT_CONTENT_TYPE
from cycleroute.export.fit_encoder import crc16, round_half_up, to_fit_timestamp
from cycleroute.export.fit_export import build_export_fit, to_semicircles
from cycleroute.processing.course_points import merge_course_points
from cycleroute.processing.geo import cumulative_distances
from cycleroute.processing.models import CoursePoint, CuePoint, PointOfInterest, TrackPoint

TRACK = [
    TrackPoint(0.0, 0.0, 0.0),
    TrackPoint(0.0, 0.1, 10.0),
    TrackPoint(0.0, 0.2, 5.0),
]
BASE_TIME = datetime(2024, 1, 1, 0, 0, 0)


def decode(data):
    fit = FitFile(io.BytesIO(data))
    return list(fit.get_messages())


def naive(value):
    return value.replace(tzinfo=None) if value.tzinfo else value


def sample_course_points():
    cues = [CuePoint("Turn right", 0.0, 0.15, distance_m=16679.0)]
    pois = [PointOfInterest("Water stop", 0.0, 0.1, 'WATER')]
    return merge_course_points(cues, pois, TRACK)


def test_semicircle_encoding():
    assert to_semicircles(0) == 0
    assert to_semicircles(90) == 1073741824
    assert to_semicircles(-180) == -2147483648
    assert to_semicircles(-90) == -1073741824
    print("✅ Semicircle conversion")


def test_rounding_is_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(1.4999) == 1


def test_fit_timestamp_epoch():
    assert to_fit_timestamp(datetime(1989, 12, 31)) == 0
    assert to_fit_timestamp(BASE_TIME) == 1073001600


def test_header_and_crc():
    data = build_export_fit("Equator", TRACK, sample_course_points())

    header_size, protocol, profile, data_size, signature = struct.unpack('<BBHI4s', data[:12])
    assert header_size == 14
    assert protocol == 0x20
    assert profile == 2140
    assert signature == b'.FIT'
    assert len(data) == 14 + data_size + 2

    header_crc = struct.unpack('<H', data[12:14])[0]
    assert header_crc == crc16(data[:12])
    file_crc = struct.unpack('<H', data[-2:])[0]
    assert file_crc == crc16(data[:-2])


def test_message_order():
    messages = decode(build_export_fit("Equator", TRACK, sample_course_points()))
    names = [m.name for m in messages]

    assert names == [
        'file_id', 'course', 'lap', 'event',
        'record', 'record', 'record',
        'course_point', 'course_point',
        'event',
    ]
    print(f"✅ Decoded {len(names)} FIT messages")


def test_file_id_and_course_fields():
    messages = decode(build_export_fit("Equator", TRACK, []))
    file_id = messages[0]
    course = messages[1]

    assert file_id.get_value('type') == 'course'
    assert file_id.get_value('manufacturer') == 'development'
    assert file_id.get_value('serial_number') == 12345
    assert naive(file_id.get_value('time_created')) == BASE_TIME
    assert course.get_value('name') == "Equator"
    assert course.get_value('sport') == 'cycling'


def test_records_carry_position_distance_and_altitude():
    messages = decode(build_export_fit("Equator", TRACK, []))
    records = [m for m in messages if m.name == 'record']
    cumulative = cumulative_distances(TRACK)

    assert len(records) == 3
    for i, (record, point) in enumerate(zip(records, TRACK)):
        assert naive(record.get_value('timestamp')) == datetime(2024, 1, 1, 0, 0, i)
        assert record.get_value('position_lat') == to_semicircles(point.latitude)
        assert record.get_value('position_long') == to_semicircles(point.longitude)
        assert record.get_value('distance') == pytest.approx(cumulative[i], abs=0.01)
        assert record.get_value('altitude') == pytest.approx(point.elevation, abs=0.2)


def test_lap_and_events():
    messages = decode(build_export_fit("Equator", TRACK, []))
    lap = messages[2]
    start_event = messages[3]
    stop_event = messages[-1]

    assert lap.get_value('total_distance') == pytest.approx(cumulative_distances(TRACK)[-1], abs=0.01)
    assert lap.get_value('total_elapsed_time') == pytest.approx(2.0)
    assert lap.get_value('start_position_long') == 0
    assert lap.get_value('end_position_long') == to_semicircles(0.2)
    assert start_event.get_value('event') == 'timer'
    assert start_event.get_value('event_type') == 'start'
    assert stop_event.get_value('event_type') == 'stop_all'
    assert naive(stop_event.get_value('timestamp')) == datetime(2024, 1, 1, 0, 0, 2)


def test_course_points_in_distance_order_with_monotonic_time():
    messages = decode(build_export_fit("Equator", TRACK, sample_course_points()))
    course_points = [m for m in messages if m.name == 'course_point']

    assert [cp.get_value('name') for cp in course_points] == ["Water stop", "Turn right"]
    assert [cp.get_value('type') for cp in course_points] == ['water', 'right']

    timestamps = [naive(cp.get_value('timestamp')) for cp in course_points]
    assert timestamps == sorted(timestamps)
    # Water stop sits at the middle vertex, half way through the 2 s clock
    assert timestamps[0] == datetime(2024, 1, 1, 0, 0, 1)

    distances = [cp.get_value('distance') for cp in course_points]
    assert distances == sorted(distances)


def test_course_point_time_clamped_past_end():
    beyond = [CoursePoint("Finish", 0.0, 0.2, 999999.0, 'generic')]
    messages = decode(build_export_fit("Equator", TRACK, beyond))
    course_point = [m for m in messages if m.name == 'course_point'][0]
    assert naive(course_point.get_value('timestamp')) == datetime(2024, 1, 1, 0, 0, 2)


def test_long_names_are_truncated():
    long_name = "Tour of the Western Highlands and Islands"
    messages = decode(build_export_fit(long_name, TRACK, []))
    assert messages[1].get_value('name') == long_name[:32]


def test_points_without_elevation_still_decode():
    flat = [TrackPoint(10.0, 10.0), TrackPoint(10.0, 10.01, 50.0), TrackPoint(10.0, 10.02)]
    messages = decode(build_export_fit("Mixed", flat, []))
    records = [m for m in messages if m.name == 'record']

    assert len(records) == 3
    assert records[0].get_value('altitude') is None
    assert records[1].get_value('altitude') == pytest.approx(50.0, abs=0.2)


def test_single_point_track():
    messages = decode(build_export_fit("Dot", [TrackPoint(1.0, 1.0)], []))
    assert [m.name for m in messages].count('record') == 1


def test_empty_track_rejected():
    with pytest.raises(ValueError):
        build_export_fit("Empty", [], [])


def test_export_file_packaging():
    export = export_fit_file("Equator Run", TRACK, [], today=date(2024, 6, 1))
    assert export.filename == "Equator_Run-2024-06-01.fit"
    assert export.content_type == FIT_CONTENT_TYPE
    assert export.data[8:12] == b'.FIT'


def main():
    """Run FIT export tests."""
    print("=== FIT Export Tests ===")
    test_semicircle_encoding()
    test_header_and_crc()
    test_message_order()
    print("\n🎉 FIT export tests passed")


if __name__ == "__main__":
    main()
