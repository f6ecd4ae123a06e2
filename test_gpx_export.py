#!/usr/bin/env python3
"""
Tests for GPX export, read back with gpxpy.
"""

import os
import sys
from datetime import date, datetime, timezone

import gpxpy

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from cycleroute.export.download import export_gpx_file, sanitize_filename, export_filename, GPX_CONTENT_TYPE
from cycleroute.export.gpx_export import build_export_gpx, map_poi_category_to_gpx_type
from cycleroute.processing.models import PointOfInterest, TrackPoint
from cycleroute.processing.route_processor import parse_gpx

GENERATED_AT = datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)

POINTS = [
    TrackPoint(49.2827123456789, -123.120712345678, 12.5),
    TrackPoint(49.2831, -123.1211, None),
    TrackPoint(49.28401234, -123.12200001, 14.0),
]


def test_track_points_written_back_unchanged():
    """Every coordinate survives a write and re-parse exactly."""
    xml = build_export_gpx("Morning Ride", POINTS, generated_at=GENERATED_AT)
    track = parse_gpx(xml)

    assert track.name == "Morning Ride"
    assert len(track.points) == len(POINTS)
    for original, parsed in zip(POINTS, track.points):
        assert parsed.latitude == original.latitude
        assert parsed.longitude == original.longitude
        assert parsed.elevation == original.elevation
    print("✅ GPX round trip preserved coordinates")


def test_document_header_and_metadata():
    xml = build_export_gpx("Morning Ride", POINTS, description="Coffee loop", generated_at=GENERATED_AT)

    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert 'version="1.1"' in xml
    assert 'creator="CycleRoute Planner"' in xml
    assert 'http://www.topografix.com/GPX/1/1' in xml

    gpx = gpxpy.parse(xml)
    assert gpx.version == "1.1"
    assert gpx.creator == "CycleRoute Planner"
    assert gpx.name == "Morning Ride"
    assert gpx.description == "Coffee loop"
    assert gpx.tracks[0].name == "Morning Ride"
    # Generation time is kept to the millisecond
    assert gpx.time == datetime(2024, 5, 1, 12, 0, 0, 123000, tzinfo=timezone.utc)


def test_special_characters_are_escaped():
    name = 'Tom & Jerry <3 "fast" \'ride\''
    pois = [PointOfInterest("Cafe <Bar> & Grill", 49.0, -123.0, 'FOOD', description="Open 7 & up")]

    xml = build_export_gpx(name, POINTS, pois, generated_at=GENERATED_AT)

    assert 'Tom &amp; Jerry &lt;3' in xml
    assert 'Cafe &lt;Bar&gt; &amp; Grill' in xml
    assert 'Open 7 &amp; up' in xml
    assert 'Tom & Jerry' not in xml
    assert '<Bar>' not in xml

    gpx = gpxpy.parse(xml)
    assert gpx.name == name
    assert gpx.tracks[0].name == name
    assert gpx.waypoints[0].name == "Cafe <Bar> & Grill"
    assert gpx.waypoints[0].description == "Open 7 & up"


def test_waypoints_typed_with_garmin_vocabulary():
    pois = [
        PointOfInterest("Bakery", 49.1, -123.1, 'FOOD'),
        PointOfInterest("Toilets", 49.2, -123.2, 'RESTROOM'),
        PointOfInterest("Lookout", 49.3, -123.3, 'VIEWPOINT'),
        PointOfInterest("Gravel", 49.4, -123.4, 'CAUTION'),
        PointOfInterest("Parking", 49.5, -123.5, 'PARKING'),
    ]

    gpx = gpxpy.parse(build_export_gpx("Typed", POINTS, pois, generated_at=GENERATED_AT))

    assert [w.type for w in gpx.waypoints] == ['FOOD', 'TOILET', 'OVERLOOK', 'DANGER', 'GENERIC']
    assert [w.name for w in gpx.waypoints] == [p.name for p in pois]
    assert gpx.waypoints[0].latitude == 49.1
    assert gpx.waypoints[0].description is None
    assert map_poi_category_to_gpx_type('WATER') == 'WATER'


def test_points_without_elevation_omit_ele():
    xml = build_export_gpx("Flat", [TrackPoint(1.5, 2.5), TrackPoint(1.6, 2.6)], generated_at=GENERATED_AT)
    assert '<ele>' not in xml

    points = gpxpy.parse(xml).tracks[0].segments[0].points
    assert [(p.latitude, p.longitude, p.elevation) for p in points] == [(1.5, 2.5, None), (1.6, 2.6, None)]


def test_tiny_coordinates_written_as_plain_decimals():
    """xsd:decimal has no exponent form, so 1e-07 must be written out in full."""
    pois = [PointOfInterest("Null Island", 1e-7, 2.0, 'OTHER')]
    track = [TrackPoint(0.00005, -0.00002), TrackPoint(1e-7, 1.0)]

    xml = build_export_gpx("Tiny", track, pois, generated_at=GENERATED_AT)

    assert 'e-0' not in xml
    assert 'lat="0.0000001"' in xml

    gpx = gpxpy.parse(xml)
    assert gpx.waypoints[0].latitude == 1e-7
    points = gpx.tracks[0].segments[0].points
    assert [(p.latitude, p.longitude) for p in points] == [(0.00005, -0.00002), (1e-7, 1.0)]


def test_export_file_packaging():
    export = export_gpx_file("My Ride: Day #1", POINTS, today=date(2024, 6, 1))

    assert export.filename == "My_Ride__Day__1-2024-06-01.gpx"
    assert export.content_type == GPX_CONTENT_TYPE
    assert export.data.decode('utf-8').startswith('<?xml')


def test_filename_sanitizing():
    assert sanitize_filename("Col du Galibier") == "Col_du_Galibier"
    assert sanitize_filename("a-b_c.d/e") == "a-b_c_d_e"
    assert export_filename("Route", "fit", date(2025, 1, 2)) == "Route-2025-01-02.fit"


def main():
    """Run GPX export tests."""
    print("=== GPX Export Tests ===")
    test_track_points_written_back_unchanged()
    test_special_characters_are_escaped()
    print("\n🎉 GPX export tests passed")


if __name__ == "__main__":
    main()
