"""
CycleRoute Planner - Main Application Entry Point

A thin Streamlit front end over the cycleroute package:
- GPX upload and route statistics
- Points of interest and turn cues
- Weather along the route for a planned start time and speed
- GPX and FIT course downloads

Weather results are cached here for the configured TTL, keyed by route
content and planned start; the cycleroute package itself holds no cache.
"""

import hashlib
from datetime import datetime, time as dt_time, timezone

import pandas as pd
import streamlit as st

from cycleroute.config.config import get_config
from cycleroute.config.logging_config import setup_logging
from cycleroute.errors import CycleRouteError, RouteTooShortError, WeatherFetchError
from cycleroute.planner import RoutePlanner
from cycleroute.processing.course_points import POI_CATEGORIES
from cycleroute.processing.models import CuePoint, PointOfInterest
from cycleroute.utils.units import UnitConverter
from cycleroute.weather.weather_analyzer import WeatherAnalyzer

st.set_page_config(
    page_title="CycleRoute Planner",
    page_icon="🚴",
    layout="wide",
)

config = get_config()
logger = setup_logging(
    log_level=config.app.log_level,
    log_to_file=config.app.log_to_file
)


def get_planner() -> RoutePlanner:
    return RoutePlanner.from_config(config)


@st.cache_data(ttl=config.weather.cache_ttl_minutes * 60)
def cached_forecast(route_hash: str, start_time_iso: str, avg_speed_kmh: float, _file_content: bytes,
                    _filename: str):
    """Weather for a route and planned start; arguments prefixed with _ are not part of the key."""
    planner = get_planner()
    track = planner.processor.parse_route_file(_file_content, _filename)
    return planner.forecast(track, datetime.fromisoformat(start_time_iso), avg_speed_kmh)


def _poi_frame() -> pd.DataFrame:
    return pd.DataFrame(
        columns=['name', 'category', 'latitude', 'longitude', 'description']
    ).astype({'latitude': float, 'longitude': float})


def _cue_frame() -> pd.DataFrame:
    return pd.DataFrame(
        columns=['instruction', 'latitude', 'longitude', 'distance_m']
    ).astype({'latitude': float, 'longitude': float, 'distance_m': float})


def _rows(frame: pd.DataFrame):
    return frame.dropna(subset=['latitude', 'longitude']).to_dict('records')


def _text(value) -> str:
    return '' if value is None or pd.isna(value) else str(value)


def render_route_stats(stats: dict, imperial: bool):
    cols = st.columns(4)
    cols[0].metric("Distance", UnitConverter.format_distance(stats['total_distance_m'], imperial))
    cols[1].metric("Elevation gain", UnitConverter.format_elevation(stats['total_elevation_gain_m'], imperial))
    cols[2].metric("Points", stats['total_points'])
    cols[3].metric("Max elevation", UnitConverter.format_elevation(stats['max_elevation_m'], imperial))


def main():
    """Main application entry point."""
    st.title("🚴 CycleRoute Planner")
    imperial = st.sidebar.toggle("Imperial units", value=False)
    with st.sidebar.expander("Configuration"):
        st.json(config.get_environment_info())
        validation = config.validate_configuration()
        if not all(validation.values()):
            st.warning(f"Configuration issues: {[k for k, ok in validation.items() if not ok]}")

    uploaded = st.file_uploader("Upload a GPX route", type=config.app.supported_file_types)
    if uploaded is None:
        st.info("Upload a GPX file to get started")
        return

    planner = get_planner()
    file_content = uploaded.getvalue()
    route_hash = hashlib.md5(file_content).hexdigest()

    try:
        analysis = planner.analyze(file_content, uploaded.name)
    except CycleRouteError as e:
        st.error(f"Could not read route: {e}")
        return

    track = analysis['track']
    st.subheader(track.name)
    render_route_stats(analysis['stats'], imperial)

    st.subheader("Points of interest")
    poi_frame = st.data_editor(
        _poi_frame(), num_rows="dynamic", key=f"pois-{route_hash}",
        column_config={'category': st.column_config.SelectboxColumn(options=list(POI_CATEGORIES))},
    )
    pois = [
        PointOfInterest(name=_text(row['name']), latitude=row['latitude'], longitude=row['longitude'],
                        category=_text(row['category']) or 'OTHER', description=_text(row['description']) or None)
        for row in _rows(poi_frame)
    ]
    if pois:
        distances = planner.poi_distances(track, pois)
        for poi, distance in zip(pois, distances):
            st.caption(f"{poi.name}: {UnitConverter.format_distance_round(distance, imperial)} along route")

    st.subheader("Turn cues")
    cue_frame = st.data_editor(_cue_frame(), num_rows="dynamic", key=f"cues-{route_hash}")
    cues = [
        CuePoint(instruction=_text(row['instruction']), latitude=row['latitude'], longitude=row['longitude'],
                 distance_m=None if pd.isna(row['distance_m']) else row['distance_m'])
        for row in _rows(cue_frame)
    ]

    st.subheader("Weather along the route")
    col_date, col_time, col_speed = st.columns(3)
    ride_date = col_date.date_input("Ride date")
    ride_time = col_time.time_input("Start time (UTC)", value=dt_time(8, 0))
    speed = col_speed.slider("Average speed (km/h)", int(config.route.min_speed_kmh),
                             int(config.route.max_speed_kmh), int(config.route.default_speed_kmh))

    if st.button("Get forecast"):
        start_time = datetime.combine(ride_date, ride_time, tzinfo=timezone.utc)
        try:
            weather_points = cached_forecast(route_hash, start_time.isoformat(), float(speed),
                                             file_content, uploaded.name)
        except RouteTooShortError:
            st.warning("Route too short to sample")
        except WeatherFetchError as e:
            logger.error(f"Weather fetch failed: {e}")
            st.error("Failed to fetch weather data")
        except CycleRouteError as e:
            st.error(str(e))
        else:
            summary = planner.weather.summarize(weather_points)
            st.caption(
                f"{len(weather_points)} points at {UnitConverter.format_speed(float(speed), imperial)} - "
                f"{UnitConverter.format_temp(summary['min_temperature_c'], imperial)} to "
                f"{UnitConverter.format_temp(summary['max_temperature_c'], imperial)}, gusts up to "
                f"{UnitConverter.format_speed(summary['max_wind_gust_kmh'], imperial)}"
            )
            for recommendation in summary['recommendations']:
                st.write(recommendation)
            st.dataframe(WeatherAnalyzer.to_dataframe(weather_points), use_container_width=True)

    st.subheader("Export")
    try:
        gpx_file = planner.export_gpx(track, track.name, pois)
        fit_file = planner.export_fit(track, track.name, cues, pois)
    except CycleRouteError as e:
        st.error(f"Failed to export route: {e}")
        return

    col_gpx, col_fit = st.columns(2)
    col_gpx.download_button("Download GPX", gpx_file.data, file_name=gpx_file.filename,
                            mime=gpx_file.content_type)
    col_fit.download_button("Download FIT course", fit_file.data, file_name=fit_file.filename,
                            mime=fit_file.content_type)


if __name__ == "__main__":
    main()
