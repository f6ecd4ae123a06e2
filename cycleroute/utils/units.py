"""
Unit conversion utilities for CycleRoute Planner.
Handles conversions and display formatting for metric and imperial units.
"""

from typing import Optional


class UnitConverter:
    """Handles unit conversions between metric and imperial systems."""

    # Conversion factors
    KM_PER_MILE = 1.60934
    FEET_PER_METER = 3.28084

    @staticmethod
    def meters_to_km(meters: float) -> float:
        """Convert meters to kilometers."""
        return meters / 1000

    @staticmethod
    def meters_to_miles(meters: float) -> float:
        """Convert meters to miles."""
        return meters / 1000 / UnitConverter.KM_PER_MILE

    @staticmethod
    def meters_to_feet(meters: float) -> float:
        """Convert meters to feet."""
        return meters * UnitConverter.FEET_PER_METER

    @staticmethod
    def celsius_to_fahrenheit(celsius: float) -> float:
        """Convert Celsius to Fahrenheit."""
        return celsius * 1.8 + 32

    @staticmethod
    def kmh_to_mph(kmh: float) -> float:
        """Convert km/h to mph."""
        return kmh / UnitConverter.KM_PER_MILE

    @staticmethod
    def format_distance(meters: Optional[float], imperial: bool = False) -> str:
        """Format a distance with one decimal."""
        if meters is None:
            return "N/A"
        if imperial:
            return f"{UnitConverter.meters_to_miles(meters):.1f} mi"
        return f"{UnitConverter.meters_to_km(meters):.1f} km"

    @staticmethod
    def format_distance_round(meters: Optional[float], imperial: bool = False) -> str:
        """Format a distance rounded to whole units."""
        if meters is None:
            return "N/A"
        if imperial:
            return f"{round(UnitConverter.meters_to_miles(meters))} mi"
        return f"{round(UnitConverter.meters_to_km(meters))} km"

    @staticmethod
    def format_speed(kmh: Optional[float], imperial: bool = False) -> str:
        if kmh is None:
            return "N/A"
        if imperial:
            return f"{UnitConverter.kmh_to_mph(kmh):.1f} mph"
        return f"{kmh:g} km/h"

    @staticmethod
    def format_temp(celsius: Optional[float], imperial: bool = False) -> str:
        if celsius is None:
            return "N/A"
        if imperial:
            return f"{round(UnitConverter.celsius_to_fahrenheit(celsius))}°F"
        return f"{round(celsius)}°C"

    @staticmethod
    def format_elevation(meters: Optional[float], imperial: bool = False) -> str:
        if meters is None:
            return "N/A"
        if imperial:
            return f"{round(UnitConverter.meters_to_feet(meters))} ft"
        return f"{round(meters)} m"

    @staticmethod
    def distance_unit(imperial: bool = False) -> str:
        return "mi" if imperial else "km"

    @staticmethod
    def temp_unit(imperial: bool = False) -> str:
        return "°F" if imperial else "°C"

    @staticmethod
    def speed_unit(imperial: bool = False) -> str:
        return "mph" if imperial else "km/h"

    @staticmethod
    def elevation_unit(imperial: bool = False) -> str:
        return "ft" if imperial else "m"
