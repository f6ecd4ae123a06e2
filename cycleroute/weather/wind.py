"""
Wind classification relative to the rider's direction of travel.
"""

from dataclasses import dataclass
from enum import Enum

HEADWIND_MAX_ANGLE = 45.0
TAILWIND_MIN_ANGLE = 135.0


class WindType(str, Enum):
    HEADWIND = 'headwind'
    TAILWIND = 'tailwind'
    CROSSWIND_LEFT = 'crosswind-left'
    CROSSWIND_RIGHT = 'crosswind-right'


@dataclass(frozen=True)
class WindClassification:
    """Wind type plus the wind source angle relative to the rider's nose."""
    type: WindType
    relative_angle: float

    def to_dict(self) -> dict:
        return {'type': self.type.value, 'relative_angle': self.relative_angle}


def normalize_angle(angle: float) -> float:
    """Wrap any angle in degrees into (-180, 180]."""
    wrapped = angle % 360
    if wrapped > 180:
        wrapped -= 360
    return wrapped


def classify_wind(travel_deg: float, wind_from_deg: float) -> WindClassification:
    """
    Classify wind relative to travel direction.

    Args:
        travel_deg: Compass bearing the rider is heading
        wind_from_deg: Compass direction the wind blows FROM

    Returns:
        WindClassification; wind from straight ahead is a headwind (angle 0),
        from behind a tailwind (angle 180)
    """
    relative = normalize_angle(wind_from_deg - travel_deg)
    abs_angle = abs(relative)

    if abs_angle <= HEADWIND_MAX_ANGLE:
        wind_type = WindType.HEADWIND
    elif abs_angle >= TAILWIND_MIN_ANGLE:
        wind_type = WindType.TAILWIND
    elif relative > 0:
        wind_type = WindType.CROSSWIND_RIGHT
    else:
        wind_type = WindType.CROSSWIND_LEFT

    return WindClassification(type=wind_type, relative_angle=relative)
