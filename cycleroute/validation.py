"""
Input validation for forecast requests and points of interest.
"""

from datetime import datetime

from .config.config import RouteConfig
from .config.logging_config import get_logger
from .errors import ValidationError
from .processing.course_points import POI_CATEGORIES
from .processing.models import PointOfInterest

logger = get_logger(__name__)

MAX_TEXT_LENGTH = 255


def validate_forecast_request(start_time: datetime, avg_speed_kmh: float,
                              route_config: RouteConfig = None) -> None:
    """
    Validate a weather forecast request.

    Raises:
        ValidationError: If the start time is naive or the speed is outside
            the configured range
    """
    route_config = route_config or RouteConfig()

    if start_time.tzinfo is None or start_time.utcoffset() is None:
        raise ValidationError("Start time must include a timezone offset")

    if not route_config.min_speed_kmh <= avg_speed_kmh <= route_config.max_speed_kmh:
        raise ValidationError(
            f"Speed must be between {route_config.min_speed_kmh:g} and "
            f"{route_config.max_speed_kmh:g} km/h, got {avg_speed_kmh:g}"
        )

    logger.debug(f"Forecast request valid: start={start_time.isoformat()}, speed={avg_speed_kmh} km/h")


def validate_poi(poi: PointOfInterest) -> PointOfInterest:
    """
    Validate a point of interest before it is attached to a route.

    Raises:
        ValidationError: On an empty or overlong name, an unknown category,
            or coordinates out of range
    """
    if not poi.name or not poi.name.strip():
        raise ValidationError("Name is required")
    if len(poi.name) > MAX_TEXT_LENGTH:
        raise ValidationError(f"Name must be at most {MAX_TEXT_LENGTH} characters")
    if poi.category not in POI_CATEGORIES:
        raise ValidationError(f"Unknown POI category: {poi.category}")
    if not -90 <= poi.latitude <= 90:
        raise ValidationError(f"Invalid latitude {poi.latitude} (must be -90 to 90)")
    if not -180 <= poi.longitude <= 180:
        raise ValidationError(f"Invalid longitude {poi.longitude} (must be -180 to 180)")
    return poi
