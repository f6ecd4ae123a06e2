"""
Exception taxonomy for CycleRoute Planner.
"""


class CycleRouteError(Exception):
    """Base class for all route processing errors."""


class TrackParseError(CycleRouteError, ValueError):
    """The track document is malformed, has no geometry, or yields no points."""


class RouteTooShortError(CycleRouteError):
    """The route is shorter than the sampling interval and cannot be sampled."""

    def __init__(self, distance_m: float, interval_m: float):
        self.distance_m = distance_m
        self.interval_m = interval_m
        super().__init__(
            f"Route too short to sample: {distance_m:.0f} m is less than the "
            f"{interval_m:.0f} m sampling interval"
        )


class WeatherFetchError(CycleRouteError):
    """A forecast request failed after all retries."""


class ValidationError(CycleRouteError, ValueError):
    """Request parameters are outside the accepted range."""
