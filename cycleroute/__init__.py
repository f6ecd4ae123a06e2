"""
CycleRoute Planner

Route processing for cyclists:
- GPX parsing with distance, elevation gain and bounds
- Weather forecasts sampled along the route with wind relative to travel direction
- Turn cues and points of interest merged into course points
- GPX and FIT course export
"""

from .planner import RoutePlanner

__version__ = "0.1.0"

__all__ = ['RoutePlanner', '__version__']
