"""
Configuration and logging setup for CycleRoute Planner.
"""

from .config import (
    AppConfig,
    WeatherConfig,
    RouteConfig,
    ExportConfig,
    ConfigManager,
    get_config,
    reload_config,
)
from .logging_config import setup_logging, get_logger

__all__ = [
    'AppConfig',
    'WeatherConfig',
    'RouteConfig',
    'ExportConfig',
    'ConfigManager',
    'get_config',
    'reload_config',
    'setup_logging',
    'get_logger',
]
