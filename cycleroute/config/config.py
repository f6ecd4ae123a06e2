"""
Configuration management for CycleRoute Planner.
Centralizes environment variables and application settings.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, List

from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class AppConfig:
    """General application configuration."""
    log_level: str = "INFO"
    log_to_file: bool = True
    max_file_size_mb: int = 10
    supported_file_types: List[str] = field(default_factory=lambda: ['gpx'])


@dataclass
class WeatherConfig:
    """Weather service configuration (Open-Meteo hourly forecast)."""
    base_url: str = "https://api.open-meteo.com/v1/forecast"
    timeout_seconds: float = 10
    max_retries: int = 2
    retry_backoff_seconds: float = 1.0
    concurrency: int = 5
    cache_ttl_minutes: int = 30
    hourly_fields: List[str] = field(default_factory=lambda: [
        'temperature_2m',
        'apparent_temperature',
        'precipitation_probability',
        'precipitation',
        'wind_speed_10m',
        'wind_direction_10m',
        'wind_gusts_10m',
        'weather_code',
        'cloud_cover',
    ])


@dataclass
class RouteConfig:
    """Route sampling and forecast request limits."""
    sample_interval_m: float = 10000.0
    min_speed_kmh: float = 5.0
    max_speed_kmh: float = 60.0
    default_speed_kmh: float = 25.0


@dataclass
class ExportConfig:
    """Export format settings."""
    creator: str = "CycleRoute Planner"
    max_name_length: int = 32
    fit_base_time: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)
    fit_serial_number: int = 12345


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


class ConfigManager:
    """Centralized configuration manager for the application layer."""

    def __init__(self):
        """Initialize configuration manager."""
        logger.info("Initializing configuration manager")
        self._app_config = None
        self._weather_config = None
        self._route_config = None
        self._export_config = None

        self._load_configurations()

    def _load_configurations(self):
        """Load all configuration sections."""
        try:
            self._app_config = self._load_app_config()
            self._weather_config = self._load_weather_config()
            self._route_config = self._load_route_config()
            self._export_config = ExportConfig()

            logger.info("All configurations loaded successfully")

        except ValueError as e:
            logger.error(f"Error loading configurations: {e}")
            raise

    def _load_app_config(self) -> AppConfig:
        """Load general application configuration."""
        config = AppConfig(
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            log_to_file=_env_bool("LOG_TO_FILE", "true"),
            max_file_size_mb=int(os.environ.get("MAX_FILE_SIZE_MB", "10")),
        )

        logger.debug(f"App config loaded - Log level: {config.log_level}")
        return config

    def _load_weather_config(self) -> WeatherConfig:
        """Load weather service configuration."""
        config = WeatherConfig(
            base_url=os.environ.get("WEATHER_API_URL", "https://api.open-meteo.com/v1/forecast"),
            timeout_seconds=float(os.environ.get("WEATHER_TIMEOUT", "10")),
            max_retries=int(os.environ.get("WEATHER_MAX_RETRIES", "2")),
            retry_backoff_seconds=float(os.environ.get("WEATHER_BACKOFF", "1.0")),
            concurrency=int(os.environ.get("WEATHER_CONCURRENCY", "5")),
            cache_ttl_minutes=int(os.environ.get("WEATHER_CACHE_TTL", "30")),
        )

        logger.debug(f"Weather config loaded - URL: {config.base_url}")
        return config

    def _load_route_config(self) -> RouteConfig:
        """Load route sampling configuration."""
        config = RouteConfig(
            sample_interval_m=float(os.environ.get("SAMPLE_INTERVAL_M", "10000")),
        )

        logger.debug(f"Route config loaded - Sample interval: {config.sample_interval_m}m")
        return config

    @property
    def app(self) -> AppConfig:
        """Get application configuration."""
        return self._app_config

    @property
    def weather(self) -> WeatherConfig:
        """Get weather configuration."""
        return self._weather_config

    @property
    def route(self) -> RouteConfig:
        """Get route configuration."""
        return self._route_config

    @property
    def export(self) -> ExportConfig:
        """Get export configuration."""
        return self._export_config

    def get_environment_info(self) -> Dict[str, Any]:
        """Get environment information for debugging."""
        return {
            "log_level": self._app_config.log_level,
            "weather_service": self._weather_config.base_url,
            "weather_concurrency": self._weather_config.concurrency,
            "sample_interval_m": self._route_config.sample_interval_m,
        }

    def validate_configuration(self) -> Dict[str, bool]:
        """Validate all configuration sections."""
        validation_results = {
            "valid_log_level": self._app_config.log_level.upper() in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            "weather_url_valid": self._weather_config.base_url.startswith("http"),
            "weather_timeout_valid": self._weather_config.timeout_seconds > 0,
            "weather_concurrency_valid": self._weather_config.concurrency > 0,
            "sample_interval_valid": self._route_config.sample_interval_m > 0,
        }

        logger.info(f"Configuration validation completed: {sum(validation_results.values())}/{len(validation_results)} checks passed")

        return validation_results


_config_manager = None


def get_config() -> ConfigManager:
    """Get the application-layer configuration manager, creating it on first use."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def reload_config() -> ConfigManager:
    """Rebuild the configuration manager from the current environment."""
    global _config_manager
    _config_manager = ConfigManager()
    return _config_manager
