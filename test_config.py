#!/usr/bin/env python3
"""
Tests for configuration loading and logging setup.
"""

import logging
import os
import sys

import pytest

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from cycleroute.config.config import (
    ConfigManager, WeatherConfig, RouteConfig, ExportConfig, get_config, reload_config
)
from cycleroute.config.logging_config import setup_logging, get_logger, log_execution_time


def test_defaults():
    weather = WeatherConfig()
    assert weather.base_url == "https://api.open-meteo.com/v1/forecast"
    assert weather.timeout_seconds == 10
    assert weather.max_retries == 2
    assert weather.concurrency == 5
    assert weather.cache_ttl_minutes == 30
    assert len(weather.hourly_fields) == 9

    route = RouteConfig()
    assert route.sample_interval_m == 10000
    assert (route.min_speed_kmh, route.max_speed_kmh) == (5, 60)

    export = ExportConfig()
    assert export.max_name_length == 32
    assert export.fit_base_time.isoformat() == "2024-01-01T00:00:00+00:00"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("WEATHER_CONCURRENCY", "3")
    monkeypatch.setenv("WEATHER_MAX_RETRIES", "0")
    monkeypatch.setenv("SAMPLE_INTERVAL_M", "5000")
    monkeypatch.setenv("LOG_TO_FILE", "false")

    config = ConfigManager()

    assert config.weather.concurrency == 3
    assert config.weather.max_retries == 0
    assert config.route.sample_interval_m == 5000.0
    assert config.app.log_to_file is False
    assert config.get_environment_info()['weather_concurrency'] == 3
    print("✅ Environment overrides applied")


def test_invalid_environment_value_raises(monkeypatch):
    monkeypatch.setenv("WEATHER_TIMEOUT", "soon")
    with pytest.raises(ValueError):
        ConfigManager()


def test_validation_flags_bad_values(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "CHATTY")
    monkeypatch.setenv("WEATHER_CONCURRENCY", "0")

    results = ConfigManager().validate_configuration()

    assert results['valid_log_level'] is False
    assert results['weather_concurrency_valid'] is False
    assert results['weather_url_valid'] is True


def test_get_config_is_lazy_and_reloadable(monkeypatch):
    first = get_config()
    assert get_config() is first

    monkeypatch.setenv("WEATHER_CACHE_TTL", "5")
    reloaded = reload_config()
    assert reloaded is not first
    assert get_config() is reloaded
    assert reloaded.weather.cache_ttl_minutes == 5

    monkeypatch.delenv("WEATHER_CACHE_TTL")
    reload_config()


def test_loggers_are_parented_under_application_logger():
    assert get_logger("weather").name == "cycleroute.weather"
    assert get_logger("cycleroute.export.fit_export").name == "cycleroute.export.fit_export"
    assert get_logger().name == "cycleroute"


def test_setup_logging_writes_daily_file(tmp_path):
    logger = setup_logging(log_level="DEBUG", log_to_file=True, log_dir=str(tmp_path))
    try:
        assert logger.level == logging.DEBUG
        log_files = list(tmp_path.glob("cycleroute_*.log"))
        assert len(log_files) == 1
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def test_log_execution_time_reraises(caplog):
    @log_execution_time(get_logger("tests"))
    def explode():
        raise RuntimeError("boom")

    with caplog.at_level(logging.INFO, logger="cycleroute"):
        with pytest.raises(RuntimeError):
            explode()
    assert "explode (failed)" in caplog.text


def main():
    """Run configuration tests."""
    print("=== Configuration Tests ===")
    test_defaults()
    test_loggers_are_parented_under_application_logger()
    print("\n🎉 Configuration tests passed")


if __name__ == "__main__":
    main()
