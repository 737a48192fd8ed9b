"""Tests for the configuration module."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from hygro.lib.config import (
    OUTLIER_MIN_DIFF,
    ChartSettings,
    LogLevel,
    MeasureName,
    Settings,
    get_settings,
)
from hygro.lib.config.testing import set_settings
from hygro.server.__main__ import _parse_args, build_settings


class TestSettingsDefaults:
    """Tests for default configuration values."""

    def test_default_values(self):
        settings = Settings(_env_file=None)

        assert settings.sensor.gpio_pin == 4
        assert settings.sensor.mock is False
        assert settings.sampling.read_wait_sec == 1.5
        assert settings.sampling.max_readings == 20000
        assert settings.sampling.min_diff_temperature == 0.3
        assert settings.sampling.min_diff_humidity == 0.4
        assert settings.server.host == "0.0.0.0"
        assert settings.server.port == 8000
        assert settings.logging.level == LogLevel.INFO
        assert settings.logging.file == ""
        assert settings.sampling.stop_timeout_sec == 5.0

    def test_outlier_noise_floor(self):
        assert OUTLIER_MIN_DIFF[MeasureName.TEMPERATURE] == 0.3
        assert OUTLIER_MIN_DIFF[MeasureName.HUMIDITY] == 0.4

    def test_chart_defaults(self):
        cfg = ChartSettings()

        assert (cfg.width, cfg.height) == (1024, 512)
        assert cfg.time_padding == timedelta(minutes=2)


class TestSettingsFromEnvironment:
    """Tests for loading settings from environment variables."""

    @patch.dict(
        "os.environ",
        {
            "GPIO_PIN": "17",
            "MOCK_SENSOR": "1",
            "READ_WAIT_SEC": "2.5",
            "MAX_READINGS": "500",
            "OUTLIER_MIN_DIFF_TEMPERATURE": "0.5",
            "PORT": "8080",
            "LOG_LEVEL": "debug",
            "LOG_FILE": "/tmp/hygro.log",
            "SAMPLER_STOP_TIMEOUT_SEC": "1.5",
        },
    )
    def test_environment_overrides(self):
        settings = Settings(_env_file=None)

        assert settings.sensor.gpio_pin == 17
        assert settings.sensor.mock is True
        assert settings.sampling.read_wait_sec == 2.5
        assert settings.sampling.max_readings == 500
        assert settings.sampling.min_diff_temperature == 0.5
        assert settings.server.port == 8080
        assert settings.logging.level == LogLevel.DEBUG
        assert settings.logging.file == "/tmp/hygro.log"
        assert settings.sampling.stop_timeout_sec == 1.5

    @patch.dict("os.environ", {"MOCK_SENSOR": "0"})
    def test_mock_sensor_disabled(self):
        assert Settings(_env_file=None).sensor.mock is False

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("MAX_READINGS", "0"),
            ("READ_WAIT_SEC", "0"),
            ("SAMPLER_STOP_TIMEOUT_SEC", "0"),
            ("GPIO_PIN", "40"),
            ("PORT", "70000"),
            ("LOG_LEVEL", "verbose"),
        ],
    )
    def test_invalid_values_rejected(self, name, value):
        with patch.dict("os.environ", {name: value}):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestGetSettings:
    """Tests for the global settings accessor."""

    def test_override(self):
        custom = Settings(_env_file=None, max_readings=42)
        set_settings(custom)

        assert get_settings() is custom

    def test_cleared_override_loads_environment(self):
        set_settings(None)

        with patch.dict("os.environ", {"MAX_READINGS": "77"}):
            assert get_settings().max_readings == 77


class TestCommandLine:
    """Tests for command line overrides of the settings."""

    def test_no_arguments_use_global_settings(self, test_settings):
        assert build_settings(_parse_args([])) is test_settings

    def test_arguments_override_settings(self):
        settings = build_settings(
            _parse_args(["--pin", "22", "--host", "127.0.0.1", "--port", "9000"])
        )

        assert settings.sensor.gpio_pin == 22
        assert settings.server.host == "127.0.0.1"
        assert settings.server.port == 9000

    def test_invalid_pin_rejected(self):
        with pytest.raises(ValidationError):
            build_settings(_parse_args(["--pin", "99"]))
