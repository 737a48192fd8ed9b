"""Shared pytest fixtures for the test suite."""

import logging
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

# Mock hardware-specific modules before they're imported
# These are only available on Raspberry Pi hardware
sys.modules["adafruit_dht"] = MagicMock()
sys.modules["board"] = MagicMock()

from hygro.dht.models import Reading
from hygro.dht.store import ReadingStore
from hygro.lib.config import Settings
from hygro.lib.config.testing import set_settings


class ScriptedSensor:
    """DHT sensor double that replays a fixed script of readings.

    Each script item is either a (temperature, humidity) pair or an
    exception raised when the temperature is read.
    """

    def __init__(self, script):
        self.script = list(script)
        self.exited = False
        self._current = None

    @property
    def temperature(self):
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        self._current = item
        return item[0]

    @property
    def humidity(self):
        return self._current[1]

    def exit(self):
        self.exited = True


@pytest.fixture(autouse=True)
def configure_caplog(caplog):
    """Ensure caplog captures logs from the hygro namespace."""
    caplog.set_level(logging.DEBUG, logger="hygro")


@pytest.fixture(autouse=True)
def test_settings():
    """Use default settings, isolated from any local .env file."""
    settings = Settings(_env_file=None)
    set_settings(settings)
    yield settings
    set_settings(None)


@pytest.fixture
def frozen_time():
    """Return a fixed datetime for deterministic tests."""
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))


@pytest.fixture
def sample_reading(frozen_time):
    """Create a valid DHT22 reading."""
    return Reading(frozen_time, 22.5, 55.0)


@pytest.fixture
def make_reading(frozen_time):
    """Build readings spaced a few seconds apart."""

    def _make(index, temperature, humidity=50.0):
        return Reading(
            frozen_time + timedelta(seconds=2 * index), temperature, humidity
        )

    return _make


@pytest.fixture
def store():
    return ReadingStore(capacity=100)


@pytest.fixture
def scripted_sensor():
    """Factory for sensors replaying a script of readings and errors."""
    return ScriptedSensor
