"""Shared utility functions."""
import math
from datetime import datetime

# Magnus formula constants, accurate to within 0.1% over -30°C to +35°C
_MAGNUS_A = 17.67
_MAGNUS_B = 243.5
_ABS_HUMIDITY_FACTOR = 6.112 * 18.02 / (100 * 0.08314)
_ZERO_CELSIUS_KELVIN = 273.15


def localnow() -> datetime:
    """Return the current local time as a timezone-aware datetime."""
    return datetime.now().astimezone()


def absolute_humidity(temperature: float, rel_humidity: float) -> float:
    """Calculate absolute humidity in g/m^3.

    Args:
        temperature: Temperature in degrees Celsius.
        rel_humidity: Relative humidity in percent.
    """
    saturation = math.exp(
        (_MAGNUS_A * temperature) / (temperature + _MAGNUS_B)
    )
    return (_ABS_HUMIDITY_FACTOR * rel_humidity * saturation) / (
        _ZERO_CELSIUS_KELVIN + temperature
    )
