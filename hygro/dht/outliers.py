"""Three-point outlier rejection for DHT22 readings.

A single noisy sample cannot be judged on its own; it only stands out
relative to its neighbours. Each new reading is therefore held back as
*pending* until the next one arrives, and is then checked against the
last committed reading (before) and the new one (after).
"""

from dataclasses import dataclass

from hygro.dht.models import Reading
from hygro.lib.config import OUTLIER_MIN_DIFF, MeasureName


@dataclass(frozen=True, slots=True)
class OutlierLimits:
    """Noise floor per measure, below which a jump is never an outlier."""

    temperature: float = OUTLIER_MIN_DIFF[MeasureName.TEMPERATURE]
    humidity: float = OUTLIER_MIN_DIFF[MeasureName.HUMIDITY]


@dataclass(frozen=True, slots=True)
class OutlierWindow:
    """Sliding window state: the reading waiting for its successor."""

    pending: Reading | None = None


@dataclass(frozen=True, slots=True)
class WindowStep:
    """Outcome of sliding the window by one reading."""

    window: OutlierWindow
    accepted: Reading | None = None
    rejected: Reading | None = None


def value_is_valid(
    to_check: float, before: float, after: float, min_diff: float
) -> bool:
    """Check a value against the envelope of its neighbours.

    The envelope [min(before, after), max(before, after)] is widened on both
    sides by the larger of min_diff and the neighbours' spread. The low
    bound is inclusive, the high bound exclusive.
    """
    high = max(before, after)
    low = min(before, after)
    diff = max(min_diff, high - low)
    return low - diff <= to_check < high + diff


def reading_is_valid(
    to_check: Reading,
    before: Reading,
    after: Reading,
    limits: OutlierLimits = OutlierLimits(),
) -> bool:
    """A reading is an outlier if either temperature or humidity is."""
    return value_is_valid(
        to_check.temperature,
        before.temperature,
        after.temperature,
        limits.temperature,
    ) and value_is_valid(
        to_check.relative_humidity,
        before.relative_humidity,
        after.relative_humidity,
        limits.humidity,
    )


def advance(
    window: OutlierWindow,
    reading: Reading,
    last_accepted: Reading | None,
    limits: OutlierLimits = OutlierLimits(),
) -> WindowStep:
    """Slide the window forward by one reading.

    Args:
        window: Current window state.
        reading: Newly polled, sanity-checked reading.
        last_accepted: Most recent reading in the store, if any.
        limits: Per-measure noise floor.

    Returns:
        The next window, holding the new reading as pending, along with
        the previous pending reading either accepted or rejected.
    """
    next_window = OutlierWindow(pending=reading)
    pending = window.pending
    if pending is None:
        return WindowStep(next_window)

    # Nothing to validate against yet
    if last_accepted is None:
        return WindowStep(next_window, accepted=pending)

    if reading_is_valid(pending, last_accepted, reading, limits):
        return WindowStep(next_window, accepted=pending)
    return WindowStep(next_window, rejected=pending)
