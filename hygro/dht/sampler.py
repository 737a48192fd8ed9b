"""Poll the DHT22 sensor, reject outliers, and keep results in memory.

Each raw reading is sanity-checked, then held back for one cycle so it can
be compared against its neighbours before being committed to the store.
Driver errors (checksum, timing) are retried forever; a non-finite value
means the driver is broken and the sampler stops, leaving the store to
serve its last good data.
"""

import math
import threading
import time
from typing import Protocol, override

from hygro.dht.models import Reading
from hygro.dht.outliers import OutlierLimits, OutlierWindow, advance
from hygro.dht.store import ReadingStore
from hygro.lib.config import SamplingSettings, SensorSettings
from hygro.lib.exceptions import SensorError, SensorErrorKind
from hygro.lib.polling import PollingService
from hygro.lib.utils import localnow
from hygro.logging import configure, get_logger

logger = get_logger("dht.sampler")

# The Adafruit driver measures at most once per this period and returns its
# cached values when read sooner.
DHT22_MEASURE_PERIOD_SEC = 2.0


class DHTSensor(Protocol):
    """Protocol for DHT sensor interface."""

    @property
    def temperature(self) -> float | None: ...

    @property
    def humidity(self) -> float | None: ...

    def exit(self) -> None: ...


def measure_period(cfg: SensorSettings) -> float:
    """Minimum time between two driver reads for the configured sensor."""
    return 0.0 if cfg.mock else DHT22_MEASURE_PERIOD_SEC


def outlier_limits(cfg: SamplingSettings) -> OutlierLimits:
    return OutlierLimits(
        temperature=cfg.min_diff_temperature,
        humidity=cfg.min_diff_humidity,
    )


class DHTSampler(PollingService[Reading]):
    """Sampling service for the DHT22 temperature/humidity sensor."""

    def __init__(
        self,
        sensor: DHTSensor,
        store: ReadingStore,
        limits: OutlierLimits | None = None,
        frequency_sec: float | None = None,
        measure_period_sec: float = 0.0,
    ) -> None:
        super().__init__(name="DHT22", frequency_sec=frequency_sec)
        self.measure_period_sec = measure_period_sec
        self._last_read: float | None = None
        self._dht = sensor
        self._store = store
        self._limits = limits or OutlierLimits()
        self._window = OutlierWindow()
        self.halted = False

    @property
    def window(self) -> OutlierWindow:
        return self._window

    @override
    def initialize(self) -> None:
        self._logger.info(
            "Sampling every %ss into a store of %d readings",
            self.frequency_sec,
            self._store.capacity,
        )
        if self.frequency_sec < self.measure_period_sec:
            self._logger.warning(
                "Interval of %ss is below the sensor's measure period, "
                "reading every %ss instead",
                self.frequency_sec,
                self.measure_period_sec,
            )

    @override
    def cleanup(self) -> None:
        """Release the DHT22 sensor."""
        self._dht.exit()

    def _check_not_halted(self) -> None:
        if self.halted:
            raise RuntimeError(f"{self.name} sampler halted on a non-finite reading")

    @override
    def start(self) -> threading.Thread:
        """Start sampling, unless a broken sensor already halted this sampler."""
        self._check_not_halted()
        return super().start()

    @override
    def run(self) -> None:
        self._check_not_halted()
        super().run()

    def _wait_for_measurement(self) -> bool:
        """Wait until the driver will take a fresh measurement.

        Returns False if a stop was requested while waiting.
        """
        if self._last_read is None:
            return True
        remaining = self.measure_period_sec - (time.monotonic() - self._last_read)
        if remaining > 0 and self._stop_event.wait(remaining):
            return False
        return True

    @override
    def poll(self) -> Reading | None:
        """Poll the DHT22 sensor and sanity-check the raw values."""
        if not self._wait_for_measurement():
            return None
        try:
            temperature = self._dht.temperature
            humidity = self._dht.humidity
        except RuntimeError as e:
            # DHT library raises RuntimeError for transient sensor issues
            # (e.g., checksum failures, timing issues).
            raise SensorError(SensorErrorKind.TRANSIENT, str(e)) from e
        finally:
            self._last_read = time.monotonic()

        if temperature is None or humidity is None:
            raise SensorError(SensorErrorKind.TRANSIENT, "Sensor returned no data")

        if not (math.isfinite(temperature) and math.isfinite(humidity)):
            raise SensorError(
                SensorErrorKind.NON_FINITE,
                f"Non-finite reading: temperature={temperature}, "
                f"humidity={humidity}",
            )

        return Reading(localnow(), float(temperature), float(humidity))

    @override
    def audit(self, reading: Reading) -> Reading | None:
        """Slide the outlier window and return the reading to commit, if any."""
        before = self._store.latest()
        pending = self._window.pending
        step = advance(self._window, reading, before, self._limits)
        self._window = step.window

        if step.rejected is not None:
            self._logger.info(
                "Discarded reading %s (before: %s, after: %s)",
                step.rejected,
                before,
                reading,
            )
        elif pending is None:
            self._logger.debug("Holding first reading %s", reading)
        return step.accepted

    @override
    def persist(self, reading: Reading) -> None:
        """Commit the validated reading to the store."""
        self._store.append(reading)
        self._logger.info("Stored %s", reading)

    @override
    def on_poll_error(self, error: Exception) -> None:
        """Retry on transient sensor errors, halt on fatal ones."""
        if isinstance(error, SensorError):
            if error.is_fatal:
                self._logger.error("Halting sampler: %s", error)
                self.halted = True
                self.request_stop()
            else:
                self._logger.debug("DHT22 sensor read error: %s", error)
        else:
            super().on_poll_error(error)


def create_sensor(cfg: SensorSettings) -> DHTSensor:
    """Create sensor based on configuration."""
    if cfg.mock:
        from hygro.lib.mock import MockDHTSensor

        logger.info("Using mock DHT sensor")
        return MockDHTSensor()

    import adafruit_dht
    import board

    logger.info("Using DHT22 on GPIO pin %d", cfg.gpio_pin)
    return adafruit_dht.DHT22(getattr(board, f"D{cfg.gpio_pin}"))  # type: ignore[no-any-return]


def main() -> None:
    """Run the sampler in the foreground, logging accepted readings."""
    from hygro.lib.config import get_settings

    settings = get_settings()
    configure(settings.logging.level, settings.logging.file)
    store = ReadingStore(settings.sampling.max_readings)
    sampler = DHTSampler(
        create_sensor(settings.sensor),
        store,
        limits=outlier_limits(settings.sampling),
        frequency_sec=settings.sampling.read_wait_sec,
        measure_period_sec=measure_period(settings.sensor),
    )
    sampler.run()


if __name__ == "__main__":
    main()
