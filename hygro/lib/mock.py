"""Mock sensor for development.

Provides a mock implementation of the DHT sensor interface that generates
realistic data without requiring hardware. Used when MOCK_SENSOR=1 is set.

Besides a random walk, the mock occasionally fails like a real DHT22
(checksum errors) and occasionally emits a single-sample spike, so the
retry and outlier paths of the sampler get exercised.
"""

import random


def _random_walk(
    rng: random.Random,
    current: float,
    drift: float,
    min_val: float,
    max_val: float,
) -> float:
    """Generate next value using random walk with bounds."""
    change = rng.gauss(0, drift)
    new_val = current + change
    return max(min_val, min(max_val, new_val))


class MockDHTSensor:
    """Mock DHT22 sensor that generates realistic readings.

    - Temperature: drift=0.05, bounds 15-30
    - Humidity: drift=0.1, bounds 30-70
    """

    def __init__(
        self,
        failure_rate: float = 0.05,
        spike_rate: float = 0.02,
        seed: int | None = None,
    ) -> None:
        self._rng = random.Random(seed)
        self._failure_rate = failure_rate
        self._spike_rate = spike_rate
        self._temperature = self._rng.uniform(20.0, 23.0)
        self._humidity = self._rng.uniform(45.0, 55.0)

    @property
    def temperature(self) -> float:
        if self._rng.random() < self._failure_rate:
            raise RuntimeError("Checksum did not validate. Try again.")
        self._temperature = _random_walk(
            self._rng, self._temperature, drift=0.05, min_val=15.0, max_val=30.0
        )
        if self._rng.random() < self._spike_rate:
            spike = self._rng.choice((-5.0, 5.0))
            return round(self._temperature + spike, 1)
        return round(self._temperature, 1)

    @property
    def humidity(self) -> float:
        self._humidity = _random_walk(
            self._rng, self._humidity, drift=0.1, min_val=30.0, max_val=70.0
        )
        return round(self._humidity, 1)

    def exit(self) -> None:
        """No-op for mock sensor."""
