"""Bounded in-memory store of accepted readings.

The sampler thread is the only writer; any number of request handlers
read from it concurrently. The lock is held only while appending or
copying out, never across sensor or network I/O.
"""

import threading
from collections import deque

from hygro.dht.models import Reading


class ReadingStore:
    """Thread-safe, chronologically ordered ring of readings.

    Once full, appending evicts the oldest reading first.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._readings: deque[Reading] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._readings)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def append(self, reading: Reading) -> None:
        """Append a reading, evicting the oldest one when at capacity."""
        with self._lock:
            self._readings.append(reading)

    def snapshot(self) -> tuple[Reading, ...]:
        """Return all readings, oldest first, as of a single point in time."""
        with self._lock:
            return tuple(self._readings)

    def latest(self) -> Reading | None:
        """Return the most recent reading, or None if the store is empty."""
        with self._lock:
            return self._readings[-1] if self._readings else None
