"""Custom exceptions for the hygro application.

Sensor failures come in two kinds: transient ones (checksum or timing
errors, missing values) that the sampler simply retries, and non-finite
readings that signal a broken driver and stop the sampler for good.
"""

from enum import Enum, auto


class HygroError(Exception):
    """Base exception for all application errors."""


class SensorErrorKind(Enum):
    TRANSIENT = auto()
    NON_FINITE = auto()


class SensorError(HygroError):
    """Raised when the sensor could not produce a usable reading."""

    def __init__(self, kind: SensorErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def is_fatal(self) -> bool:
        """Whether the sampler must stop rather than retry."""
        return self.kind is SensorErrorKind.NON_FINITE
