"""Domain models for DHT22 sensor readings."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from hygro.lib.config import Unit
from hygro.lib.utils import absolute_humidity


@dataclass(frozen=True, slots=True)
class Reading:
    """A single sensor observation.

    The absolute humidity is derived from temperature and relative humidity
    on construction and cannot be set by callers.
    """

    time: datetime
    temperature: float
    relative_humidity: float
    absolute_humidity: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "absolute_humidity",
            absolute_humidity(self.temperature, self.relative_humidity),
        )

    def __str__(self) -> str:
        return (
            f"{self.time.isoformat()} "
            f"{self.temperature}{Unit.CELSIUS} "
            f"{self.relative_humidity}{Unit.PERCENT} "
            f"{self.absolute_humidity:.3f}{Unit.GRAMS_PER_CUBIC_METER}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time.isoformat(),
            "temperature": self.temperature,
            "relative_humidity": self.relative_humidity,
            "absolute_humidity": self.absolute_humidity,
        }
