"""Settings models and configuration loading for the hygro application."""

from datetime import timedelta
from functools import cached_property, lru_cache
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hygro.lib.config.enums import LogLevel, MeasureName

# Noise floor of the DHT22 between consecutive samples. A candidate reading
# is only rejected as an outlier when it leaves its neighbours' envelope by
# more than this (or by more than the neighbours' own spread).
OUTLIER_MIN_DIFF = {
    MeasureName.TEMPERATURE: 0.3,  # Celsius
    MeasureName.HUMIDITY: 0.4,  # %
}

# Raspberry Pi BCM GPIO range
_GPIO_PIN_MAX = 27


def _parse_bool(v: Any) -> bool:
    """Parse boolean from string '1'/'0' or actual bool."""
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        return v == "1"
    return bool(v)


def _parse_log_level(v: Any) -> Any:
    """Accept log levels in any case."""
    if isinstance(v, str):
        return v.strip().upper()
    return v


_BoolFromStr = Annotated[bool, BeforeValidator(_parse_bool)]
_LogLevelFromStr = Annotated[LogLevel, BeforeValidator(_parse_log_level)]


class SensorSettings(BaseModel):
    """DHT22 sensor wiring settings."""

    model_config = ConfigDict(frozen=True)

    gpio_pin: int = 4
    mock: bool = False


class SamplingSettings(BaseModel):
    """Sampler loop and outlier rejection settings."""

    model_config = ConfigDict(frozen=True)

    read_wait_sec: float = 1.5
    max_readings: int = 20000
    min_diff_temperature: float = OUTLIER_MIN_DIFF[MeasureName.TEMPERATURE]
    min_diff_humidity: float = OUTLIER_MIN_DIFF[MeasureName.HUMIDITY]
    stop_timeout_sec: float = 5.0


class ServerSettings(BaseModel):
    """HTTP server settings."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 8000


class ChartSettings(BaseModel):
    """Chart rendering settings."""

    model_config = ConfigDict(frozen=True)

    width: int = 1024
    height: int = 512
    time_padding: timedelta = timedelta(minutes=2)
    caption: str = "Temperature & Humidity"


class LoggingSettings(BaseModel):
    """Logging settings."""

    model_config = ConfigDict(frozen=True)

    level: LogLevel = LogLevel.INFO
    file: str = ""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sensor
    gpio_pin: int = Field(default=4, ge=0, le=_GPIO_PIN_MAX)
    mock_sensor: _BoolFromStr = False

    # Sampling
    read_wait_sec: float = Field(default=1.5, gt=0)
    max_readings: int = Field(default=20000, ge=1)
    sampler_stop_timeout_sec: float = Field(default=5.0, gt=0)
    outlier_min_diff_temperature: float = Field(
        default=OUTLIER_MIN_DIFF[MeasureName.TEMPERATURE], ge=0
    )
    outlier_min_diff_humidity: float = Field(
        default=OUTLIER_MIN_DIFF[MeasureName.HUMIDITY], ge=0
    )

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    # Logging
    log_level: _LogLevelFromStr = LogLevel.INFO
    log_file: str = ""

    @cached_property
    def sensor(self) -> SensorSettings:
        """Get sensor settings as nested object."""
        return SensorSettings(gpio_pin=self.gpio_pin, mock=self.mock_sensor)

    @cached_property
    def sampling(self) -> SamplingSettings:
        """Get sampling settings as nested object."""
        return SamplingSettings(
            read_wait_sec=self.read_wait_sec,
            max_readings=self.max_readings,
            min_diff_temperature=self.outlier_min_diff_temperature,
            min_diff_humidity=self.outlier_min_diff_humidity,
            stop_timeout_sec=self.sampler_stop_timeout_sec,
        )

    @cached_property
    def server(self) -> ServerSettings:
        """Get server settings as nested object."""
        return ServerSettings(host=self.host, port=self.port)

    @cached_property
    def chart(self) -> ChartSettings:
        """Get chart settings."""
        return ChartSettings()

    @cached_property
    def logging(self) -> LoggingSettings:
        """Get logging settings as nested object."""
        return LoggingSettings(level=self.log_level, file=self.log_file)


# Settings override for testing - allows injecting custom Settings without
# modifying environment variables or clearing the lru_cache.
_settings_override: Settings | None = None


@lru_cache(maxsize=1)
def _load_settings() -> Settings:
    """Load settings from environment (cached)."""
    return Settings()


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns the test override if set, otherwise loads from environment
    variables (cached after first load). For testing, use set_settings()
    from hygro.lib.config.testing to override.
    """
    if _settings_override is not None:
        return _settings_override
    return _load_settings()
