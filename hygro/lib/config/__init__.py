"""Centralized configuration for the hygro application.

This package provides:
- Enums for units, measures, and log levels
- Pydantic settings models for configuration
"""

from .enums import LogLevel, MeasureName, Unit
from .settings import (
    OUTLIER_MIN_DIFF,
    ChartSettings,
    LoggingSettings,
    SamplingSettings,
    SensorSettings,
    ServerSettings,
    Settings,
    get_settings,
)

__all__ = [
    # Enums
    "LogLevel",
    "MeasureName",
    "Unit",
    # Settings models
    "ChartSettings",
    "LoggingSettings",
    "SamplingSettings",
    "SensorSettings",
    "ServerSettings",
    "Settings",
    # Constants
    "OUTLIER_MIN_DIFF",
    # Functions
    "get_settings",
]
