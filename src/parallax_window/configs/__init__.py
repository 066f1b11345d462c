from .app import (
    AppSettings,
    CalibrationSettings,
    ParquetSinkConfig,
    ProjectionSettings,
    ScreenSettings,
    SmoothingSettings,
    TrackingSettings,
    ZmqSinkConfig,
)
from .utils import LoggingConfig

__all__ = [
    "AppSettings",
    "CalibrationSettings",
    "LoggingConfig",
    "ParquetSinkConfig",
    "ProjectionSettings",
    "ScreenSettings",
    "SmoothingSettings",
    "TrackingSettings",
    "ZmqSinkConfig",
]
