import logging
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, PositiveFloat, PositiveInt, model_validator

from .utils import LoggingConfig

logger = logging.getLogger(__name__)

class ScreenSettings(BaseModel):
    """
    Physical size of the display the scene is rendered on.
    Either a diagonal + aspect ratio, or an explicit width/height in meters.
    """
    diagonal_in: PositiveFloat = Field(15.6, description="Screen diagonal in inches.")
    aspect: PositiveFloat = Field(16 / 9, description="Width / height ratio of the active area.")
    width_m: Optional[PositiveFloat] = Field(None, description="Explicit width, overrides the diagonal.")
    height_m: Optional[PositiveFloat] = Field(None, description="Explicit height, overrides the diagonal.")

    @model_validator(mode='after')
    def validate_explicit_size(self) -> "ScreenSettings":
        if (self.width_m is None) != (self.height_m is None):
            raise ValueError('width_m and height_m must be given together.')
        return self

class ProjectionSettings(BaseModel):
    near: PositiveFloat = 0.05
    far: PositiveFloat = 8.0
    clamp_near: bool = False
    mode: Literal["parallel", "look_at"] = "parallel"
    # Only used by the look_at mode
    depth_factor: float = Field(1.0, ge=0.0, le=1.0)
    base_distance: float = Field(0.5, ge=0.1)

    @model_validator(mode='after')
    def validate_clip_planes(self) -> "ProjectionSettings":
        if self.far <= self.near:
            raise ValueError('far must be bigger than near.')
        return self

class SmoothingSettings(BaseModel):
    """Temporal filter applied to the resolved eye position."""
    kind: Literal["ema", "double", "oneeuro", "none"] = "ema"
    alpha: float = Field(0.3, gt=0.0, le=1.0, description="Value smoothing factor (ema, double).")
    beta: float = Field(0.4, ge=0.0, description="Trend factor (double) or cutoff slope (oneeuro).")
    min_cutoff: PositiveFloat = Field(1.0, description="One-Euro minimum cutoff in Hz.")
    d_cutoff: PositiveFloat = Field(1.0, description="One-Euro velocity cutoff in Hz.")

class CalibrationSettings(BaseModel):
    """Settings for the depth-slot calibration."""
    initial_depths_m: list[PositiveFloat] = Field(
        default=[0.42, 0.50, 0.62],
        description="Guessed depths of the empty slots created at startup."
    )
    reset_depths_m: list[PositiveFloat] = Field(
        default=[0.35, 0.55, 0.75],
        description="Depths of the empty slots created by a reset."
    )
    default_depth_m: PositiveFloat = Field(0.55, description="Eye depth used when no calibration applies.")
    mirror_x: bool = Field(True, description="Flip the horizontal mapping (selfie camera).")
    store_path: Path = Field(default_factory=lambda: Path.cwd() / "calibration.json")

class TrackingSettings(BaseModel):
    use_pointer_fallback: bool = False
    use_dummy_mode: bool = False

class ZmqSinkConfig(BaseModel):
    enabled: bool = False
    host: str = "tcp://*:5556"

class ParquetSinkConfig(BaseModel):
    enabled: bool = False
    output_dir: Path = Path("./recordings")
    drop_when_full: bool = True
    max_buffer_size: PositiveInt = 60 * 5 # Flushes every 5 seconds at 60 Hz
    queue_size: PositiveInt = 60 * 5 * 12 # Holds 1 minute of frames at 60 Hz

    @model_validator(mode='after')
    def validate_buffer_sizes(self) -> "ParquetSinkConfig":
        if self.queue_size <= self.max_buffer_size:
            raise ValueError('Queue must be bigger than buffer.')
        return self

class AppSettings(BaseSettings):
    """
    Main application settings, loaded from environment variables and defaults.
    """
    target_fps: PositiveFloat = 60.0

    # Geometry
    screen: ScreenSettings = Field(default_factory=ScreenSettings)
    projection: ProjectionSettings = Field(default_factory=ProjectionSettings)

    # Signal
    smoothing: SmoothingSettings = Field(default_factory=SmoothingSettings)
    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings)
    tracking: TrackingSettings = Field(default_factory=TrackingSettings)

    # Sinks
    zmq: ZmqSinkConfig = Field(default_factory=ZmqSinkConfig)
    parquet: ParquetSinkConfig = Field(default_factory=ParquetSinkConfig)

    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="PARALLAX__",
        env_file=".env",
        env_nested_delimiter='__',
        case_sensitive=False
    )
