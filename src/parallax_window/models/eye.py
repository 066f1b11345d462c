from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional


class Vec3(NamedTuple):
    """A metric 3D position in screen space (meters)."""
    x: float
    y: float
    z: float


DEFAULT_EYE = Vec3(0.0, 0.0, 0.5)


@dataclass(slots=True, frozen=True)
class EyeSample:
    """
    A single tracked eye reading.

    `x`/`y` are normalized tracker image coordinates (0..1, y grows downward,
    not guaranteed to be clamped). `eye_dist_px` is a distance proxy: bigger
    means the viewer is closer. Values <= 0 mean the distance is unknown.
    """
    x: float
    y: float
    eye_dist_px: float = 0.0

    @property
    def has_distance(self) -> bool:
        return self.eye_dist_px > 0


@dataclass(slots=True, frozen=True)
class PoseDiagnostics:
    """How a pose was derived from the calibration brackets."""
    t: float
    far_z: float
    near_z: float
    far_eye_dist_px: float
    near_eye_dist_px: float
    clamped: bool


@dataclass(slots=True, frozen=True)
class Pose:
    """Metric eye position relative to the screen center."""
    x_m: float
    y_m: float
    z_m: float
    info: Optional[PoseDiagnostics] = None

    def as_vec(self) -> Vec3:
        return Vec3(self.x_m, self.y_m, self.z_m)


class SampleOrigin(Enum):
    """Which source produced the sample used for a frame."""
    TRACKER = "tracker"
    POINTER = "pointer"
