from typing import Iterable, Optional

from ..models import EyeSample, Pose, PoseDiagnostics
from .interpolator import interpolate_by_eye_dist
from .slots import CalibrationMapping

_EPS = 1e-9


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def map_to_screen_meters(
    x: float,
    y: float,
    mapping: CalibrationMapping,
    width_m: float,
    height_m: float,
    mirror_x: bool = True,
) -> tuple[float, float]:
    """
    Map a normalized tracker position into screen-relative meters using the
    bounding box of one calibrated depth.

    Tracker y grows downward, so it maps onto +h/2 .. -h/2.
    """
    x01 = (_clamp(x, mapping.x_min, mapping.x_max) - mapping.x_min) / (mapping.x_max - mapping.x_min + _EPS)
    y01 = (_clamp(y, mapping.y_min, mapping.y_max) - mapping.y_min) / (mapping.y_max - mapping.y_min + _EPS)

    x_m = _lerp(-width_m / 2, width_m / 2, x01)
    if mirror_x:
        x_m = -x_m
    y_m = _lerp(height_m / 2, -height_m / 2, y01)
    return x_m, y_m


class PoseResolver:
    """
    Turns eye samples into metric eye positions for one screen size.

    With calibration the position is blended between the two calibrated
    depths bracketing the sample's eye distance. Without it (or without a
    distance reading) the sample is spread over the full screen at
    `default_depth_m`.
    """

    def __init__(self, width_m: float, height_m: float, default_depth_m: float = 0.55, mirror_x: bool = True):
        self.width_m = float(width_m)
        self.height_m = float(height_m)
        self.default_depth_m = float(default_depth_m)
        self.mirror_x = mirror_x

    def fallback(self, sample: EyeSample, depth_m: Optional[float] = None) -> Pose:
        x_m = (sample.x - 0.5) * self.width_m
        if self.mirror_x:
            x_m = -x_m
        y_m = (0.5 - sample.y) * self.height_m
        z_m = self.default_depth_m if depth_m is None else float(depth_m)
        return Pose(x_m, y_m, z_m)

    def calibrated(self, sample: EyeSample, mappings: Iterable[Optional[CalibrationMapping]]) -> Optional[Pose]:
        """Calibrated pose, or None when calibration cannot be applied to this sample."""
        if not sample.has_distance:
            return None
        bracket = interpolate_by_eye_dist(mappings, sample.eye_dist_px)
        if bracket is None:
            return None

        far, near, t = bracket.far, bracket.near, bracket.t
        fx, fy = map_to_screen_meters(sample.x, sample.y, far, self.width_m, self.height_m, self.mirror_x)
        nx, ny = map_to_screen_meters(sample.x, sample.y, near, self.width_m, self.height_m, self.mirror_x)

        return Pose(
            x_m=_lerp(fx, nx, t),
            y_m=_lerp(fy, ny, t),
            z_m=_lerp(far.z_meters, near.z_meters, t),
            info=PoseDiagnostics(
                t=t,
                far_z=far.z_meters,
                near_z=near.z_meters,
                far_eye_dist_px=far.eye_dist_px,
                near_eye_dist_px=near.eye_dist_px,
                clamped=bracket.clamped,
            ),
        )

    def resolve(self, sample: EyeSample, mappings: Iterable[Optional[CalibrationMapping]]) -> Pose:
        pose = self.calibrated(sample, mappings)
        if pose is None:
            pose = self.fallback(sample)
        return pose
