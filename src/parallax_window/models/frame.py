from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..errors import ProjectionError
from .eye import Pose, SampleOrigin, Vec3


@dataclass(frozen=True, eq=False)
class FrustumResult:
    """
    Outcome of an off-axis projection.

    On success `left/right/bottom/top` are the near-plane frustum bounds,
    `distance` is the eye-to-screen distance used for scaling, `projection`
    is the 4x4 OpenGL-style matrix, and the camera is placed at
    `camera_position` with rows of `camera_basis` as its right/up/back axes.
    On failure only `reason` is set.
    """
    ok: bool
    reason: Optional[str] = None
    left: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    top: float = 0.0
    near: float = 0.0
    far: float = 0.0
    distance: float = 0.0
    projection: Optional[np.ndarray] = None
    camera_position: Optional[np.ndarray] = None
    camera_basis: Optional[np.ndarray] = None

    @classmethod
    def failure(cls, reason: str) -> "FrustumResult":
        return cls(ok=False, reason=reason)

    def raise_for_status(self) -> "FrustumResult":
        if not self.ok:
            raise ProjectionError(self.reason or "projection failed")
        return self

    @property
    def bounds(self) -> tuple[float, float, float, float, float, float]:
        return (self.left, self.right, self.bottom, self.top, self.near, self.far)


@dataclass(frozen=True)
class FrameResult:
    """Everything one pipeline tick produced, handed to the renderer and sinks."""
    timestamp: float
    origin: SampleOrigin
    raw_pose: Pose
    eye: Vec3
    frustum: FrustumResult
