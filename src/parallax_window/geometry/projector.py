"""
Off-axis (generalized perspective) projection from a tracked eye position.

Two camera models are available and they are not interchangeable:

- ``parallel``: Kooima's generalized perspective projection. The camera sits at
  the eye, its axes stay parallel to the screen and only the frustum skews.
  Works for any screen pose.
- ``look_at``: head-follows variant. The camera is moved to
  ``(eye.x, eye.y, effective_distance)`` and looks straight at the screen plane.
  The distance comes from ``eye.z`` alone (screen assumed in z=0 facing +z) and
  can be damped with ``depth_factor`` around ``base_distance``.
"""

from __future__ import annotations

import math
from typing import Literal, Optional

import numpy as np

from ..models import FrustumResult
from .screen import ScreenModel

ProjectionMode = Literal["parallel", "look_at"]

MIN_PLANE_DISTANCE_M = 1e-6
MIN_HEAD_DISTANCE_M = 0.05
NEAR_CLAMP_RATIO = 0.99


def frustum_matrix(left: float, right: float, bottom: float, top: float, near: float, far: float) -> np.ndarray:
    """
    Asymmetric perspective matrix (OpenGL ``glFrustum`` convention, column vectors,
    camera looking down -z, clip z in [-1, 1]).
    """
    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = 2.0 * near / (right - left)
    m[1, 1] = 2.0 * near / (top - bottom)
    m[0, 2] = (right + left) / (right - left)
    m[1, 2] = (top + bottom) / (top - bottom)
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -2.0 * far * near / (far - near)
    m[3, 2] = -1.0
    return m


def look_at_basis(position: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    """Rows: camera right, up and back (+z) axes for a camera at `position` looking at `target`."""
    back = np.asarray(position, dtype=np.float64) - np.asarray(target, dtype=np.float64)
    back /= np.linalg.norm(back)
    right = np.cross(up, back)
    right /= np.linalg.norm(right)
    cam_up = np.cross(back, right)
    return np.stack([right, cam_up, back])


class OffAxisProjector:
    """
    Turns an eye position and a screen plane into frustum bounds and a camera pose.

    `project` never raises for degenerate geometry: it returns a failed
    `FrustumResult` and leaves `last_result` untouched. Invalid clip planes
    are a caller error and raise `ValueError`.
    """

    def __init__(
        self,
        mode: ProjectionMode = "parallel",
        clamp_near: bool = False,
        depth_factor: float = 1.0,
        base_distance: float = 0.5,
    ):
        if mode not in ("parallel", "look_at"):
            raise ValueError(f"Unknown projection mode: {mode!r}")
        self.mode: ProjectionMode = mode
        self.clamp_near = clamp_near
        self.depth_factor = float(min(1.0, max(0.0, depth_factor)))
        self.base_distance = float(max(0.1, base_distance))
        self.last_result: Optional[FrustumResult] = None

    @classmethod
    def from_settings(cls, settings) -> "OffAxisProjector":
        return cls(
            mode=settings.mode,
            clamp_near=settings.clamp_near,
            depth_factor=settings.depth_factor,
            base_distance=settings.base_distance,
        )

    def project(self, eye_world, screen: ScreenModel, near: float, far: float) -> FrustumResult:
        if not (math.isfinite(near) and math.isfinite(far)) or near <= 0.0 or far <= near:
            raise ValueError(f"clip planes must satisfy 0 < near < far, got near={near} far={far}")
        eye = np.asarray(eye_world, dtype=np.float64).reshape(3)
        if self.mode == "parallel":
            result = self._project_parallel(eye, screen, near, far)
        else:
            result = self._project_look_at(eye, screen, near, far)

        if result.ok:
            self.last_result = result
        return result

    def _effective_near(self, near: float, distance: float) -> float:
        if self.clamp_near:
            return min(near, NEAR_CLAMP_RATIO * distance)
        return near

    def _project_parallel(self, eye: np.ndarray, screen: ScreenModel, near: float, far: float) -> FrustumResult:
        va = screen.bottom_left - eye
        vb = screen.bottom_right - eye
        vc = screen.top_left - eye

        d = -float(np.dot(va, screen.normal))
        if not math.isfinite(d) or d <= MIN_PLANE_DISTANCE_M:
            return FrustumResult.failure("eye behind screen or too close")

        near = self._effective_near(near, d)
        scale = near / d

        left = float(np.dot(screen.right, va)) * scale
        right = float(np.dot(screen.right, vb)) * scale
        bottom = float(np.dot(screen.up, va)) * scale
        top = float(np.dot(screen.up, vc)) * scale

        return FrustumResult(
            ok=True,
            left=left,
            right=right,
            bottom=bottom,
            top=top,
            near=near,
            far=far,
            distance=d,
            projection=frustum_matrix(left, right, bottom, top, near, far),
            camera_position=eye.copy(),
            camera_basis=screen.basis(),
        )

    def _project_look_at(self, eye: np.ndarray, screen: ScreenModel, near: float, far: float) -> FrustumResult:
        head_x, head_y, head_dist = (float(v) for v in eye)
        if not math.isfinite(head_dist) or head_dist <= MIN_HEAD_DISTANCE_M:
            return FrustumResult.failure("eye behind screen or too close")

        effective = self.base_distance + (head_dist - self.base_distance) * self.depth_factor
        near = self._effective_near(near, effective)
        scale = near / effective

        half_w = screen.width_m / 2
        half_h = screen.height_m / 2

        # Head moving left (x < 0) shows less of the left wall.
        left = scale * (-half_w - head_x)
        right = scale * (half_w - head_x)
        bottom = scale * (-half_h - head_y)
        top = scale * (half_h - head_y)

        position = np.array([head_x, head_y, effective])
        target = np.array([head_x, head_y, 0.0])
        return FrustumResult(
            ok=True,
            left=left,
            right=right,
            bottom=bottom,
            top=top,
            near=near,
            far=far,
            distance=effective,
            projection=frustum_matrix(left, right, bottom, top, near, far),
            camera_position=position,
            camera_basis=look_at_basis(position, target, screen.up),
        )
