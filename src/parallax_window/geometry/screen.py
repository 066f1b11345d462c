"""
Metric model of the physical display as a plane in 3D space.

Convention: the screen is centered at `center`, x (right) and y (up) span the
plane, and the normal points towards the viewer. All lengths are meters.

    top_left ───── top_right
       │              │
       │    center    │
       │              │
    bottom_left ── bottom_right
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

INCH_M = 0.0254


def _unit(v) -> np.ndarray:
    v = np.asarray(v, dtype=np.float64).reshape(3)
    n = float(np.linalg.norm(v))
    if not math.isfinite(n) or n <= 0.0:
        raise ValueError("basis vectors must be finite and non-zero")
    return v / n


def screen_size_from_diagonal(diagonal_in: float, aspect: float) -> tuple[float, float]:
    """Width/height in meters of a screen with the given diagonal (inches) and aspect (w/h)."""
    diag_m = float(diagonal_in) * INCH_M
    k = math.sqrt(aspect * aspect + 1.0)
    return diag_m * (aspect / k), diag_m * (1.0 / k)


@dataclass(frozen=True, eq=False)
class ScreenModel:
    width_m: float
    height_m: float
    center: np.ndarray = field(default_factory=lambda: np.zeros(3))
    right: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0]))
    up: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    normal: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))

    def __post_init__(self) -> None:
        w, h = float(self.width_m), float(self.height_m)
        if not (math.isfinite(w) and math.isfinite(h)) or w <= 0.0 or h <= 0.0:
            raise ValueError(f"screen size must be finite and > 0, got {w}x{h}")
        center = np.asarray(self.center, dtype=np.float64).reshape(3)
        if not np.all(np.isfinite(center)):
            raise ValueError("screen center must be finite")

        # Frozen dataclass: normalize through object.__setattr__.
        object.__setattr__(self, "width_m", w)
        object.__setattr__(self, "height_m", h)
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "right", _unit(self.right))
        object.__setattr__(self, "up", _unit(self.up))
        object.__setattr__(self, "normal", _unit(self.normal))

    @classmethod
    def from_diagonal(cls, diagonal_in: float, aspect: float, **kwargs) -> "ScreenModel":
        width_m, height_m = screen_size_from_diagonal(diagonal_in, aspect)
        return cls(width_m=width_m, height_m=height_m, **kwargs)

    @classmethod
    def from_settings(cls, settings) -> "ScreenModel":
        """Build from a `ScreenSettings`; an explicit width/height wins over the diagonal."""
        if settings.width_m is not None and settings.height_m is not None:
            return cls(width_m=settings.width_m, height_m=settings.height_m)
        return cls.from_diagonal(settings.diagonal_in, settings.aspect)

    def resized(self, width_m: float, height_m: float) -> "ScreenModel":
        return ScreenModel(
            width_m=width_m,
            height_m=height_m,
            center=self.center,
            right=self.right,
            up=self.up,
            normal=self.normal,
        )

    def _corner(self, sx: float, sy: float) -> np.ndarray:
        return self.center + self.right * (sx * 0.5 * self.width_m) + self.up * (sy * 0.5 * self.height_m)

    @property
    def bottom_left(self) -> np.ndarray:
        return self._corner(-1.0, -1.0)

    @property
    def bottom_right(self) -> np.ndarray:
        return self._corner(+1.0, -1.0)

    @property
    def top_left(self) -> np.ndarray:
        return self._corner(-1.0, +1.0)

    @property
    def top_right(self) -> np.ndarray:
        return self._corner(+1.0, +1.0)

    def corners(self) -> np.ndarray:
        """(4,3) array: bottom-left, bottom-right, top-left, top-right."""
        return np.stack([self.bottom_left, self.bottom_right, self.top_left, self.top_right])

    def basis(self) -> np.ndarray:
        """(3,3) array with right, up, normal as rows."""
        return np.stack([self.right, self.up, self.normal])
