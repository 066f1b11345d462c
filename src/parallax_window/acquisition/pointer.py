from typing import Optional

from ..models import EyeSample, SampleOrigin
from .base import EyeSource

MIN_DEPTH_M = 0.20
MAX_DEPTH_M = 1.50
WHEEL_STEP_M = 0.03


class PointerSource(EyeSource):
    """
    Pointer fallback: the pointer position stands in for the eye.

    Samples carry no distance (`eye_dist_px == 0`); the depth is set with
    the wheel and read through `depth_m`.
    """

    origin = SampleOrigin.POINTER

    def __init__(self, x: float = 0.5, y: float = 0.5, depth_m: float = 0.50):
        super().__init__()
        self.x = x
        self.y = y
        self.depth_m = depth_m

    def move(self, x: float, y: float) -> None:
        """Pointer position, normalized to the window (0..1, y down)."""
        self.x = x
        self.y = y

    def move_px(self, px: float, py: float, window_width: int, window_height: int) -> None:
        self.move(px / window_width, py / window_height)

    def scroll(self, delta_y: float) -> float:
        """Scrolling down moves the virtual eye away from the screen."""
        if delta_y == 0:
            return self.depth_m
        step = WHEEL_STEP_M if delta_y > 0 else -WHEEL_STEP_M
        self.depth_m = max(MIN_DEPTH_M, min(MAX_DEPTH_M, self.depth_m + step))
        return self.depth_m

    def read(self) -> Optional[EyeSample]:
        return EyeSample(self.x, self.y, 0.0)
