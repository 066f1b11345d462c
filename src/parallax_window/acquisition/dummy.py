import logging
import math
from typing import Callable, Optional

from ..models import EyeSample
from ..utils.clock import monotonic_s
from .base import EyeSource

logger = logging.getLogger(__name__)


class DummySource(EyeSource):
    """
    An EyeSource that simulates a tracked head for development and testing.

    The eye follows a circular path in tracker space while the distance proxy
    swings slowly between `eye_dist_range`, so both the lateral mapping and
    the depth interpolation are exercised without a camera.
    """

    def __init__(
        self,
        radius: float = 0.15,
        center: tuple[float, float] = (0.5, 0.5),
        speed: float = 0.25,
        eye_dist_range: tuple[float, float] = (40.0, 120.0),
        depth_period_s: float = 8.0,
        clock: Callable[[], float] = monotonic_s,
    ):
        """
        Args:
            radius: The radius of the circular path (normalized units).
            center: The (x, y) center of the circular path.
            speed: Revolutions per second along the circle.
            eye_dist_range: (far, near) eye distance proxy in pixels.
            depth_period_s: Seconds for one full near/far swing.
            clock: Monotonic time source in seconds.
        """
        super().__init__()
        if depth_period_s <= 0:
            raise ValueError("depth_period_s must be positive.")
        lo, hi = eye_dist_range
        if not 0 < lo <= hi:
            raise ValueError("eye_dist_range must be (far, near) with 0 < far <= near.")

        self._radius = radius
        self._center_x, self._center_y = center
        self._speed = speed
        self._dist_lo, self._dist_hi = lo, hi
        self._depth_period_s = depth_period_s
        self._clock = clock
        self._start_time: Optional[float] = None

    def start(self) -> None:
        super().start()
        self._start_time = self._clock()
        logger.info("Starting dummy eye stream...")

    def stop(self) -> None:
        super().stop()
        logger.info("DummySource has stopped.")

    def read(self) -> Optional[EyeSample]:
        if not self.is_running or self._start_time is None:
            return None

        elapsed = self._clock() - self._start_time
        angle = elapsed * self._speed * 2 * math.pi
        swing = 0.5 - 0.5 * math.cos(2 * math.pi * elapsed / self._depth_period_s)
        return EyeSample(
            x=self._center_x + self._radius * math.cos(angle),
            y=self._center_y + self._radius * math.sin(angle),
            eye_dist_px=self._dist_lo + (self._dist_hi - self._dist_lo) * swing,
        )
