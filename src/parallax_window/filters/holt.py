from typing import Optional

import numpy as np

from ..models import DEFAULT_EYE, Vec3
from .ema import _vec


class DoubleExponentialSmoother:
    """
    Holt's linear (double exponential) smoothing.

    Tracks a level and a trend per axis, so moving heads lag less than with
    an EMA, at the price of some overshoot when motion stops. The first
    update after construction or reset takes the raw value as level.
    """

    def __init__(self, alpha: float = 0.5, beta: float = 0.4, initial: Vec3 = DEFAULT_EYE):
        self.alpha = float(alpha)
        self.beta = float(beta)
        self._level = _vec(initial)
        self._trend = np.zeros(3)
        self._initialized = False

    def update(self, value: Vec3, timestamp: Optional[float] = None) -> Vec3:
        raw = _vec(value)
        if not self._initialized:
            self._level = raw
            self._trend = np.zeros(3)
            self._initialized = True
            return self.current

        prev = self._level
        level = self.alpha * raw + (1.0 - self.alpha) * (prev + self._trend)
        self._trend = self.beta * (level - prev) + (1.0 - self.beta) * self._trend
        self._level = level
        return self.current

    def reset(self, value: Vec3 = DEFAULT_EYE) -> None:
        self._level = _vec(value)
        self._trend = np.zeros(3)
        self._initialized = False

    @property
    def trend(self) -> Vec3:
        return Vec3(*(float(v) for v in self._trend))

    @property
    def current(self) -> Vec3:
        return Vec3(*(float(v) for v in self._level))
