from typing import Optional

import numpy as np

from ..models import DEFAULT_EYE, Vec3


def _vec(value) -> np.ndarray:
    return np.array(value, dtype=np.float64).reshape(3)


class EMASmoother:
    """
    Exponential moving average: ``s = alpha * raw + (1 - alpha) * s``.
    Higher alpha means less smoothing and less lag.
    """

    def __init__(self, alpha: float = 0.3, initial: Vec3 = DEFAULT_EYE):
        self.set_alpha(alpha)
        self._value = _vec(initial)

    def set_alpha(self, alpha: float) -> None:
        self.alpha = float(max(0.0, min(1.0, alpha)))

    def update(self, value: Vec3, timestamp: Optional[float] = None) -> Vec3:
        self._value = self.alpha * _vec(value) + (1.0 - self.alpha) * self._value
        return self.current

    def reset(self, value: Vec3 = DEFAULT_EYE) -> None:
        self._value = _vec(value)

    @property
    def current(self) -> Vec3:
        return Vec3(*(float(v) for v in self._value))


class PassthroughSmoother:
    """No filtering; keeps the last value for `current`."""

    def __init__(self, initial: Vec3 = DEFAULT_EYE):
        self._value = Vec3(*initial)

    def update(self, value: Vec3, timestamp: Optional[float] = None) -> Vec3:
        self._value = Vec3(*(float(v) for v in value))
        return self._value

    def reset(self, value: Vec3 = DEFAULT_EYE) -> None:
        self._value = Vec3(*value)

    @property
    def current(self) -> Vec3:
        return self._value
