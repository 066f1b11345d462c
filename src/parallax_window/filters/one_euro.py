import math
from typing import Callable, Optional

import numpy as np

from ..models import DEFAULT_EYE, Vec3
from ..utils.clock import monotonic_s
from .ema import _vec

NOMINAL_DT_S = 1.0 / 60.0


class LowPassFilter:
    """Per-axis exponential low-pass whose alpha is supplied on every call."""

    def __init__(self, initial) -> None:
        self.value = _vec(initial)
        self.initialized = False

    def __call__(self, value: np.ndarray, alpha: np.ndarray) -> np.ndarray:
        if not self.initialized:
            self.value = np.array(value, dtype=np.float64)
            self.initialized = True
            return self.value.copy()
        self.value = alpha * value + (1.0 - alpha) * self.value
        return self.value.copy()

    def reset(self, value) -> None:
        self.value = _vec(value)
        self.initialized = False


def smoothing_factor(cutoff, dt: float):
    """Alpha of a first order low-pass with the given cutoff (Hz) sampled every `dt` seconds."""
    tau = 1.0 / (2.0 * math.pi * np.asarray(cutoff, dtype=np.float64))
    return 1.0 / (1.0 + tau / dt)


class OneEuroFilter:
    """
    1€ filter (Casiez et al.): a low-pass whose cutoff rises with speed.

    Slow motion is smoothed hard (little jitter), fast motion passes with
    little lag. Each axis filters its own velocity at `d_cutoff` and uses
    ``min_cutoff + beta * |velocity|`` as position cutoff.
    """

    def __init__(
        self,
        min_cutoff: float = 1.0,
        beta: float = 0.0,
        d_cutoff: float = 1.0,
        initial: Vec3 = DEFAULT_EYE,
        clock: Callable[[], float] = monotonic_s,
    ):
        self.min_cutoff = float(min_cutoff)
        self.beta = float(beta)
        self.d_cutoff = float(d_cutoff)
        self._clock = clock

        self._x = LowPassFilter(initial)
        self._dx = LowPassFilter(np.zeros(3))
        self._last_value = _vec(initial)
        self._last_time: Optional[float] = None

    def update(self, value: Vec3, timestamp: Optional[float] = None) -> Vec3:
        now = self._clock() if timestamp is None else float(timestamp)
        raw = _vec(value)

        if self._last_time is None:
            # Both low-pass filters are uninitialized and take their input as is.
            dt = NOMINAL_DT_S
            velocity = np.zeros(3)
        else:
            dt = now - self._last_time
            if dt <= 0:
                return self.current
            velocity = (raw - self._last_value) / dt
        self._last_time = now

        velocity_hat = self._dx(velocity, smoothing_factor(self.d_cutoff, dt))

        cutoff = self.min_cutoff + self.beta * np.abs(velocity_hat)
        self._last_value = self._x(raw, smoothing_factor(cutoff, dt))
        return self.current

    def reset(self, value: Vec3 = DEFAULT_EYE) -> None:
        self._x.reset(value)
        self._dx.reset(np.zeros(3))
        self._last_value = _vec(value)
        self._last_time = None

    @property
    def current(self) -> Vec3:
        return Vec3(*(float(v) for v in self._last_value))
