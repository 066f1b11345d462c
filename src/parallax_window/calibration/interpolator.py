from dataclasses import dataclass
from typing import Iterable, Optional

from .slots import CalibrationMapping

_EPS = 1e-9


@dataclass(slots=True, frozen=True)
class Bracket:
    """
    Two calibrated depths around a live eye-distance reading.

    `t` is 0 at `far` and 1 at `near`. When `clamped` is set both endpoints are
    the same mapping and `t` is 0.
    """
    far: CalibrationMapping
    near: CalibrationMapping
    t: float
    clamped: bool

    @classmethod
    def single(cls, mapping: CalibrationMapping) -> "Bracket":
        return cls(far=mapping, near=mapping, t=0.0, clamped=True)


def interpolate_by_eye_dist(
    mappings: Iterable[Optional[CalibrationMapping]],
    eye_dist_px: float,
) -> Optional[Bracket]:
    """
    Pick the pair of calibration mappings whose eye distances bracket `eye_dist_px`.

    Returns None only when no mapping is available. Readings outside the
    calibrated range are clamped to the nearest endpoint, never extrapolated.
    """
    # Bigger eye distance means closer, so closest first.
    ms = sorted((m for m in mappings if m is not None), key=lambda m: m.eye_dist_px, reverse=True)
    if not ms:
        return None

    if len(ms) == 1 or eye_dist_px <= 0:
        return Bracket.single(ms[0])

    if eye_dist_px >= ms[0].eye_dist_px:
        return Bracket.single(ms[0])
    if eye_dist_px <= ms[-1].eye_dist_px:
        return Bracket.single(ms[-1])

    for near, far in zip(ms, ms[1:]):
        if far.eye_dist_px <= eye_dist_px <= near.eye_dist_px:
            t = (eye_dist_px - far.eye_dist_px) / (near.eye_dist_px - far.eye_dist_px + _EPS)
            return Bracket(far=far, near=near, t=min(1.0, max(0.0, t)), clamped=False)

    return Bracket.single(ms[0])
