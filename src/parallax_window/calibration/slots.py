from dataclasses import dataclass, field
from typing import Final, Optional

from ..models import EyeSample

POSITIONS: Final[tuple[str, ...]] = ("center", "left", "right", "up", "down")


@dataclass
class CalibrationSlot:
    """
    Five reference eye samples taken with the viewer at a known depth.

    Samples are only ever added or overwritten; a slot is cleared by replacing
    it (see `CalibrationStore.reset`).
    """
    z_meters: float
    samples: dict[str, Optional[EyeSample]] = field(
        default_factory=lambda: {pos: None for pos in POSITIONS}
    )

    @property
    def captured(self) -> int:
        return sum(1 for pos in POSITIONS if self.samples.get(pos) is not None)


@dataclass(slots=True, frozen=True)
class CalibrationMapping:
    """Normalized tracker bounding box observed at one calibrated depth."""
    z_meters: float
    eye_dist_px: float
    x_min: float
    x_max: float
    y_min: float
    y_max: float


def is_ready(slot: CalibrationSlot) -> bool:
    return all(slot.samples.get(pos) is not None for pos in POSITIONS)


def compute_mapping(slot: CalibrationSlot) -> Optional[CalibrationMapping]:
    """Derive the mapping of a ready slot, or None if samples are missing."""
    if not is_ready(slot):
        return None

    s = slot.samples
    # Captures may be mirrored, so take min/max explicitly.
    return CalibrationMapping(
        z_meters=slot.z_meters,
        eye_dist_px=s["center"].eye_dist_px,
        x_min=min(s["left"].x, s["right"].x),
        x_max=max(s["left"].x, s["right"].x),
        y_min=min(s["up"].y, s["down"].y),
        y_max=max(s["up"].y, s["down"].y),
    )


def _reference_slot(z_meters: float, dist: float, **points: tuple[float, float]) -> CalibrationSlot:
    return CalibrationSlot(
        z_meters=z_meters,
        samples={pos: EyeSample(x, y, dist) for pos, (x, y) in points.items()},
    )


def precalibrated_slots() -> list[CalibrationSlot]:
    """Reference near/mid/far slots measured on a 640x480 webcam at 0.25, 0.50 and 1.00 m."""
    return [
        _reference_slot(
            0.25, 134.9,
            center=(0.528, 0.664), left=(0.222, 0.664), right=(0.835, 0.664),
            up=(0.528, 0.459), down=(0.528, 0.868),
        ),
        _reference_slot(
            0.50, 74.2,
            center=(0.539, 0.590), left=(0.234, 0.590), right=(0.845, 0.590),
            up=(0.539, 0.318), down=(0.539, 0.862),
        ),
        _reference_slot(
            1.00, 31.5,
            center=(0.538, 0.584), left=(0.386, 0.584), right=(0.690, 0.584),
            up=(0.538, 0.363), down=(0.538, 0.805),
        ),
    ]
