import json
import logging
import math
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, ValidationError

from ..errors import CalibrationError
from ..models import EyeSample
from .slots import POSITIONS, CalibrationMapping, CalibrationSlot, compute_mapping, is_ready

logger = logging.getLogger(__name__)

DEFAULT_DEPTHS_M = (0.42, 0.50, 0.62)
RESET_DEPTHS_M = (0.35, 0.55, 0.75)


class SampleRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    x: float
    y: float
    eyeDistPx: float


class SlotSamplesRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    center: Optional[SampleRecord] = None
    left: Optional[SampleRecord] = None
    right: Optional[SampleRecord] = None
    up: Optional[SampleRecord] = None
    down: Optional[SampleRecord] = None


class SlotRecord(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    zMeters: PositiveFloat
    samples: SlotSamplesRecord = Field(default_factory=SlotSamplesRecord)


class CalibrationRecord(BaseModel):
    """Persisted shape: ``{"slots": [{"zMeters": .., "samples": {"center": {x, y, eyeDistPx}, ..}}]}``."""
    slots: list[SlotRecord]


def _slot_to_record(slot: CalibrationSlot) -> SlotRecord:
    samples = {
        pos: SampleRecord(x=s.x, y=s.y, eyeDistPx=s.eye_dist_px)
        for pos, s in slot.samples.items()
        if s is not None
    }
    return SlotRecord(zMeters=slot.z_meters, samples=SlotSamplesRecord(**samples))


def _slot_from_record(record: SlotRecord) -> CalibrationSlot:
    samples: dict[str, Optional[EyeSample]] = {}
    for pos in POSITIONS:
        s = getattr(record.samples, pos)
        samples[pos] = None if s is None else EyeSample(s.x, s.y, s.eyeDistPx)
    return CalibrationSlot(z_meters=record.zMeters, samples=samples)


class CalibrationStore:
    """
    The depth-indexed calibration slots of one session.

    Mutated only through `capture`, `set_depth`, `reset` and the load calls;
    read every frame through `ready_mappings`.
    """

    def __init__(self, slots: Optional[Sequence[CalibrationSlot]] = None, depths_m: Sequence[float] = DEFAULT_DEPTHS_M):
        if slots is None:
            slots = [CalibrationSlot(z_meters=float(z)) for z in depths_m]
        self.slots: list[CalibrationSlot] = list(slots)

    def __len__(self) -> int:
        return len(self.slots)

    def _slot(self, index: int) -> CalibrationSlot:
        if not 0 <= index < len(self.slots):
            raise CalibrationError(f"No calibration slot {index} (have {len(self.slots)}).")
        return self.slots[index]

    # --- Queries ---

    def is_ready(self, index: int) -> bool:
        return is_ready(self._slot(index))

    def compute_mapping(self, index: int) -> Optional[CalibrationMapping]:
        return compute_mapping(self._slot(index))

    def mappings(self) -> list[Optional[CalibrationMapping]]:
        return [compute_mapping(slot) for slot in self.slots]

    def ready_mappings(self) -> list[CalibrationMapping]:
        return [m for m in self.mappings() if m is not None]

    def progress(self, index: int) -> tuple[int, int]:
        """(captured, required) sample counts of a slot."""
        return self._slot(index).captured, len(POSITIONS)

    # --- Mutations ---

    def capture(self, index: int, position: str, sample: EyeSample) -> None:
        """Store `sample` as the `position` reference of slot `index`, replacing any previous one."""
        if position not in POSITIONS:
            raise CalibrationError(f"Unknown calibration position {position!r}, expected one of {POSITIONS}.")
        if not all(math.isfinite(v) for v in (sample.x, sample.y, sample.eye_dist_px)):
            raise CalibrationError(f"Calibration sample must be finite, got {sample}.")
        slot = self._slot(index)
        slot.samples[position] = EyeSample(sample.x, sample.y, sample.eye_dist_px)
        logger.info("Captured slot %d %s: x=%.3f y=%.3f eyeDist=%.1fpx", index, position, sample.x, sample.y, sample.eye_dist_px)

    def set_depth(self, index: int, z_meters: float) -> None:
        if not (math.isfinite(z_meters) and z_meters > 0):
            raise CalibrationError(f"Slot depth must be > 0, got {z_meters}.")
        self._slot(index).z_meters = float(z_meters)

    def reset(self, depths_m: Sequence[float] = RESET_DEPTHS_M) -> None:
        self.slots = [CalibrationSlot(z_meters=float(z)) for z in depths_m]
        logger.info("Calibration reset to %d empty slots.", len(self.slots))

    # --- Persistence ---

    def to_record(self) -> dict[str, Any]:
        record = CalibrationRecord(slots=[_slot_to_record(s) for s in self.slots])
        return record.model_dump(exclude_none=True)

    def load_record(self, data: Any) -> bool:
        """
        Replace the slots with a persisted record.
        Returns False, leaving the current slots untouched, if the record is malformed.
        """
        try:
            record = CalibrationRecord.model_validate(data)
        except ValidationError as e:
            logger.warning("Rejected calibration record: %d validation error(s).", e.error_count())
            logger.debug("Calibration record errors: %s", e)
            return False

        self.slots = [_slot_from_record(s) for s in record.slots]
        logger.info("Loaded calibration with %d slots (%d ready).", len(self.slots), len(self.ready_mappings()))
        return True

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_record(), indent=2), encoding="utf-8")
        logger.info("Calibration saved to %s", path)
        return path

    def load(self, path: Path) -> bool:
        path = Path(path)
        if not path.exists():
            logger.warning("Calibration file '%s' does not exist.", path)
            return False
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Failed to read calibration '%s': %s", path, e)
            return False
        return self.load_record(data)
