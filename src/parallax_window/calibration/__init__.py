from .interpolator import Bracket, interpolate_by_eye_dist
from .pose import PoseResolver, map_to_screen_meters
from .slots import POSITIONS, CalibrationMapping, CalibrationSlot, compute_mapping, is_ready, precalibrated_slots
from .store import CalibrationRecord, CalibrationStore

__all__ = [
    "POSITIONS",
    "Bracket",
    "CalibrationMapping",
    "CalibrationRecord",
    "CalibrationSlot",
    "CalibrationStore",
    "PoseResolver",
    "compute_mapping",
    "interpolate_by_eye_dist",
    "is_ready",
    "map_to_screen_meters",
    "precalibrated_slots",
]
