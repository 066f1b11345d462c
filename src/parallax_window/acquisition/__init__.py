from .base import EyeSource
from .dummy import DummySource
from .pointer import PointerSource
from .tracker import TrackerSource, eye_sample_from_landmarks

__all__ = ["DummySource", "EyeSource", "PointerSource", "TrackerSource", "eye_sample_from_landmarks"]
