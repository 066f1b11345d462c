import logging
import math
from typing import Any, Optional, Sequence

from ..models import EyeSample
from .base import EyeSource

logger = logging.getLogger(__name__)

# Face mesh indices of the outer/inner corners of each eye.
LEFT_EYE_CORNERS = (33, 133)
RIGHT_EYE_CORNERS = (263, 362)


def eye_sample_from_landmarks(
    landmarks: Sequence[Any],
    frame_width: int = 640,
    frame_height: int = 480,
) -> Optional[EyeSample]:
    """
    Build an eye sample from normalized face landmarks (objects with `.x`/`.y`).

    The position is the midpoint between both eye centers; the distance proxy
    is the inter-eye distance in frame pixels.
    """
    try:
        le0, le1 = (landmarks[i] for i in LEFT_EYE_CORNERS)
        re0, re1 = (landmarks[i] for i in RIGHT_EYE_CORNERS)
    except (IndexError, KeyError, TypeError):
        return None
    if le0 is None or le1 is None or re0 is None or re1 is None:
        return None

    left = ((le0.x + le1.x) * 0.5, (le0.y + le1.y) * 0.5)
    right = ((re0.x + re1.x) * 0.5, (re0.y + re1.y) * 0.5)

    w = frame_width or 640
    h = frame_height or 480
    eye_dist_px = math.hypot((right[0] - left[0]) * w, (right[1] - left[1]) * h)
    return EyeSample(
        x=(left[0] + right[0]) * 0.5,
        y=(left[1] + right[1]) * 0.5,
        eye_dist_px=eye_dist_px,
    )


class TrackerSource(EyeSource):
    """
    Samples pushed by an external face tracker.

    The tracker (running on its own schedule) calls `push` or
    `push_landmarks`; the pipeline reads the latest value each frame.
    `lost` marks tracking as lost until the next sample arrives.
    """

    def __init__(self, frame_width: int = 640, frame_height: int = 480):
        super().__init__()
        self.frame_width = frame_width
        self.frame_height = frame_height
        self._latest: Optional[EyeSample] = None

    def push(self, sample: Optional[EyeSample]) -> None:
        self._latest = sample

    def push_landmarks(self, landmarks: Sequence[Any]) -> Optional[EyeSample]:
        sample = eye_sample_from_landmarks(landmarks, self.frame_width, self.frame_height)
        if sample is None:
            logger.debug("Landmarks without both eyes, tracking lost.")
        self._latest = sample
        return sample

    def lost(self) -> None:
        self._latest = None

    def read(self) -> Optional[EyeSample]:
        if not self.is_running:
            return None
        return self._latest

    def stop(self) -> None:
        super().stop()
        self._latest = None
