from abc import ABC, abstractmethod
from typing import Optional, final

from ..models import EyeSample, SampleOrigin


class EyeSource(ABC):
    """
    Abstract Base Class for all eye sample sources.

    A source is polled once per frame through `read`, which returns the most
    recent sample or None when tracking is lost. Sources never block: whatever
    produces the samples (a tracker callback, pointer events, a simulation)
    only updates the latest value.
    """

    origin: SampleOrigin = SampleOrigin.TRACKER

    def __init__(self) -> None:
        self._running = False

    @abstractmethod
    def read(self) -> Optional[EyeSample]:
        """Latest sample, or None when no sample is available."""
        raise NotImplementedError

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    @final
    @property
    def is_running(self) -> bool:
        return self._running
