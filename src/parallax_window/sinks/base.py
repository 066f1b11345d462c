from abc import ABC, abstractmethod

from ..models import FrameResult


class FrameSink(ABC):
    """
    Abstract Base Class for consumers of pipeline frames.

    A sink forwards every `FrameResult` to a final destination (a renderer
    process, a recording file). `send` must return quickly; slow work belongs
    in a background task started by `start`.
    """

    async def start(self) -> None:
        """Acquire resources (sockets, files, workers)."""

    @abstractmethod
    async def send(self, frame: FrameResult) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        """Flush and release resources."""
