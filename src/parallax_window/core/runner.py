import asyncio
import logging
import time
from typing import Optional, Sequence

from ..sinks import FrameSink
from .pipeline import ParallaxPipeline

logger = logging.getLogger(__name__)

class FrameRunner:
    """
    Drives the pipeline at a fixed frame rate and fans every frame out to sinks.

    The pipeline tick itself is synchronous; this runner only supplies the
    per-frame trigger that a render loop would otherwise provide.
    """
    def __init__(
        self,
        pipeline: ParallaxPipeline,
        sinks: Sequence[FrameSink] = (),
        target_fps: float = 60.0,
        max_frames: Optional[int] = None,
    ):
        if target_fps <= 0:
            raise ValueError("target_fps must be positive.")
        self.pipeline = pipeline
        self.sinks = sinks
        self.max_frames = max_frames
        self.frames = 0
        self._interval_s = 1.0 / target_fps
        self._stop_event = asyncio.Event()
        self._running = False
        self._loop_task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return

        logger.info("Starting FrameRunner...")
        self._running = True
        self._stop_event.clear()

        await asyncio.gather(*(s.start() for s in self.sinks))
        self.pipeline.start()

        self._loop_task = asyncio.create_task(self._frame_loop())
        logger.info("FrameRunner active.")

    async def stop(self) -> None:
        if not self._running:
            return

        logger.info("Stopping FrameRunner...")
        self._stop_event.set()
        if self._loop_task:
            await self._loop_task
            self._loop_task = None

        self.pipeline.stop()
        await asyncio.gather(*(s.close() for s in self.sinks))
        self._running = False
        logger.info(f"FrameRunner stopped after {self.frames} frames.")

    async def run(self) -> None:
        """Start, run until `max_frames` is reached (or `stop` is called elsewhere), then clean up."""
        await self.start()
        try:
            if self._loop_task:
                await self._loop_task
        finally:
            await self.stop()

    async def _frame_loop(self) -> None:
        """Hot loop."""
        start_time = time.monotonic()
        counter = 0

        try:
            while not self._stop_event.is_set():
                if self.max_frames is not None and self.frames >= self.max_frames:
                    break

                frame = self.pipeline.tick()
                self.frames += 1
                await asyncio.gather(*(s.send(frame) for s in self.sinks))

                # Sleep until the next frame's target time
                counter += 1
                sleep_duration = start_time + counter * self._interval_s - time.monotonic()
                if sleep_duration > 0:
                    await asyncio.sleep(sleep_duration)
                else:
                    await asyncio.sleep(0)

        except asyncio.CancelledError:
            logger.info("Frame loop cancelled unexpectedly.")
