import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Final, Optional

import pyarrow as pa
import pyarrow.parquet as pq

from .base import FrameSink
from ..models import FrameResult
from ..utils.logging import ThrottledLogger
from ..utils.types import EndToken, _END

logger = logging.getLogger(__name__)

class ParquetSink(FrameSink):
    """
    Records every pipeline frame to a Parquet file for offline analysis.
    Frames are queued by `send` and written in batches by a background worker.
    """
    _SCHEMA: Final[pa.Schema] = pa.schema([
        # Monotonic seconds
        ("timestamp", pa.float64()),
        ("origin", pa.string()),

        # Resolved pose before smoothing
        ("raw_x", pa.float32()),
        ("raw_y", pa.float32()),
        ("raw_z", pa.float32()),

        # Interpolation diagnostics (null on fallback poses)
        ("interp_t", pa.float32()),
        ("clamped", pa.bool_()),

        # Smoothed eye
        ("eye_x", pa.float32()),
        ("eye_y", pa.float32()),
        ("eye_z", pa.float32()),

        # Frustum
        ("ok", pa.bool_()),
        ("reason", pa.string()),
        ("left", pa.float64()),
        ("right", pa.float64()),
        ("bottom", pa.float64()),
        ("top", pa.float64()),
        ("near", pa.float64()),
        ("far", pa.float64()),
        ("distance", pa.float64()),
    ])

    def __init__(
        self,
        output_dir: Path,
        max_buffer_size: int = 300,
        queue_size: int = 60 * 60,
        drop_when_full: bool = True,
    ) -> None:
        if queue_size <= max_buffer_size:
            raise ValueError("Queue must be bigger than buffer.")
        self.max_buffer_size = max_buffer_size
        self.drop_when_full = drop_when_full

        # Setup file with UTC timestamp
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        self.output_path = output_dir / f"frames_{datetime.now(timezone.utc):%Y%m%d_%H%M%S}.parquet"

        # Internal state
        self._queue: asyncio.Queue[FrameResult | EndToken] = asyncio.Queue(maxsize=queue_size)
        self._worker_task: Optional[asyncio.Task] = None
        self._writer: Optional[pq.ParquetWriter] = None

        # Stats
        self.total_rows = 0
        self.total_dropped = 0
        self._drop_logger = ThrottledLogger(logger, interval_sec=1)

        logger.info(f"ParquetSink initialized. Writing to: {self.output_path}")

    async def send(self, frame: FrameResult) -> None:
        """Push a frame to the queue. Drops it when the queue is full and dropping is enabled."""
        if self.drop_when_full:
            try:
                self._queue.put_nowait(frame)
            except asyncio.QueueFull:
                self.total_dropped += 1
                self._drop_logger.warning("Queue is full, dropping frame.")
        else:
            await self._queue.put(frame)

    async def _worker(self) -> None:
        """Drains the queue and flushes whenever the buffer is full."""
        buffer: list[FrameResult] = []
        queue = self._queue
        max_buf = self.max_buffer_size

        while True:
            item = await queue.get()
            if item is _END:
                break
            buffer.append(item)

            if len(buffer) >= max_buf:
                await self._flush(buffer)
                buffer = []

        await self._flush(buffer)

    async def _flush(self, batch: list[FrameResult]) -> None:
        """Offloads columnar conversion and IO to a background thread."""
        if not batch:
            return

        try:
            self.total_rows += await asyncio.to_thread(self._write_sync, batch)
        except (OSError, pa.ArrowException) as e:
            logger.error(f"Parquet flush failed: {e}")
            self.total_dropped += len(batch)

    def _write_sync(self, batch: list[FrameResult]) -> int:
        columns: dict[str, list] = {name: [] for name in self._SCHEMA.names}

        for frame in batch:
            pose, f = frame.raw_pose, frame.frustum
            columns["timestamp"].append(frame.timestamp)
            columns["origin"].append(frame.origin.value)
            columns["raw_x"].append(pose.x_m)
            columns["raw_y"].append(pose.y_m)
            columns["raw_z"].append(pose.z_m)
            columns["interp_t"].append(pose.info.t if pose.info else None)
            columns["clamped"].append(pose.info.clamped if pose.info else None)
            columns["eye_x"].append(frame.eye.x)
            columns["eye_y"].append(frame.eye.y)
            columns["eye_z"].append(frame.eye.z)
            columns["ok"].append(f.ok)
            columns["reason"].append(f.reason)
            for name, value in zip(("left", "right", "bottom", "top", "near", "far"), f.bounds):
                columns[name].append(value if f.ok else None)
            columns["distance"].append(f.distance if f.ok else None)

        table = pa.Table.from_pydict(columns, schema=self._SCHEMA)

        if self._writer is None:
            self._writer = pq.ParquetWriter(self.output_path, schema=self._SCHEMA, compression="zstd")

        self._writer.write_table(table)
        return len(batch)

    async def start(self) -> None:
        if self._worker_task is None:
            self._worker_task = asyncio.create_task(self._worker())

    async def close(self) -> None:
        if self._worker_task:
            await self._queue.put(_END)
            await self._worker_task
            self._worker_task = None

        if self._writer:
            await asyncio.to_thread(self._writer.close)
            self._writer = None
        logger.info(f"ParquetSink closed after {self.total_rows} frames ({self.total_dropped} dropped).")
