import asyncio
import struct
from pathlib import Path

import pyarrow.parquet as pq
import pytest

from parallax_window.calibration import CalibrationStore, precalibrated_slots
from parallax_window.acquisition import TrackerSource
from parallax_window.core import FrameRunner, ParallaxPipeline
from parallax_window.filters import PassthroughSmoother
from parallax_window.geometry import OffAxisProjector, ScreenModel
from parallax_window.models import EyeSample
from parallax_window.sinks import FrameSink, ParquetSink, ZMQSink
from parallax_window.utils import ManualClock


class ListSink(FrameSink):
    def __init__(self):
        self.frames = []
        self.started = False
        self.closed = False

    async def start(self):
        self.started = True

    async def send(self, frame):
        self.frames.append(frame)

    async def close(self):
        self.closed = True


def _pipeline() -> ParallaxPipeline:
    clock = ManualClock()
    tracker = TrackerSource()
    pipeline = ParallaxPipeline(
        screen=ScreenModel(width_m=0.6, height_m=0.34),
        store=CalibrationStore(slots=precalibrated_slots()),
        smoother=PassthroughSmoother(),
        projector=OffAxisProjector(),
        tracker=tracker,
        clock=clock,
    )
    tracker.push(EyeSample(0.539, 0.590, 74.2))
    return pipeline


def test_zmq_pack_layout():
    pipeline = _pipeline()
    pipeline.start()
    frame = pipeline.tick(now=1.5)
    message = ZMQSink.pack(frame)

    assert message.startswith(b"frustum")
    assert len(message) == len(b"frustum") + 81
    ok, ts, l, r, b, t, n, f, x, y, z = ZMQSink.unpack(message)
    assert ok is True
    assert ts == 1.5
    # Timestamp sits right after the topic and the ok byte.
    assert struct.unpack_from("!d", message, len(b"frustum") + 1)[0] == 1.5
    assert (l, r, b, t, n, f) == pytest.approx(frame.frustum.bounds)
    assert (x, y, z) == pytest.approx(tuple(frame.eye))


def test_zmq_unpack_rejects_other_topics():
    with pytest.raises(ValueError):
        ZMQSink.unpack(b"gaze" + bytes(81))


def test_runner_feeds_sinks_and_stops():
    pipeline = _pipeline()
    sink = ListSink()
    runner = FrameRunner(pipeline, sinks=[sink], target_fps=1000.0, max_frames=5)

    asyncio.run(runner.run())

    assert sink.started and sink.closed
    assert len(sink.frames) == 5
    assert runner.frames == 5
    assert not runner.is_running
    assert not pipeline.tracker.is_running
    assert all(f.frustum.ok for f in sink.frames)


def test_parquet_sink_records_frames(tmp_path: Path):
    async def record() -> ParquetSink:
        pipeline = _pipeline()
        pipeline.start()
        sink = ParquetSink(output_dir=tmp_path, max_buffer_size=2, queue_size=10)
        await sink.start()
        for i in range(5):
            await sink.send(pipeline.tick(now=i / 60))
        pipeline.pointer.depth_m = 0.0
        pipeline.tracker.lost()
        await sink.send(pipeline.tick(now=1.0))
        await sink.close()
        return sink

    sink = asyncio.run(record())
    assert sink.total_rows == 6
    assert sink.total_dropped == 0

    table = pq.read_table(sink.output_path)
    assert table.num_rows == 6
    rows = table.to_pylist()
    assert rows[0]["origin"] == "tracker"
    assert rows[0]["ok"] is True
    assert rows[0]["raw_z"] == pytest.approx(0.5, abs=1e-6)
    assert rows[-1]["origin"] == "pointer"
    assert rows[-1]["ok"] is False
    assert rows[-1]["left"] is None
    assert rows[-1]["interp_t"] is None


def test_parquet_sink_drops_when_full(tmp_path: Path):
    async def overflow() -> ParquetSink:
        pipeline = _pipeline()
        pipeline.start()
        sink = ParquetSink(output_dir=tmp_path, max_buffer_size=1, queue_size=2)
        # Worker not started: the queue fills up.
        for i in range(4):
            await sink.send(pipeline.tick(now=i / 60))
        return sink

    sink = asyncio.run(overflow())
    assert sink.total_dropped == 2
