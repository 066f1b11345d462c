import math

import pytest

from parallax_window.acquisition import PointerSource, TrackerSource
from parallax_window.calibration import CalibrationStore, precalibrated_slots
from parallax_window.configs import AppSettings
from parallax_window.core import ParallaxPipeline
from parallax_window.filters import EMASmoother, PassthroughSmoother
from parallax_window.geometry import OffAxisProjector, ScreenModel
from parallax_window.models import EyeSample, SampleOrigin
from parallax_window.utils import ManualClock


def _pipeline(store=None, smoother=None, **kwargs) -> ParallaxPipeline:
    tracker = TrackerSource()
    pipeline = ParallaxPipeline(
        screen=ScreenModel(width_m=0.6, height_m=0.34),
        store=store or CalibrationStore(),
        smoother=smoother or PassthroughSmoother(),
        projector=OffAxisProjector(),
        tracker=tracker,
        clock=ManualClock(),
        **kwargs,
    )
    pipeline.start()
    return pipeline


def test_tracker_sample_with_calibration():
    pipeline = _pipeline(store=CalibrationStore(slots=precalibrated_slots()))
    pipeline.tracker.push(EyeSample(0.539, 0.590, 74.2))

    frame = pipeline.tick()
    assert frame.origin is SampleOrigin.TRACKER
    assert frame.raw_pose.z_m == pytest.approx(0.5, abs=1e-6)
    assert frame.raw_pose.info is not None
    assert frame.frustum.ok
    assert frame.frustum.distance == pytest.approx(0.5, abs=1e-6)
    assert pipeline.last_frame is frame


def test_lost_tracking_falls_back_to_pointer():
    pipeline = _pipeline(mirror_x=False)
    pipeline.pointer.move(1.0, 0.0)
    pipeline.pointer.scroll(+1)

    frame = pipeline.tick()
    assert frame.origin is SampleOrigin.POINTER
    assert frame.raw_pose.x_m == pytest.approx(0.3)
    assert frame.raw_pose.y_m == pytest.approx(0.17)
    assert frame.raw_pose.z_m == pytest.approx(0.53)


def test_pointer_fallback_flag_overrides_tracker():
    pipeline = _pipeline(use_pointer_fallback=True)
    pipeline.tracker.push(EyeSample(0.1, 0.1, 90.0))
    assert pipeline.tick().origin is SampleOrigin.POINTER


def test_uncalibrated_tracker_uses_default_depth_and_mirror():
    pipeline = _pipeline(default_depth_m=0.7)
    pipeline.tracker.push(EyeSample(0.75, 0.5, 80.0))
    frame = pipeline.tick()
    assert frame.origin is SampleOrigin.TRACKER
    assert frame.raw_pose.x_m == pytest.approx(-0.15)
    assert frame.raw_pose.z_m == 0.7

    pipeline.mirror_x = False
    assert pipeline.tick().raw_pose.x_m == pytest.approx(0.15)


def test_smoother_is_applied_per_frame():
    pipeline = _pipeline(smoother=EMASmoother(alpha=0.5), default_depth_m=0.9)
    pipeline.tracker.push(EyeSample(0.5, 0.5, 80.0))
    frame = pipeline.tick()
    assert frame.eye.z == pytest.approx(0.5 * 0.5 + 0.5 * 0.9)
    assert frame.raw_pose.z_m == 0.9


def test_failed_projection_is_reported_not_raised():
    pipeline = _pipeline(smoother=PassthroughSmoother())
    pipeline.pointer.depth_m = 0.0
    frame = pipeline.tick()
    assert not frame.frustum.ok
    assert frame.frustum.reason


def test_capture_uses_latest_tracker_sample():
    pipeline = _pipeline()
    assert pipeline.capture(0, "center") is False

    pipeline.tracker.push(EyeSample(0.4, 0.6, 77.0))
    assert pipeline.capture(0, "center") is True
    assert pipeline.store.slots[0].samples["center"] == EyeSample(0.4, 0.6, 77.0)


def test_set_screen_rebuilds_resolver():
    pipeline = _pipeline(mirror_x=False)
    pipeline.set_screen(ScreenModel(width_m=1.0, height_m=0.5))
    pipeline.pointer.move(1.0, 0.5)
    frame = pipeline.tick()
    assert frame.raw_pose.x_m == pytest.approx(0.5)


def test_from_settings_builds_working_pipeline():
    settings = AppSettings(_env_file=None)
    pipeline = ParallaxPipeline.from_settings(
        settings,
        smoother=PassthroughSmoother(),
        tracker=TrackerSource(),
        precalibrated=True,
        clock=ManualClock(),
    )
    pipeline.start()
    pipeline.tracker.push(EyeSample(0.53, 0.6, 100.0))
    frame = pipeline.tick()
    assert frame.frustum.ok
    assert 0.25 < frame.raw_pose.z_m < 0.5
    assert all(math.isfinite(v) for v in frame.eye)


def test_rejected_non_finite_calibration_keeps_frames_valid():
    store = CalibrationStore(slots=precalibrated_slots())
    record = store.to_record()
    record["slots"][1]["samples"]["left"]["x"] = float("nan")
    record["slots"][1]["zMeters"] = float("inf")
    assert store.load_record(record) is False

    pipeline = _pipeline(store=store, smoother=EMASmoother(alpha=0.3))
    for i in range(20):
        pipeline.tracker.push(EyeSample(0.539, 0.590, 74.2))
        frame = pipeline.tick(now=i / 60)
    assert frame.frustum.ok
    assert all(math.isfinite(v) for v in frame.eye)
