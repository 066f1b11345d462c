import logging
from typing import Callable, Optional

from ..acquisition import EyeSource, PointerSource
from ..calibration import CalibrationStore, PoseResolver, precalibrated_slots
from ..configs import AppSettings
from ..filters import Smoother
from ..geometry import OffAxisProjector, ScreenModel
from ..models import FrameResult, Pose, SampleOrigin
from ..utils.clock import monotonic_s
from ..utils.logging import ThrottledLogger

logger = logging.getLogger(__name__)


class ParallaxPipeline:
    """
    Owns all per-frame state: screen, calibration, sources, smoother, projector.

    `tick` runs one synchronous pass (resolve pose, smooth, project) and is
    meant to be called exactly once per rendered frame.
    """

    def __init__(
        self,
        screen: ScreenModel,
        store: CalibrationStore,
        smoother: Smoother,
        projector: OffAxisProjector,
        tracker: Optional[EyeSource] = None,
        pointer: Optional[PointerSource] = None,
        near: float = 0.05,
        far: float = 8.0,
        default_depth_m: float = 0.55,
        mirror_x: bool = True,
        use_pointer_fallback: bool = False,
        clock: Callable[[], float] = monotonic_s,
    ):
        self.store = store
        self.smoother = smoother
        self.projector = projector
        self.tracker = tracker
        self.pointer = pointer if pointer is not None else PointerSource()
        self.near = near
        self.far = far
        self.use_pointer_fallback = use_pointer_fallback
        self._clock = clock
        self._default_depth_m = default_depth_m
        self._mirror_x = mirror_x

        self.screen = screen
        self.resolver = PoseResolver(screen.width_m, screen.height_m, default_depth_m, mirror_x)
        self.last_frame: Optional[FrameResult] = None
        self._failure_logger = ThrottledLogger(logger, interval_sec=2.0, clock=clock)

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        smoother: Smoother,
        tracker: Optional[EyeSource] = None,
        pointer: Optional[PointerSource] = None,
        precalibrated: bool = False,
        clock: Callable[[], float] = monotonic_s,
    ) -> "ParallaxPipeline":
        calib = settings.calibration
        if precalibrated:
            store = CalibrationStore(slots=precalibrated_slots())
        else:
            store = CalibrationStore(depths_m=calib.initial_depths_m)

        return cls(
            screen=ScreenModel.from_settings(settings.screen),
            store=store,
            smoother=smoother,
            projector=OffAxisProjector.from_settings(settings.projection),
            tracker=tracker,
            pointer=pointer,
            near=settings.projection.near,
            far=settings.projection.far,
            default_depth_m=calib.default_depth_m,
            mirror_x=calib.mirror_x,
            use_pointer_fallback=settings.tracking.use_pointer_fallback,
            clock=clock,
        )

    # --- Configuration ---

    @property
    def mirror_x(self) -> bool:
        return self._mirror_x

    @mirror_x.setter
    def mirror_x(self, enabled: bool) -> None:
        self._mirror_x = enabled
        self.resolver.mirror_x = enabled

    def set_screen(self, screen: ScreenModel) -> None:
        """Swap the screen geometry, e.g. after the display size was edited."""
        self.screen = screen
        self.resolver = PoseResolver(screen.width_m, screen.height_m, self._default_depth_m, self._mirror_x)
        logger.info("Screen set to %.3f x %.3f m", screen.width_m, screen.height_m)

    # --- Sources ---

    def start(self) -> None:
        if self.tracker is not None:
            self.tracker.start()
        self.pointer.start()

    def stop(self) -> None:
        if self.tracker is not None:
            self.tracker.stop()
        self.pointer.stop()

    # --- Calibration ---

    def capture(self, slot_index: int, position: str) -> bool:
        """
        Record the current tracker sample as a calibration reference.
        Returns False when the tracker has no sample to offer.
        """
        sample = self.tracker.read() if self.tracker is not None else None
        if sample is None:
            logger.warning("Capture aborted: no tracker sample for slot %d %s.", slot_index, position)
            return False
        self.store.capture(slot_index, position, sample)
        return True

    # --- Frame ---

    def resolve(self) -> tuple[Pose, SampleOrigin]:
        sample = self.tracker.read() if self.tracker is not None else None
        if self.use_pointer_fallback or sample is None:
            pointer_sample = self.pointer.read()
            return self.resolver.fallback(pointer_sample, depth_m=self.pointer.depth_m), SampleOrigin.POINTER
        return self.resolver.resolve(sample, self.store.ready_mappings()), SampleOrigin.TRACKER

    def tick(self, now: Optional[float] = None) -> FrameResult:
        now = self._clock() if now is None else now

        pose, origin = self.resolve()
        eye = self.smoother.update(pose.as_vec(), now)
        frustum = self.projector.project(eye, self.screen, self.near, self.far)
        if not frustum.ok:
            self._failure_logger.warning("Frustum invalid (%s), eye=(%.3f, %.3f, %.3f)", frustum.reason, *eye)

        frame = FrameResult(timestamp=now, origin=origin, raw_pose=pose, eye=eye, frustum=frustum)
        self.last_frame = frame
        return frame
