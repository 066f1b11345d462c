from typing import Callable, List

from .acquisition import DummySource, EyeSource, TrackerSource
from .configs import AppSettings, SmoothingSettings
from .filters import DoubleExponentialSmoother, EMASmoother, OneEuroFilter, PassthroughSmoother, Smoother
from .sinks import FrameSink, ParquetSink, ZMQSink
from .utils.clock import monotonic_s


def create_smoother(settings: SmoothingSettings, clock: Callable[[], float] = monotonic_s) -> Smoother:
    """
    Creates the eye position filter selected in the settings.
    """
    kind = settings.kind.lower()
    if kind == "ema":
        return EMASmoother(alpha=settings.alpha)
    if kind == "double":
        return DoubleExponentialSmoother(alpha=settings.alpha, beta=settings.beta)
    if kind == "oneeuro":
        return OneEuroFilter(
            min_cutoff=settings.min_cutoff,
            beta=settings.beta,
            d_cutoff=settings.d_cutoff,
            clock=clock,
        )
    if kind == "none":
        return PassthroughSmoother()
    raise ValueError(f"Unknown smoother type: {settings.kind}")


def create_tracker(settings: AppSettings, clock: Callable[[], float] = monotonic_s) -> EyeSource:
    """
    Creates the eye source: a simulated head in dummy mode, otherwise a source
    an external face tracker pushes into.
    """
    if settings.tracking.use_dummy_mode:
        return DummySource(clock=clock)
    return TrackerSource()


def create_frame_sinks(settings: AppSettings) -> List[FrameSink]:
    """
    Creates fresh sink instances for a new run.
    """
    sinks: List[FrameSink] = []

    # ZMQ
    if settings.zmq.enabled:
        sinks.append(ZMQSink(host=settings.zmq.host))

    # Parquet
    if settings.parquet.enabled:
        sinks.append(
            ParquetSink(
                output_dir=settings.parquet.output_dir,
                max_buffer_size=settings.parquet.max_buffer_size,
                queue_size=settings.parquet.queue_size,
                drop_when_full=settings.parquet.drop_when_full,
            )
        )

    return sinks
