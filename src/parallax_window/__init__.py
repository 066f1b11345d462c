from importlib.metadata import PackageNotFoundError, version

from parallax_window.calibration import CalibrationStore, PoseResolver, interpolate_by_eye_dist
from parallax_window.core import FrameRunner, ParallaxPipeline
from parallax_window.filters import DoubleExponentialSmoother, EMASmoother, OneEuroFilter
from parallax_window.geometry import OffAxisProjector, ScreenModel
from parallax_window.models import EyeSample, FrameResult, FrustumResult, Pose

try:
    __version__ = version("parallax-window")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "CalibrationStore",
    "DoubleExponentialSmoother",
    "EMASmoother",
    "EyeSample",
    "FrameResult",
    "FrameRunner",
    "FrustumResult",
    "OffAxisProjector",
    "OneEuroFilter",
    "ParallaxPipeline",
    "Pose",
    "PoseResolver",
    "ScreenModel",
    "interpolate_by_eye_dist",
]
