from .eye import DEFAULT_EYE, EyeSample, Pose, PoseDiagnostics, SampleOrigin, Vec3
from .frame import FrameResult, FrustumResult

__all__ = [
    "DEFAULT_EYE",
    "EyeSample",
    "FrameResult",
    "FrustumResult",
    "Pose",
    "PoseDiagnostics",
    "SampleOrigin",
    "Vec3",
]
