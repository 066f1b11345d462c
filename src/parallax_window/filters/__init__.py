from .base import Smoother
from .ema import EMASmoother, PassthroughSmoother
from .holt import DoubleExponentialSmoother
from .one_euro import LowPassFilter, OneEuroFilter

__all__ = [
    "DoubleExponentialSmoother",
    "EMASmoother",
    "LowPassFilter",
    "OneEuroFilter",
    "PassthroughSmoother",
    "Smoother",
]
