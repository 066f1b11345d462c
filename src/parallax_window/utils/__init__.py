from .clock import ManualClock, monotonic_s
from .logging import ThrottledLogger

__all__ = ["ManualClock", "ThrottledLogger", "monotonic_s"]
