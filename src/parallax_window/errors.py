class ParallaxError(Exception):
    """Base class for all errors raised by parallax_window."""


class CalibrationError(ParallaxError):
    """Raised on invalid calibration calls (unknown slot or sample position)."""


class ProjectionError(ParallaxError):
    """Raised when a failed frustum is used as if it were valid."""
