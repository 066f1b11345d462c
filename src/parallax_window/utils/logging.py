import logging
from typing import Callable, Optional

from .clock import monotonic_s

class ThrottledLogger:
    """
    Rate-limits a repeating warning (e.g. one per rendered frame).

    The first call logs immediately; afterwards at most one record is emitted
    per `interval_sec`, prefixed with the number of calls it stands for.
    """

    def __init__(
        self,
        logger: logging.Logger,
        interval_sec: float = 5.0,
        clock: Callable[[], float] = monotonic_s,
    ) -> None:
        self._logger = logger
        self._interval = interval_sec
        self._clock = clock
        self._last_emit: Optional[float] = None
        self._suppressed = 0

    def warning(self, message: str, *args, **kwargs) -> bool:
        """Returns True when a record was actually emitted."""
        self._suppressed += 1
        now = self._clock()

        if self._last_emit is not None and now - self._last_emit < self._interval:
            return False

        self._logger.warning("[x%d] " + message, self._suppressed, *args, **kwargs)
        self._last_emit = now
        self._suppressed = 0
        return True
