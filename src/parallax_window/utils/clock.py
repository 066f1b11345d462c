import time


def monotonic_s() -> float:
    """Seconds from the monotonic clock; only differences are meaningful."""
    return time.monotonic()


class ManualClock:
    """A clock that only moves when told to. Handy for replaying recorded frames."""
    __slots__ = ("now",)

    def __init__(self, start: float = 0.0):
        self.now = float(start)

    def advance(self, dt: float) -> float:
        self.now += dt
        return self.now

    def __call__(self) -> float:
        return self.now
