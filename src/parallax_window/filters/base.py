from typing import Optional, Protocol, runtime_checkable

from ..models import Vec3


@runtime_checkable
class Smoother(Protocol):
    """
    Contract shared by every temporal filter of the eye position.
    Axes are filtered independently; `timestamp` is in seconds from a
    monotonic clock and is ignored by strategies that do not need it.
    """
    def update(self, value: Vec3, timestamp: Optional[float] = None) -> Vec3: ...

    def reset(self, value: Vec3 = ...) -> None: ...

    @property
    def current(self) -> Vec3: ...
