from .projector import OffAxisProjector, frustum_matrix, look_at_basis
from .screen import ScreenModel, screen_size_from_diagonal

__all__ = [
    "OffAxisProjector",
    "ScreenModel",
    "frustum_matrix",
    "look_at_basis",
    "screen_size_from_diagonal",
]
