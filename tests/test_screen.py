import math

import numpy as np
import pytest

from parallax_window.configs import ScreenSettings
from parallax_window.geometry import ScreenModel, screen_size_from_diagonal


def test_corners_follow_center_and_extents():
    screen = ScreenModel(width_m=0.6, height_m=0.4, center=np.array([0.1, -0.2, 0.0]))
    assert np.allclose(screen.bottom_left, [-0.2, -0.4, 0.0])
    assert np.allclose(screen.bottom_right, [0.4, -0.4, 0.0])
    assert np.allclose(screen.top_left, [-0.2, 0.0, 0.0])
    assert np.allclose(screen.top_right, [0.4, 0.0, 0.0])


def test_resized_recomputes_corners():
    screen = ScreenModel(width_m=0.6, height_m=0.4).resized(1.0, 0.5)
    assert np.allclose(screen.top_right, [0.5, 0.25, 0.0])
    assert np.allclose(screen.corners()[0], [-0.5, -0.25, 0.0])


def test_basis_is_normalized():
    screen = ScreenModel(width_m=0.5, height_m=0.3, normal=np.array([0.0, 0.0, 5.0]))
    assert np.allclose(screen.normal, [0.0, 0.0, 1.0])
    assert np.allclose(np.linalg.norm(screen.basis(), axis=1), 1.0)


def test_from_diagonal_matches_closed_form():
    w, h = screen_size_from_diagonal(27.0, 16 / 9)
    diag_m = 27.0 * 0.0254
    assert math.isclose(math.hypot(w, h), diag_m, rel_tol=1e-12)
    assert math.isclose(w / h, 16 / 9, rel_tol=1e-12)

    screen = ScreenModel.from_diagonal(27.0, 16 / 9)
    assert math.isclose(screen.width_m, w)
    assert math.isclose(screen.height_m, h)


def test_from_settings_prefers_explicit_size():
    screen = ScreenModel.from_settings(ScreenSettings(width_m=0.52, height_m=0.29))
    assert screen.width_m == pytest.approx(0.52)
    assert screen.height_m == pytest.approx(0.29)


@pytest.mark.parametrize("w,h", [(0.0, 0.3), (0.5, -1.0), (float("nan"), 0.3), (float("inf"), 0.3)])
def test_rejects_invalid_size(w, h):
    with pytest.raises(ValueError):
        ScreenModel(width_m=w, height_m=h)
