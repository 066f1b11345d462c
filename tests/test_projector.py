import numpy as np
import pytest

from parallax_window.errors import ProjectionError
from parallax_window.geometry import OffAxisProjector, ScreenModel, frustum_matrix

NEAR, FAR = 0.05, 8.0


def _screen(**kwargs) -> ScreenModel:
    return ScreenModel(width_m=0.6, height_m=0.34, **kwargs)


def test_centered_eye_gives_symmetric_frustum():
    res = OffAxisProjector().project([0.0, 0.0, 0.5], _screen(), NEAR, FAR)
    assert res.ok
    assert res.distance == pytest.approx(0.5)
    scale = NEAR / 0.5
    assert res.left == pytest.approx(-0.3 * scale)
    assert res.right == pytest.approx(0.3 * scale)
    assert res.bottom == pytest.approx(-0.17 * scale)
    assert res.top == pytest.approx(0.17 * scale)
    assert np.allclose(res.camera_position, [0.0, 0.0, 0.5])
    assert np.allclose(res.camera_basis, np.eye(3))


def test_off_center_eye_skews_frustum():
    res = OffAxisProjector().project([0.1, -0.05, 0.4], _screen(), NEAR, FAR)
    scale = NEAR / 0.4
    assert res.left == pytest.approx((-0.3 - 0.1) * scale)
    assert res.right == pytest.approx((0.3 - 0.1) * scale)
    assert res.bottom == pytest.approx((-0.17 + 0.05) * scale)
    assert res.top == pytest.approx((0.17 + 0.05) * scale)
    # Camera axes stay parallel to the screen; only the frustum shifts.
    assert np.allclose(res.camera_basis, np.eye(3))
    assert np.allclose(res.camera_position, [0.1, -0.05, 0.4])


def test_projection_matrix_matches_bounds():
    res = OffAxisProjector().project([0.1, -0.05, 0.4], _screen(), NEAR, FAR)
    assert np.allclose(res.projection, frustum_matrix(*res.bounds))
    # A point on the near plane at the left/bottom bound maps to clip x=y=-1.
    p = np.array([res.left, res.bottom, -NEAR, 1.0])
    clip = res.projection @ p
    assert np.allclose(clip[:3] / clip[3], [-1.0, -1.0, -1.0])


@pytest.mark.parametrize("eye", [[0.0, 0.0, 0.0], [0.1, 0.1, -0.2], [0.0, 0.0, 1e-9], [0.0, 0.0, float("nan")]])
def test_eye_on_or_behind_screen_fails(eye):
    projector = OffAxisProjector()
    ok = projector.project([0.0, 0.0, 0.5], _screen(), NEAR, FAR)
    res = projector.project(eye, _screen(), NEAR, FAR)
    assert not res.ok
    assert res.reason == "eye behind screen or too close"
    assert res.projection is None
    assert projector.last_result is ok
    with pytest.raises(ProjectionError):
        res.raise_for_status()


def test_clamp_near_keeps_near_plane_in_front_of_screen():
    eye = [0.0, 0.0, 0.03]
    unclamped = OffAxisProjector(clamp_near=False).project(eye, _screen(), NEAR, FAR)
    clamped = OffAxisProjector(clamp_near=True).project(eye, _screen(), NEAR, FAR)
    assert unclamped.near == NEAR
    assert clamped.near == pytest.approx(0.99 * 0.03)

    far_eye = OffAxisProjector(clamp_near=True).project([0.0, 0.0, 0.6], _screen(), NEAR, FAR)
    assert far_eye.near == NEAR


def test_rotated_screen_uses_its_own_basis():
    # Screen facing +x, eye in front of it.
    screen = _screen(
        right=np.array([0.0, 0.0, -1.0]),
        up=np.array([0.0, 1.0, 0.0]),
        normal=np.array([1.0, 0.0, 0.0]),
    )
    res = OffAxisProjector().project([0.5, 0.0, 0.0], screen, NEAR, FAR)
    assert res.ok
    assert res.distance == pytest.approx(0.5)
    assert res.left == pytest.approx(-res.right)
    assert np.allclose(res.camera_basis, screen.basis())


def test_look_at_matches_parallel_bounds_for_default_screen():
    # Sign convention check: for a screen in z=0 facing +z both models agree
    # on the bounds; they differ in camera pose and distance handling.
    eye = [0.08, 0.03, 0.45]
    parallel = OffAxisProjector("parallel").project(eye, _screen(), NEAR, FAR)
    look_at = OffAxisProjector("look_at").project(eye, _screen(), NEAR, FAR)
    assert look_at.bounds == pytest.approx(parallel.bounds)
    assert np.allclose(look_at.camera_position, eye)


def test_look_at_ignores_screen_offset():
    # The head-follows model assumes the screen sits at the origin; the
    # parallel model accounts for the actual screen position.
    moved = _screen(center=np.array([0.0, 0.0, -0.1]))
    eye = [0.0, 0.0, 0.5]
    parallel = OffAxisProjector("parallel").project(eye, moved, NEAR, FAR)
    look_at = OffAxisProjector("look_at").project(eye, moved, NEAR, FAR)
    assert parallel.distance == pytest.approx(0.6)
    assert look_at.distance == pytest.approx(0.5)


def test_look_at_depth_factor_damps_distance():
    projector = OffAxisProjector("look_at", depth_factor=0.0, base_distance=0.5)
    res = projector.project([0.1, 0.0, 0.9], _screen(), NEAR, FAR)
    assert res.distance == pytest.approx(0.5)
    assert np.allclose(res.camera_position, [0.1, 0.0, 0.5])
    scale = NEAR / 0.5
    assert res.left == pytest.approx((-0.3 - 0.1) * scale)


def test_look_at_rejects_close_head():
    res = OffAxisProjector("look_at").project([0.0, 0.0, 0.04], _screen(), NEAR, FAR)
    assert not res.ok


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        OffAxisProjector("fisheye")


@pytest.mark.parametrize("mode", ["parallel", "look_at"])
@pytest.mark.parametrize("near, far", [(0.0, FAR), (-0.1, FAR), (0.5, 0.5), (1.0, 0.5), (float("nan"), FAR)])
def test_invalid_clip_planes_are_rejected(mode, near, far):
    projector = OffAxisProjector(mode)
    with pytest.raises(ValueError, match="0 < near < far"):
        projector.project([0.0, 0.0, 0.5], _screen(), near, far)
    assert projector.last_result is None
