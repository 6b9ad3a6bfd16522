import pytest

from seatmap.core.camera import Camera


def test_zoom_in_then_out_round_trips() -> None:
    camera = Camera()
    assert camera.zoom_in() == 1.2
    assert camera.zoom_out() == 1.0


def test_zoom_is_clamped_to_bounds() -> None:
    camera = Camera()
    for _ in range(20):
        camera.zoom_in()
    assert camera.zoom == 3.0
    assert not camera.can_zoom_in()
    for _ in range(20):
        camera.zoom_out()
    assert camera.zoom == 0.5
    assert not camera.can_zoom_out()
    assert camera.zoom_by(-10.0) == 0.5


def test_small_zoom_step_is_used_by_zoom_by() -> None:
    camera = Camera()
    camera.zoom_by(camera.zoom_step)
    assert camera.zoom == pytest.approx(1.1)


def test_initial_zoom_is_clamped() -> None:
    assert Camera(zoom=9.0).zoom == 3.0
    assert Camera(zoom=0.1).zoom == 0.5


def test_invalid_bounds_raise() -> None:
    with pytest.raises(ValueError):
        Camera(min_zoom=0.0)
    with pytest.raises(ValueError):
        Camera(min_zoom=4.0, max_zoom=3.0)


def test_reset_view_restores_identity() -> None:
    camera = Camera()
    camera.zoom_in()
    camera.pan_by(30.0, -15.0)
    camera.reset_view()
    assert (camera.zoom, camera.pan_x, camera.pan_y) == (1.0, 0.0, 0.0)


def test_world_surface_transforms_are_inverse() -> None:
    camera = Camera(zoom=2.0, pan_x=10.0, pan_y=-40.0)
    assert camera.to_surface(5.0, 30.0) == (20.0, 20.0)
    assert camera.to_world(20.0, 20.0) == (5.0, 30.0)


def test_pan_accumulates() -> None:
    camera = Camera()
    camera.pan_by(5.0, 6.0)
    camera.pan_by(-2.0, 4.0)
    assert (camera.pan_x, camera.pan_y) == (3.0, 10.0)
