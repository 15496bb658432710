import numpy as np
import pytest

from meshsection.model.camera import Camera, ProjectionType, Viewport


class TestViewport:
    def test_ndc_mapping(self):
        vp = Viewport(200, 100)
        assert vp.to_ndc(0.0, 0.0) == (-1.0, 1.0)
        assert vp.to_ndc(200.0, 100.0) == (1.0, -1.0)
        assert vp.to_ndc(100.0, 50.0) == (0.0, 0.0)

    def test_pixels_inverse_of_ndc(self):
        vp = Viewport(640, 480)
        x, y = vp.to_pixels(*vp.to_ndc(123.0, 45.0))
        assert x == pytest.approx(123.0)
        assert y == pytest.approx(45.0)
        assert vp.aspect == pytest.approx(640 / 480)


def test_direction_and_axes():
    cam = Camera(position=(0.0, 0.0, 10.0))
    assert np.allclose(cam.direction, [0.0, 0.0, -1.0])
    right, up, forward = cam.axes()
    assert np.allclose(right, [1.0, 0.0, 0.0])
    assert np.allclose(up, [0.0, 1.0, 0.0])


def test_axes_with_up_parallel_to_view():
    cam = Camera(position=(0.0, 10.0, 0.0), up=(0.0, 1.0, 0.0))
    right, up, forward = cam.axes()
    assert abs(np.dot(right, forward)) < 1e-12
    assert np.linalg.norm(right) == pytest.approx(1.0)


def test_perspective_projects_focal_point_to_center():
    cam = Camera(position=(5.0, 3.0, 10.0), focal_point=(1.0, 1.0, 1.0))
    ndc = cam.project((1.0, 1.0, 1.0))
    assert ndc[0] == pytest.approx(0.0, abs=1e-9)
    assert ndc[1] == pytest.approx(0.0, abs=1e-9)
    assert -1.0 < ndc[2] < 1.0


def test_orthographic_projection_extents(top_ortho_camera):
    ndc = top_ortho_camera.project((25.0, -50.0, 0.0))
    assert ndc[0] == pytest.approx(0.5)
    assert ndc[1] == pytest.approx(-1.0)


def test_unproject_inverts_project():
    cam = Camera(position=(3.0, 4.0, 20.0), focal_point=(0.0, 1.0, 0.0), aspect=1.5)
    point = np.array([1.0, 2.0, -3.0])
    assert np.allclose(cam.unproject(cam.project(point)), point)


def test_perspective_ray_starts_at_eye():
    cam = Camera(position=(0.0, 0.0, 10.0))
    origin, direction = cam.ray_from_ndc(0.0, 0.0)
    assert np.allclose(origin, [0.0, 0.0, 10.0])
    assert np.allclose(direction, [0.0, 0.0, -1.0])


def test_orthographic_rays_are_parallel(top_ortho_camera):
    o1, d1 = top_ortho_camera.ray_from_ndc(-0.5, 0.0)
    o2, d2 = top_ortho_camera.ray_from_ndc(0.5, 0.5)
    assert np.allclose(d1, d2)
    assert np.allclose(d1, [0.0, 0.0, -1.0])
    assert o1[0] == pytest.approx(-25.0)
    assert o2[1] == pytest.approx(25.0)


def test_copy_and_state():
    cam = Camera(projection=ProjectionType.ORTHOGRAPHIC)
    clone = cam.copy()
    assert clone.state() == cam.state()
    clone.position[0] = 42.0
    assert clone.state() != cam.state()
