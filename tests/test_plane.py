import numpy as np
import pytest

from meshsection.model.errors import DegenerateInputError
from meshsection.model.geometry import Axis
from meshsection.model.plane import Plane


def test_default_plane_is_xz():
    plane = Plane()
    assert np.allclose(plane.normal, [0.0, 1.0, 0.0])
    assert plane.offset == 0.0


def test_normal_is_normalized_and_zero_rejected():
    plane = Plane(normal=(0.0, 0.0, 5.0), offset=2.0)
    assert np.allclose(plane.normal, [0.0, 0.0, 1.0])
    with pytest.raises(DegenerateInputError):
        plane.set_normal((0.0, 0.0, 0.0))


def test_set_axis_resets_offset():
    plane = Plane(offset=12.0)
    plane.set_axis(Axis.X)
    assert np.allclose(plane.normal, [1.0, 0.0, 0.0])
    assert plane.offset == 0.0
    plane.set_axis("Z")
    assert np.allclose(plane.normal, [0.0, 0.0, 1.0])


def test_signed_distance_scalar_and_array():
    plane = Plane(normal=(0.0, 1.0, 0.0), offset=2.0)
    assert plane.signed_distance((0.0, 5.0, 0.0)) == pytest.approx(3.0)
    dist = plane.signed_distance(np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 3.0]]))
    assert np.allclose(dist, [-2.0, 0.0])


class TestTwoPointDerivation:
    def test_plane_contains_both_points(self):
        plane = Plane()
        p1, p2 = np.array([-3.0, 1.0, 2.0]), np.array([4.0, 2.0, 2.5])
        plane.derive_from_two_points(p1, p2, view_direction=(0.0, 0.0, -1.0))

        assert np.linalg.norm(plane.normal) == pytest.approx(1.0)
        assert abs(np.dot(plane.normal, p2 - p1)) < 1e-9
        assert abs(plane.signed_distance((p1 + p2) / 2.0)) < 1e-9
        assert abs(plane.signed_distance(p1)) < 1e-9
        assert abs(plane.signed_distance(p2)) < 1e-9

    def test_plane_contains_view_direction(self):
        plane = Plane()
        view = np.array([0.0, 0.0, -1.0])
        plane.derive_from_two_points((0.0, 0.0, 0.0), (10.0, 0.0, 0.0), view)
        # Horizontal drag seen from the front gives a horizontal cutting plane
        assert np.allclose(np.abs(plane.normal), [0.0, 1.0, 0.0])
        assert abs(np.dot(plane.normal, view)) < 1e-9

    def test_view_along_segment_falls_back_to_world_up(self):
        plane = Plane()
        plane.derive_from_two_points((0.0, 0.0, 0.0), (0.0, 0.0, 10.0), view_direction=(0.0, 0.0, 1.0))
        assert abs(np.dot(plane.normal, [0.0, 0.0, 1.0])) < 1e-9
        assert abs(np.dot(plane.normal, [0.0, 1.0, 0.0])) < 1e-9

    def test_coincident_points_rejected(self):
        plane = Plane(normal=(1.0, 0.0, 0.0), offset=3.0)
        with pytest.raises(DegenerateInputError):
            plane.derive_from_two_points((1.0, 1.0, 1.0), (1.0, 1.0, 1.0), (0.0, 0.0, -1.0))
        assert np.allclose(plane.normal, [1.0, 0.0, 0.0])
        assert plane.offset == 3.0

    def test_segment_parallel_to_view_and_up_rejected(self):
        plane = Plane()
        with pytest.raises(DegenerateInputError):
            plane.derive_from_two_points((0.0, 0.0, 0.0), (0.0, 5.0, 0.0), view_direction=(0.0, -1.0, 0.0))
        assert np.allclose(plane.normal, [0.0, 1.0, 0.0])


def test_basis_is_right_handed():
    plane = Plane(normal=(1.0, 1.0, 0.0))
    u, v = plane.basis((1.0, 0.0, 0.0))
    assert np.allclose(np.cross(u, v), plane.normal)
    assert abs(np.dot(u, plane.normal)) < 1e-12


def test_key_changes_with_offset():
    plane = Plane()
    key = plane.key()
    plane.set_offset(1.5)
    assert plane.key() != key
    assert plane.copy().key() == plane.key()
