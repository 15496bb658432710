import numpy as np
import pytest

from meshsection.model.camera import Camera, Viewport
from meshsection.model.mesh import SurfaceMesh
from meshsection.model.picking import CapacityPolicy, NullMarker, PickedPoint, PointPicker
from tests.shapes import square_triangles


class CountingMarker:
    def __init__(self, position):
        self.position = position
        self.dispose_calls = 0

    def dispose(self):
        self.dispose_calls += 1


class TestPick:
    def test_center_pixel_hits_origin(self, ground_mesh, top_ortho_camera, viewport):
        hit = PointPicker.pick((50, 50), [ground_mesh], top_ortho_camera, viewport)
        assert np.allclose(hit, [0.0, 0.0, 0.0])

    def test_pixel_offsets_map_to_world_units(self, ground_mesh, top_ortho_camera, viewport):
        hit = PointPicker.pick((75, 25), [ground_mesh], top_ortho_camera, viewport)
        assert np.allclose(hit, [25.0, 25.0, 0.0])

    def test_closest_surface_wins(self, ground_mesh, top_ortho_camera, viewport):
        raised = SurfaceMesh(square_triangles(100.0, z=10.0))
        hit = PointPicker.pick((50, 50), [ground_mesh, raised], top_ortho_camera, viewport)
        assert hit[2] == pytest.approx(10.0)

    def test_miss_returns_none(self, top_ortho_camera, viewport):
        small = SurfaceMesh(square_triangles(1.0, center=(0.0, 0.0)))
        assert PointPicker.pick((5, 5), [small], top_ortho_camera, viewport) is None
        assert PointPicker.pick((50, 50), [], top_ortho_camera, viewport) is None

    def test_empty_viewport(self, ground_mesh, top_ortho_camera):
        assert PointPicker.pick((0, 0), [ground_mesh], top_ortho_camera, Viewport(0, 0)) is None

    def test_perspective_pick(self, ground_mesh):
        camera = Camera(position=(0.0, 0.0, 50.0))
        hit = PointPicker.pick((320, 240), [ground_mesh], camera, Viewport(640, 480))
        assert np.allclose(hit, [0.0, 0.0, 0.0], atol=1e-9)


class TestPointList:
    def test_markers_created_and_disposed_once(self):
        markers = []

        def factory(position):
            markers.append(CountingMarker(position))
            return markers[-1]

        picker = PointPicker(CapacityPolicy.RESET_ON_OVERFLOW, marker_factory=factory)
        picker.add_point((0.0, 0.0, 0.0))
        picker.add_point((1.0, 0.0, 0.0))
        assert picker.is_full
        with pytest.raises(ValueError):
            picker.add_point((2.0, 0.0, 0.0))

        picker.accept((3.0, 0.0, 0.0))
        assert [m.dispose_calls for m in markers] == [1, 1, 0]
        assert len(picker) == 1
        assert np.allclose(picker.positions[0], [3.0, 0.0, 0.0])

        picker.clear_points()
        picker.clear_points()
        assert [m.dispose_calls for m in markers] == [1, 1, 1]

    def test_remove_last_point(self):
        picker = PointPicker(CapacityPolicy.AUTO_CONSUME)
        assert picker.remove_last_point() is None
        picker.add_point((0.0, 0.0, 0.0))
        second = picker.add_point((1.0, 0.0, 0.0))
        removed = picker.remove_last_point()
        assert removed is second
        assert removed.is_disposed
        assert picker.count == 1

    def test_points_are_ordered_copies(self):
        source = np.array([1.0, 2.0, 3.0])
        picker = PointPicker(CapacityPolicy.AUTO_CONSUME)
        point = picker.add_point(source)
        source[0] = 99.0
        assert point.position[0] == 1.0
        assert picker.add_point((0.0, 0.0, 0.0)).order == point.order + 1

    def test_default_marker_and_dispose_idempotent(self):
        marker = NullMarker(np.zeros(3))
        point = PickedPoint(np.zeros(3), marker, order=0)
        point.dispose()
        point.dispose()
        assert marker.disposed
        assert point.is_disposed

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            PointPicker(CapacityPolicy.AUTO_CONSUME, capacity=0)


def test_policy_flags():
    assert CapacityPolicy.AUTO_CONSUME.exits_when_full
    assert not CapacityPolicy.RESET_ON_OVERFLOW.exits_when_full
