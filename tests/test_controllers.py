"""Click-level behavior of the cross-section and measurement tools, without rendering."""

import numpy as np
import pytest

from meshsection.controller.cross_section import CrossSectionController
from meshsection.controller.events import ClickOutcome
from meshsection.controller.measurement import MeasurementController
from meshsection.model.camera import Camera, ProjectionType
from meshsection.model.geometry import Axis
from meshsection.model.mesh import SurfaceMesh
from meshsection.model.state import ViewerSession
from tests.shapes import box_triangles


class RecordingFactory:
    """Marker factory that remembers every marker it created."""

    def __init__(self):
        self.markers = []

    def __call__(self, position):
        marker = _Marker(position)
        self.markers.append(marker)
        return marker


class _Marker:
    def __init__(self, position):
        self.position = position
        self.dispose_calls = 0

    def dispose(self):
        self.dispose_calls += 1


@pytest.fixture
def session(ground_mesh):
    s = ViewerSession()
    s.meshes.add(ground_mesh)
    return s


class TestMeasurementController:
    def test_third_click_starts_new_measurement(self, session, top_ortho_camera, viewport):
        factory = RecordingFactory()
        ctrl = MeasurementController(session, marker_factory=factory)
        ctrl.set_enabled(True)
        assert session.is_picking

        assert ctrl.handle_click((50, 50), top_ortho_camera, viewport) == ClickOutcome.POINT_ADDED
        assert ctrl.handle_click((51, 50), top_ortho_camera, viewport) == ClickOutcome.MEASURED
        assert ctrl.measurement.distance == pytest.approx(1.0)
        assert ctrl.measurement.label == "1.00 mm"
        assert ctrl.measurement.anchor == pytest.approx((50.5, 50.0))

        assert ctrl.handle_click((52, 50), top_ortho_camera, viewport) == ClickOutcome.POINT_ADDED
        assert ctrl.measurement is None
        assert len(ctrl.picker) == 1
        assert np.allclose(ctrl.picker.positions[0], [2.0, 0.0, 0.0])
        assert [m.dispose_calls for m in factory.markers] == [1, 1, 0]

    def test_disable_clears(self, session, top_ortho_camera, viewport):
        factory = RecordingFactory()
        ctrl = MeasurementController(session, marker_factory=factory)
        ctrl.set_enabled(True)
        ctrl.handle_click((40, 50), top_ortho_camera, viewport)
        ctrl.handle_click((60, 50), top_ortho_camera, viewport)
        assert ctrl.measurement.distance == pytest.approx(20.0)

        ctrl.set_enabled(False)
        assert ctrl.measurement is None
        assert len(ctrl.picker) == 0
        assert all(m.dispose_calls == 1 for m in factory.markers)
        assert ctrl.handle_click((50, 50), top_ortho_camera, viewport) == ClickOutcome.IGNORED

    def test_miss_adds_nothing(self, top_ortho_camera, viewport):
        ctrl = MeasurementController(ViewerSession())
        ctrl.set_enabled(True)
        assert ctrl.handle_click((50, 50), top_ortho_camera, viewport) == ClickOutcome.MISSED
        assert len(ctrl.picker) == 0

    def test_undo_removes_measurement(self, session, top_ortho_camera, viewport):
        ctrl = MeasurementController(session)
        ctrl.set_enabled(True)
        ctrl.handle_click((40, 50), top_ortho_camera, viewport)
        ctrl.handle_click((60, 50), top_ortho_camera, viewport)
        ctrl.undo_last_point()
        assert ctrl.measurement is None
        assert len(ctrl.picker) == 1

    def test_label_follows_camera(self, session, top_ortho_camera, viewport):
        ctrl = MeasurementController(session)
        ctrl.set_enabled(True)
        ctrl.handle_click((40, 50), top_ortho_camera, viewport)
        ctrl.handle_click((60, 60), top_ortho_camera, viewport)
        top_ortho_camera.position = np.array([10.0, 0.0, 100.0])
        top_ortho_camera.look_at((10.0, 0.0, 0.0))
        measurement = ctrl.refresh_label(top_ortho_camera, viewport)
        assert measurement.anchor == pytest.approx((40.0, 55.0))


class TestCrossSectionController:
    def test_two_clicks_set_plane(self, session, top_ortho_camera, viewport):
        factory = RecordingFactory()
        ctrl = CrossSectionController(session, marker_factory=factory)
        ctrl.set_enabled(True)
        assert ctrl.status_message() == ""

        ctrl.set_setting_mode(True)
        assert session.is_picking
        assert ctrl.status_message() == "Click 2 points on mesh to set plane"

        assert ctrl.handle_click((40, 50), top_ortho_camera, viewport) == ClickOutcome.POINT_ADDED
        assert ctrl.status_message() == "Click 1 more point"
        assert ctrl.handle_click((60, 50), top_ortho_camera, viewport) == ClickOutcome.PLANE_SET

        normal, offset = ctrl.plane_parameters()
        assert np.allclose(np.abs(normal), [0.0, 1.0, 0.0])
        assert offset == pytest.approx(0.0)
        assert not session.section_setting_mode
        assert not session.is_picking
        # Points stay on screen until the next selection
        assert ctrl.point_count == 2
        assert all(m.dispose_calls == 0 for m in factory.markers)

        ctrl.set_setting_mode(True)
        assert ctrl.point_count == 0
        assert all(m.dispose_calls == 1 for m in factory.markers)

    def test_clicks_ignored_outside_setting_mode(self, session, top_ortho_camera, viewport):
        ctrl = CrossSectionController(session)
        assert ctrl.handle_click((50, 50), top_ortho_camera, viewport) == ClickOutcome.IGNORED
        ctrl.set_enabled(True)
        assert ctrl.handle_click((50, 50), top_ortho_camera, viewport) == ClickOutcome.IGNORED

    def test_coincident_points_keep_previous_plane(self, session):
        ctrl = CrossSectionController(session)
        ctrl.set_enabled(True)
        ctrl.set_position(3.0)
        ctrl.set_setting_mode(True)

        view = (0.0, 0.0, -1.0)
        assert ctrl.accept_point((1.0, 1.0, 0.0), view) == ClickOutcome.POINT_ADDED
        assert ctrl.accept_point((1.0, 1.0, 0.0), view) == ClickOutcome.PLANE_REJECTED
        assert session.plane.offset == 3.0
        assert np.allclose(session.plane.normal, [0.0, 1.0, 0.0])
        assert session.section_setting_mode
        assert ctrl.point_count == 0

    def test_axis_and_position(self, session):
        ctrl = CrossSectionController(session)
        ctrl.set_enabled(True)
        ctrl.set_position(12.0)
        ctrl.set_axis(Axis.Z)
        normal, offset = ctrl.plane_parameters()
        assert np.allclose(normal, [0.0, 0.0, 1.0])
        assert offset == 0.0

    def test_axis_change_clears_partial_selection(self, session):
        ctrl = CrossSectionController(session)
        ctrl.set_enabled(True)
        ctrl.set_setting_mode(True)
        ctrl.accept_point((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        ctrl.set_axis("x")
        assert ctrl.point_count == 0

    def test_disable_leaves_setting_mode(self, session):
        ctrl = CrossSectionController(session)
        ctrl.set_enabled(True)
        ctrl.set_setting_mode(True)
        ctrl.accept_point((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        ctrl.set_enabled(False)
        assert not session.section_setting_mode
        assert ctrl.point_count == 0

    def test_undo_last_point(self, session):
        ctrl = CrossSectionController(session)
        ctrl.set_enabled(True)
        ctrl.set_setting_mode(True)
        ctrl.accept_point((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        ctrl.undo_last_point()
        assert ctrl.point_count == 0

    def test_contour_and_section_framing(self):
        session = ViewerSession()
        session.meshes.add(SurfaceMesh(box_triangles(1.0)))
        ctrl = CrossSectionController(session)
        ctrl.set_enabled(True)

        assert ctrl.contour().perimeter == pytest.approx(8.0)
        camera = Camera(projection=ProjectionType.ORTHOGRAPHIC)
        assert ctrl.frame_section(camera)
        assert np.allclose(camera.position, [0.0, 1000.0, 0.0])

        ctrl.set_position(5.0)
        assert ctrl.contour().is_empty
        before = camera.state()
        assert not ctrl.frame_section(camera)
        assert camera.state() == before
        assert session.slice_cache.computations == 2


def test_sessions_are_independent():
    a, b = ViewerSession(), ViewerSession()
    a.plane.set_offset(4.0)
    a.meshes.add(SurfaceMesh(box_triangles()))
    assert b.plane.offset == 0.0
    assert len(b.meshes) == 0

    a.measurement_enabled = True
    a.reset()
    assert not a.is_picking
    assert len(a.meshes) == 0
