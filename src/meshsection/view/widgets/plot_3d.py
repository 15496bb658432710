"""
3D Visualization Widget (PyVista Wrapper)
Main viewport: meshes, the cutting plane overlay, measurement line + label and
the picture-in-picture section view.
"""

from __future__ import annotations

from typing import Dict, Optional

import logging

from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel
from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QResizeEvent

from pyvistaqt import QtInteractor
import pyvista as pv
from vtkmodules.vtkInteractionStyle import vtkInteractorStyleUser

from meshsection.config import (
    BACKGROUND_COLOR, MAIN_CAMERA_POSITION, MEASUREMENT_COLOR, PLANE_HELPER_SIZE, SECTION_COLOR
)
from meshsection.model.camera import Camera, Viewport
from meshsection.model.measure import Measurement
from meshsection.model.mesh import MeshSet
from meshsection.model.plane import Plane
from meshsection.view.widgets.section_view import SectionViewWidget
from meshsection.view.widgets.vtk_utils import VtkUtils

logger = logging.getLogger(__name__)


class MeshViewerWidget(QWidget):
    # Left click in picking mode: pixel position, origin top-left
    clicked = Signal(float, float)
    # Camera moved (orbit, zoom, resize)
    camera_changed = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self._init_plotter()

        # --- Actors state ---
        self._mesh_actors: Dict[str, pv.Actor] = {}
        self._plane_actor: Optional[pv.Actor] = None
        self._measurement_actor: Optional[pv.Actor] = None
        self._shown_measurement: Optional[Measurement] = None

        self._picking: bool = False

        # --- Overlays ---
        self.measurement_label = QLabel(self)
        self.measurement_label.setStyleSheet(
            "QLabel { background-color: rgba(0, 0, 0, 180); color: white; padding: 4px 8px; "
            "border: 1px solid #ff0000; border-radius: 4px; }"
        )
        self.measurement_label.hide()

        self.section_view = SectionViewWidget(self)
        self.section_view.hide()

        self._attach_observers()

        # Debounce label re-anchoring while orbiting
        self._camera_timer = QTimer(self)
        self._camera_timer.setSingleShot(True)
        self._camera_timer.setInterval(30)
        self._camera_timer.timeout.connect(self.camera_changed.emit)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def current_camera(self) -> Camera:
        return VtkUtils.camera_from_plotter(self.plotter)

    def viewport(self) -> Viewport:
        return VtkUtils.viewport_of(self.plotter)

    def apply_camera(self, camera: Camera) -> None:
        VtkUtils.apply_camera(self.plotter, camera)
        self.plotter.render()
        self._schedule_camera_changed()

    def sync_meshes(self, meshes: MeshSet, render: bool = True) -> None:
        """Adds/removes mesh actors to match the mesh set and applies opacity."""
        current_ids = {m.id for m in meshes}

        for mesh_id in list(self._mesh_actors):
            if mesh_id not in current_ids:
                self.plotter.remove_actor(self._mesh_actors.pop(mesh_id), render=False)

        for mesh in meshes:
            actor = self._mesh_actors.get(mesh.id)
            if actor is None:
                actor = self.plotter.add_mesh(
                    VtkUtils.mesh_to_polydata(mesh),
                    color=mesh.color,
                    smooth_shading=True,
                    opacity=mesh.opacity,
                    reset_camera=False,
                    render=False,
                    name=mesh.id,
                )
                # Both faces visible, as scanned surfaces are often open
                actor.prop.backface_culling = False
                self._mesh_actors[mesh.id] = actor
            actor.prop.opacity = mesh.opacity
            actor.SetVisibility(mesh.visible)

        if render:
            self.plotter.render()

    def update_plane_helper(self, plane: Plane, visible: bool) -> None:
        """Wireframe square showing the cutting plane in the main view."""
        if self._plane_actor is not None:
            self.plotter.remove_actor(self._plane_actor, render=False)
            self._plane_actor = None

        if visible:
            self._plane_actor = self.plotter.add_mesh(
                VtkUtils.plane_to_polydata(plane, PLANE_HELPER_SIZE),
                color=SECTION_COLOR,
                style="wireframe",
                line_width=1,
                lighting=False,
                pickable=False,
                reset_camera=False,
                render=False,
            )
        self.plotter.render()

    def update_measurement(self, measurement: Optional[Measurement]) -> None:
        """Replace the measurement line and label if the measurement changed."""
        if measurement is not self._shown_measurement:
            if self._measurement_actor is not None:
                self.plotter.remove_actor(self._measurement_actor, render=False)
                self._measurement_actor = None

            if measurement is not None:
                self._measurement_actor = self.plotter.add_mesh(
                    pv.Line(tuple(measurement.p1), tuple(measurement.p2)),
                    color=MEASUREMENT_COLOR,
                    line_width=2,
                    lighting=False,
                    pickable=False,
                    reset_camera=False,
                    render=False,
                )
            self._shown_measurement = measurement

        self._place_label(measurement)
        self.plotter.render()

    def set_picking(self, enabled: bool) -> None:
        """Picking mode: left clicks pick points instead of orbiting."""
        if enabled == self._picking:
            return
        self._picking = enabled
        if enabled:
            self.plotter.iren.interactor.SetInteractorStyle(vtkInteractorStyleUser())
            self.plotter.setCursor(Qt.CrossCursor)
        else:
            self.plotter.enable_trackball_style()
            self.plotter.unsetCursor()

    def show_section_view(self, visible: bool) -> None:
        self.section_view.setVisible(visible)
        self._place_section_view()

    def close_plotters(self) -> None:
        self.section_view.close_plotter()
        self.plotter.close()

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    def _place_label(self, measurement: Optional[Measurement]) -> None:
        if measurement is None:
            self.measurement_label.hide()
            return
        self.measurement_label.setText(measurement.label)
        self.measurement_label.adjustSize()

        # Anchor is in render-window pixels; Qt widgets use logical pixels
        ratio = self.plotter.devicePixelRatioF() or 1.0
        x, y = measurement.anchor
        self.measurement_label.move(int(x / ratio), int(y / ratio))
        self.measurement_label.show()
        self.measurement_label.raise_()

    def _place_section_view(self) -> None:
        margin = 12
        view = self.section_view
        view.move(self.width() - view.width() - margin, self.height() - view.height() - margin)
        view.raise_()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._place_section_view()
        self._schedule_camera_changed()

    def _init_plotter(self) -> None:
        self.plotter.set_background(BACKGROUND_COLOR)
        self.plotter.add_axes()
        self.plotter.show_grid(color="#444444")
        self.plotter.camera.position = MAIN_CAMERA_POSITION
        self.plotter.camera.focal_point = (0.0, 0.0, 0.0)
        self.plotter.camera.up = (0.0, 1.0, 0.0)
        self.plotter.enable_trackball_style()

    def _attach_observers(self) -> None:
        iren = self.plotter.iren
        iren.add_observer("LeftButtonPressEvent", lambda *_: self._on_left_press())
        iren.add_observer("EndInteractionEvent", lambda *_: self._schedule_camera_changed())
        iren.add_observer("MouseWheelForwardEvent", lambda *_: self._schedule_camera_changed())
        iren.add_observer("MouseWheelBackwardEvent", lambda *_: self._schedule_camera_changed())
        iren.add_observer("InteractionEvent", lambda *_: self._schedule_camera_changed())

    def _on_left_press(self) -> None:
        if not self._picking:
            return
        x, y = VtkUtils.event_position_top_left(self.plotter)
        logger.debug(f"Viewport click at ({x:.0f}, {y:.0f}).")
        self.clicked.emit(x, y)

    def _schedule_camera_changed(self) -> None:
        self._camera_timer.start()
