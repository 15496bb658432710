"""
Cross-Section View (Picture-in-Picture)
A small orthographic view looking straight at the cutting plane, showing the
contour lines of every mesh.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QFrame, QLabel, QVBoxLayout, QWidget

from pyvistaqt import QtInteractor
import pyvista as pv

from meshsection.config import (
    PLANE_HELPER_SIZE, SECTION_BACKGROUND_COLOR, SECTION_CAMERA_FAR, SECTION_CAMERA_NEAR,
    SECTION_COLOR, SECTION_VIEW_SIZE
)
from meshsection.model.camera import Camera, ProjectionType
from meshsection.model.plane import Plane
from meshsection.model.slicer import Contour
from meshsection.view.widgets.vtk_utils import VtkUtils

logger = logging.getLogger(__name__)


class SectionViewWidget(QFrame):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setFixedSize(SECTION_VIEW_SIZE, SECTION_VIEW_SIZE + 24)
        self.setStyleSheet("QFrame { background-color: #1a1a1a; border: 2px solid #00ff00; border-radius: 4px; }")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(2, 2, 2, 2)
        layout.setSpacing(0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.plotter.set_background(SECTION_BACKGROUND_COLOR)
        self.plotter.enable_parallel_projection()
        self.plotter.enable_image_style()
        layout.addWidget(self.plotter)

        label = QLabel("Cross-Section View")
        label.setAlignment(Qt.AlignCenter)
        label.setStyleSheet("color: #00ff00; border: none;")
        layout.addWidget(label)

        self.camera = Camera(
            position=(0.0, 0.0, 100.0),
            projection=ProjectionType.ORTHOGRAPHIC,
            near=SECTION_CAMERA_NEAR,
            far=SECTION_CAMERA_FAR,
        )

        # Drawables owned by this view, replaced on every update
        self._contour_actors: List[pv.Actor] = []
        self._plane_actor: Optional[pv.Actor] = None

    def update_section(self, contours: Dict[str, Contour], plane: Plane) -> None:
        """
        Redraws the contours. `self.camera` must already be framed by the
        caller; it is applied as-is.
        """
        self._clear_actors()

        for contour in contours.values():
            if contour.is_empty:
                continue
            lines = VtkUtils.segments_to_polydata(contour.segments)
            actor = self.plotter.add_mesh(
                lines,
                color=SECTION_COLOR,
                line_width=3,
                lighting=False,
                reset_camera=False,
                render=False,
            )
            self._contour_actors.append(actor)

        # Faint backdrop so an empty section still shows where the plane is
        self._plane_actor = self.plotter.add_mesh(
            VtkUtils.plane_to_polydata(plane, PLANE_HELPER_SIZE * 2.0),
            color=SECTION_COLOR,
            opacity=0.05,
            lighting=False,
            reset_camera=False,
            render=False,
        )

        VtkUtils.apply_camera(self.plotter, self.camera, reset_clipping=False)
        self.plotter.render()

    def _clear_actors(self) -> None:
        for actor in self._contour_actors:
            self.plotter.remove_actor(actor, render=False)
        self._contour_actors.clear()
        if self._plane_actor is not None:
            self.plotter.remove_actor(self._plane_actor, render=False)
            self._plane_actor = None

    def close_plotter(self) -> None:
        self._clear_actors()
        self.plotter.close()
