"""
Cross-Section Controller
========================
Owns the interaction logic of the cutting plane: enabling the tool, axis
presets, the position slider, two-point plane definition and the (cached)
contour of the loaded meshes.

Why is this file needed?
------------------------
The view only forwards user input here and redraws from the session
afterwards. All state lives in the ViewerSession passed in.
"""
import logging
from typing import Dict, Optional, Sequence

import numpy as np
import numpy.typing as npt

from meshsection.controller.events import ClickOutcome
from meshsection.model.camera import Camera, Viewport
from meshsection.model.errors import DegenerateInputError
from meshsection.model.framing import ViewFramer
from meshsection.model.geometry import Axis
from meshsection.model.picking import MarkerFactory, PointPicker
from meshsection.model.slicer import Contour
from meshsection.model.state import ViewerSession

logger = logging.getLogger(__name__)


class CrossSectionController:
    def __init__(
        self,
        session: ViewerSession,
        framer: Optional[ViewFramer] = None,
        marker_factory: Optional[MarkerFactory] = None,
    ) -> None:
        self.session = session
        self.framer = framer or ViewFramer()
        if marker_factory is not None:
            self.session.section_picker.marker_factory = marker_factory

    @property
    def picker(self) -> PointPicker:
        return self.session.section_picker

    @property
    def point_count(self) -> int:
        return self.picker.count

    # --- Modes ---

    def set_enabled(self, enabled: bool) -> None:
        self.session.section_enabled = enabled
        if not enabled:
            self.picker.clear_points()
            self.session.section_setting_mode = False
        logger.info(f"Cross-section {'enabled' if enabled else 'disabled'}.")

    def set_setting_mode(self, mode: bool) -> None:
        """Start (or abort) picking the two plane-defining points."""
        self.session.section_setting_mode = mode
        if mode:
            self.picker.clear_points()

    def status_message(self) -> str:
        if not self.session.section_setting_mode:
            return ""
        if self.point_count == 1:
            return "Click 1 more point"
        return "Click 2 points on mesh to set plane"

    # --- Plane edits ---

    def set_axis(self, axis: Axis) -> None:
        """Axis preset. Invalidates any in-progress two-point selection."""
        self.session.plane.set_axis(axis)
        self.picker.clear_points()

    def set_position(self, value: float) -> None:
        self.session.plane.set_offset(value)

    # --- Clicks ---

    def handle_click(self, screen_xy: Sequence[float], camera: Camera, viewport: Viewport) -> ClickOutcome:
        if not self.session.section_enabled or not self.session.section_setting_mode:
            return ClickOutcome.IGNORED

        position = PointPicker.pick(screen_xy, self.session.meshes.pickable(), camera, viewport)
        if position is None:
            return ClickOutcome.MISSED

        return self.accept_point(position, camera.direction)

    def accept_point(self, position: npt.ArrayLike, view_direction: npt.ArrayLike) -> ClickOutcome:
        """
        Add a picked point; the second point derives the plane and ends the
        setting mode. Degenerate input keeps the previous plane and restarts
        the selection.
        """
        self.picker.accept(position)
        if not self.picker.is_full:
            return ClickOutcome.POINT_ADDED

        p1, p2 = self.picker.positions
        try:
            self.session.plane.derive_from_two_points(p1, p2, view_direction)
        except DegenerateInputError as e:
            logger.warning(f"Plane not set: {e}")
            self.picker.clear_points()
            return ClickOutcome.PLANE_REJECTED

        if self.picker.policy.exits_when_full:
            self.session.section_setting_mode = False
        return ClickOutcome.PLANE_SET

    def undo_last_point(self) -> None:
        if self.session.section_setting_mode:
            self.picker.remove_last_point()

    # --- Contour ---

    def contours(self) -> Dict[str, Contour]:
        """Per-mesh contours for the current plane (cached)."""
        return self.session.slice_cache.contours(self.session.plane, self.session.meshes)

    def contour(self) -> Contour:
        return self.session.slice_cache.contour(self.session.plane, self.session.meshes)

    def frame_section(self, camera: Camera, up: Optional[npt.ArrayLike] = None) -> bool:
        """Point the section camera at the current contour."""
        contour = self.contour()
        return self.framer.frame_contour(contour.points, self.session.plane.normal, camera, up)

    def plane_parameters(self) -> tuple[npt.NDArray[np.float64], float]:
        return self.session.plane.normal.copy(), self.session.plane.offset
