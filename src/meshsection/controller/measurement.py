"""
Measurement Controller
Routes clicks to the measurement point picker and keeps the session's current
measurement in sync with the picked points.
"""
import logging
from typing import Optional, Sequence

import numpy.typing as npt

from meshsection.controller.events import ClickOutcome
from meshsection.model.camera import Camera, Viewport
from meshsection.model.measure import DistanceMeasurer, Measurement
from meshsection.model.picking import MarkerFactory, PointPicker
from meshsection.model.state import ViewerSession

logger = logging.getLogger(__name__)


class MeasurementController:
    def __init__(self, session: ViewerSession, marker_factory: Optional[MarkerFactory] = None) -> None:
        self.session = session
        if marker_factory is not None:
            self.session.measure_picker.marker_factory = marker_factory

    @property
    def picker(self) -> PointPicker:
        return self.session.measure_picker

    @property
    def measurement(self) -> Optional[Measurement]:
        return self.session.measurement

    def set_enabled(self, enabled: bool) -> None:
        self.session.measurement_enabled = enabled
        if not enabled:
            self.clear()
        logger.info(f"Measurement {'enabled' if enabled else 'disabled'}.")

    def clear(self) -> None:
        self.picker.clear_points()
        self.session.measurement = None

    def handle_click(self, screen_xy: Sequence[float], camera: Camera, viewport: Viewport) -> ClickOutcome:
        if not self.session.measurement_enabled:
            return ClickOutcome.IGNORED

        position = PointPicker.pick(screen_xy, self.session.meshes.pickable(), camera, viewport)
        if position is None:
            return ClickOutcome.MISSED

        return self.accept_point(position, camera, viewport)

    def accept_point(self, position: npt.ArrayLike, camera: Camera, viewport: Viewport) -> ClickOutcome:
        """
        The second point creates a measurement; a click after that clears the
        old measurement and starts over with the new point.
        """
        if self.picker.is_full:
            self.clear()
        self.picker.add_point(position)

        if not self.picker.is_full:
            return ClickOutcome.POINT_ADDED

        self.session.measurement = DistanceMeasurer.measure_points(self.picker.positions, camera, viewport)
        return ClickOutcome.MEASURED

    def undo_last_point(self) -> None:
        if self.picker.remove_last_point() is not None:
            self.session.measurement = None

    def refresh_label(self, camera: Camera, viewport: Viewport) -> Optional[Measurement]:
        """Re-anchor the label after the camera moved."""
        if self.session.measurement is None:
            return None
        return DistanceMeasurer.reproject(self.session.measurement, camera, viewport)
