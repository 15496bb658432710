"""
Point Markers
Sphere actors shown at picked points. Each marker is owned by exactly one
picked point and removes its actor when disposed.
"""
from typing import Optional

import logging
import numpy as np
import numpy.typing as npt
import pyvista as pv

from meshsection.config import MARKER_RADIUS

logger = logging.getLogger(__name__)


class ActorMarker:
    def __init__(self, plotter: pv.Plotter, position: npt.NDArray[np.float64], color: str, radius: float) -> None:
        self.plotter = plotter
        sphere = pv.Sphere(radius=radius, center=tuple(position), theta_resolution=16, phi_resolution=16)
        self._actor: Optional[pv.Actor] = plotter.add_mesh(
            sphere, color=color, lighting=False, pickable=False, reset_camera=False
        )

    @property
    def is_disposed(self) -> bool:
        return self._actor is None

    def dispose(self) -> None:
        if self._actor is None:
            return
        self.plotter.remove_actor(self._actor, render=False)
        self._actor = None


class ActorMarkerFactory:
    """Callable handed to a PointPicker; creates one ActorMarker per point."""

    def __init__(self, plotter: pv.Plotter, color: str, radius: float = MARKER_RADIUS) -> None:
        self.plotter = plotter
        self.color = color
        self.radius = radius

    def __call__(self, position: npt.NDArray[np.float64]) -> ActorMarker:
        return ActorMarker(self.plotter, position, self.color, self.radius)
