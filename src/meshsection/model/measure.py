"""
Distance Measurement
Computes the distance between two picked points and where its label goes on
screen. Input geometry is assumed to be in millimeters already.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, TYPE_CHECKING

import numpy as np

from meshsection.config import LENGTH_UNIT
from meshsection.model.geometry import as_point

if TYPE_CHECKING:
    import numpy.typing as npt
    from meshsection.model.camera import Camera, Viewport

logger = logging.getLogger(__name__)


def format_distance(distance: float, unit: str = LENGTH_UNIT) -> str:
    return f"{distance:.2f} {unit}"


@dataclass(eq=False)
class Measurement:
    p1: npt.NDArray[np.float64]
    p2: npt.NDArray[np.float64]
    distance: float
    midpoint: npt.NDArray[np.float64]
    # Label position in viewport pixels, origin top-left
    anchor: tuple[float, float]

    @property
    def label(self) -> str:
        return format_distance(self.distance)


class DistanceMeasurer:
    @staticmethod
    def distance(p1, p2) -> float:
        a, b = as_point(p1), as_point(p2)
        return float(np.sqrt(np.sum((a - b) ** 2)))

    @staticmethod
    def label_anchor(point, camera: Camera, viewport: Viewport) -> tuple[float, float]:
        """Project a world point to viewport pixels (Y down)."""
        ndc = camera.project(point)
        return viewport.to_pixels(float(ndc[0]), float(ndc[1]))

    @staticmethod
    def measure(p1, p2, camera: Camera, viewport: Viewport) -> Measurement:
        a, b = as_point(p1), as_point(p2)
        midpoint = (a + b) * 0.5
        measurement = Measurement(
            p1=a,
            p2=b,
            distance=DistanceMeasurer.distance(a, b),
            midpoint=midpoint,
            anchor=DistanceMeasurer.label_anchor(midpoint, camera, viewport),
        )
        logger.info(f"Measured distance: {measurement.label}")
        return measurement

    @staticmethod
    def measure_points(points: Sequence, camera: Camera, viewport: Viewport) -> Measurement:
        """
        Raises:
            ValueError: unless exactly two points are given.
        """
        if len(points) != 2:
            raise ValueError(f"Measurement requires exactly two points, got {len(points)}.")
        return DistanceMeasurer.measure(points[0], points[1], camera, viewport)

    @staticmethod
    def reproject(measurement: Measurement, camera: Camera, viewport: Viewport) -> Measurement:
        """Update the label anchor after the camera or viewport changed."""
        measurement.anchor = DistanceMeasurer.label_anchor(measurement.midpoint, camera, viewport)
        return measurement
