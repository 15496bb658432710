"""
Surface Picking
===============
Resolves a 2D click to a 3D surface point by casting a ray through the camera,
and keeps the ordered list of picked points together with their markers.

A picked point exclusively owns its marker. Every removal path (clear, reset on
overflow, undo) disposes the marker exactly once.

Classes:
    PickableSurface: Anything that can be hit by a ray.
    Marker: Disposable visual handle created for each picked point.
    PickedPoint: One entry of the picked point list.
    CapacityPolicy: What happens when the list reaches its capacity.
    PointPicker: Ray casting + the picked point list.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, TYPE_CHECKING

import numpy as np

from meshsection.model.geometry import as_point

if TYPE_CHECKING:
    import numpy.typing as npt
    from meshsection.model.camera import Camera, Viewport

logger = logging.getLogger(__name__)


class PickableSurface(Protocol):
    def intersect_ray(self, origin: npt.NDArray[np.float64], direction: npt.NDArray[np.float64]) -> Optional[float]:
        """Ray parameter of the nearest hit in front of `origin`, or None."""
        ...


class Marker(Protocol):
    def dispose(self) -> None: ...


class NullMarker:
    """Marker without a visual representation (headless sessions)."""

    def __init__(self, position: npt.NDArray[np.float64]) -> None:
        self.position = position
        self.disposed = False

    def dispose(self) -> None:
        self.disposed = True


MarkerFactory = Callable[["npt.NDArray[np.float64]"], Marker]


class PickedPoint:
    def __init__(self, position: npt.NDArray[np.float64], marker: Marker, order: int) -> None:
        self.position = position
        self.marker = marker
        self.order = order
        self._disposed = False

    def __repr__(self) -> str:
        return f"PickedPoint(order={self.order}, position={self.position.tolist()})"

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Dispose the owned marker. Subsequent calls are no-ops."""
        if self._disposed:
            return
        self._disposed = True
        self.marker.dispose()


class CapacityPolicy(str, Enum):
    """
    AUTO_CONSUME: plane definition. Once full, the points are consumed and the
        selection mode ends; the points stay visible until the next selection.
    RESET_ON_OVERFLOW: measurement. A click on a full list clears it and keeps
        only the new point.
    """
    AUTO_CONSUME = "auto_consume"
    RESET_ON_OVERFLOW = "reset_on_overflow"

    @property
    def exits_when_full(self) -> bool:
        return self is CapacityPolicy.AUTO_CONSUME


@dataclass(frozen=True, eq=False)
class PickRay:
    origin: npt.NDArray[np.float64]
    direction: npt.NDArray[np.float64]

    def at(self, t: float) -> npt.NDArray[np.float64]:
        return self.origin + t * self.direction


class PointPicker:
    def __init__(
        self,
        policy: CapacityPolicy,
        capacity: int = 2,
        marker_factory: Optional[MarkerFactory] = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("Picker capacity must be at least 1.")
        self.policy = policy
        self.capacity = capacity
        self.marker_factory: MarkerFactory = marker_factory or NullMarker
        self._points: List[PickedPoint] = []
        self._next_order: int = 0

    # ------------------------------------------------------------------
    # Ray casting
    # ------------------------------------------------------------------

    @staticmethod
    def ray_from_screen(screen_xy: Sequence[float], camera: Camera, viewport: Viewport) -> PickRay:
        ndc_x, ndc_y = viewport.to_ndc(float(screen_xy[0]), float(screen_xy[1]))
        origin, direction = camera.ray_from_ndc(ndc_x, ndc_y)
        return PickRay(origin=origin, direction=direction)

    @staticmethod
    def pick(
        screen_xy: Sequence[float],
        candidates: Iterable[PickableSurface],
        camera: Camera,
        viewport: Viewport,
    ) -> Optional[npt.NDArray[np.float64]]:
        """
        Closest surface point under a pixel, or None if the ray hits nothing.

        Args:
            screen_xy: Pixel coordinates, origin at the top-left corner.
            candidates: Surfaces to test.
            camera: Camera the click was made through.
            viewport: Size of the surface the click was made on.
        """
        if viewport.width <= 0 or viewport.height <= 0:
            return None

        ray = PointPicker.ray_from_screen(screen_xy, camera, viewport)

        best_t: Optional[float] = None
        for surface in candidates:
            t = surface.intersect_ray(ray.origin, ray.direction)
            if t is not None and (best_t is None or t < best_t):
                best_t = t

        if best_t is None:
            logger.debug(f"Pick at {tuple(screen_xy)} missed all surfaces.")
            return None
        return ray.at(best_t)

    # ------------------------------------------------------------------
    # Point list
    # ------------------------------------------------------------------

    @property
    def points(self) -> List[PickedPoint]:
        return list(self._points)

    @property
    def positions(self) -> List[npt.NDArray[np.float64]]:
        return [p.position for p in self._points]

    @property
    def count(self) -> int:
        return len(self._points)

    def __len__(self) -> int:
        return len(self._points)

    @property
    def is_full(self) -> bool:
        return len(self._points) >= self.capacity

    def add_point(self, position) -> PickedPoint:
        """Append a point with a newly created marker."""
        if self.is_full:
            raise ValueError(f"Picker is full ({self.capacity} points).")
        pos = as_point(position).copy()
        point = PickedPoint(position=pos, marker=self.marker_factory(pos), order=self._next_order)
        self._next_order += 1
        self._points.append(point)
        return point

    def accept(self, position) -> PickedPoint:
        """
        Add a point according to the capacity policy: a full list is
        cleared first, so the new point starts a fresh selection.
        """
        if self.is_full:
            logger.debug(f"Picker full ({self.policy.value}), starting a new selection.")
            self.clear_points()
        return self.add_point(position)

    def clear_points(self) -> None:
        for point in self._points:
            point.dispose()
        self._points = []

    def remove_last_point(self) -> Optional[PickedPoint]:
        if not self._points:
            return None
        point = self._points.pop()
        point.dispose()
        return point
