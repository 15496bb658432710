"""
Camera Framing
==============
Derives camera transforms that make a point set or a set of meshes fully
visible.

- Contour framing: orthographic camera looking along the plane normal at the
  contour, extents padded by 20%.
- Scene framing: perspective camera at a three-quarter view, far enough for the
  bounding box to fit the vertical field of view.

Framing an empty input returns False and leaves the camera untouched.
"""
from __future__ import annotations

import logging
import math
from typing import Optional, TYPE_CHECKING

import numpy as np

from meshsection.config import (
    CONTOUR_PADDING, SCENE_VIEW_OFFSET, SECTION_CAMERA_DISTANCE, SECTION_VIEW_UP
)
from meshsection.model.camera import ProjectionType
from meshsection.model.geometry import BoundingBox, as_point, least_aligned_axis, normalize

if TYPE_CHECKING:
    import numpy.typing as npt
    from meshsection.model.camera import Camera

logger = logging.getLogger(__name__)


class ViewFramer:
    def __init__(
        self,
        padding: float = CONTOUR_PADDING,
        section_distance: float = SECTION_CAMERA_DISTANCE,
        section_up=SECTION_VIEW_UP,
        scene_offset=SCENE_VIEW_OFFSET,
    ) -> None:
        self.padding = padding
        self.section_distance = section_distance
        self.section_up = as_point(section_up)
        self.scene_offset = as_point(scene_offset)

    @staticmethod
    def _resolve_up(up: npt.NDArray[np.float64], view_direction: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """The reference up axis, unless it is parallel to the view direction."""
        unit = normalize(up)
        if unit is None or abs(np.dot(unit, view_direction)) > 0.999:
            return least_aligned_axis(view_direction)
        return unit

    def frame_contour(self, points, normal, camera: Camera, up: Optional[npt.ArrayLike] = None) -> bool:
        """
        Point an orthographic camera at a contour along the plane normal.

        Args:
            points: (N, 3) contour points (e.g. slicer output endpoints).
            normal: Unit normal of the cutting plane.
            camera: Camera to modify.
            up: Reference up axis; defaults to the configured section up axis.

        Returns:
            False (camera untouched) when there are no points.
        """
        box = BoundingBox.from_points(points)
        if box.is_empty:
            return False

        n = normalize(as_point(normal))
        if n is None:
            return False

        center = box.center
        # A single point still needs a non-zero frustum
        half_extent = max(box.max_dimension * self.padding, 1e-6)

        camera.projection = ProjectionType.ORTHOGRAPHIC
        camera.set_orthographic_extents(half_extent, half_extent)
        camera.position = center + n * self.section_distance
        camera.up = self._resolve_up(self.section_up if up is None else as_point(up), -n)
        camera.look_at(center)

        logger.debug(f"Framed contour: center={np.round(center, 3)}, half extent={half_extent:.3f}")
        return True

    def frame_scene(self, box: BoundingBox, camera: Camera) -> bool:
        """
        Place a perspective camera so the whole box is in view.

        Returns:
            False (camera untouched) when the box is empty.
        """
        if box.is_empty:
            return False

        center = box.center
        max_dim = box.max_dimension
        fov = math.radians(camera.view_angle)
        distance = abs(max_dim / math.sin(fov / 2.0))

        camera.position = center + distance * self.scene_offset
        direction = normalize(center - camera.position)
        if direction is not None:
            camera.up = self._resolve_up(camera.up, direction)
        camera.look_at(center)

        logger.debug(f"Framed scene: center={np.round(center, 3)}, distance={distance:.3f}")
        return True

    def frame_meshes(self, meshes, camera: Camera) -> bool:
        """Frame every mesh of a MeshSet (or any iterable of meshes)."""
        box = BoundingBox()
        for mesh in meshes:
            box.union(mesh.bounds())
        return self.frame_scene(box, camera)
