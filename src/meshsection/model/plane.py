"""
Cutting Plane
=============
An infinite plane stored as a unit normal and a signed offset:
the set of points ``p`` with ``dot(normal, p) - offset == 0``.

The plane can be set from an axis preset, moved along its normal by an offset,
or derived from two picked surface points and the current view direction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

import numpy as np

from meshsection.config import PARALLEL_THRESHOLD, WORLD_UP
from meshsection.model.errors import DegenerateInputError
from meshsection.model.geometry import Axis, as_point, least_aligned_axis, normalize

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Plane:
    normal: npt.NDArray[np.float64] = field(default_factory=lambda: Axis.Y.unit_vector)
    offset: float = 0.0

    def __post_init__(self) -> None:
        self.set_normal(self.normal)
        self.offset = float(self.offset)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_normal(self, normal) -> None:
        """Set the normal, renormalizing it. A zero vector is rejected."""
        unit = normalize(as_point(normal))
        if unit is None:
            raise DegenerateInputError("Plane normal must not be the zero vector.")
        self.normal = unit

    def set_axis(self, axis: Axis | str) -> None:
        """Axis preset: normal along X/Y/Z through the origin."""
        axis = axis if isinstance(axis, Axis) else Axis(axis.lower())
        self.normal = axis.unit_vector
        self.offset = 0.0
        logger.debug(f"Plane set to axis {axis.value}.")

    def set_offset(self, value: float) -> None:
        self.offset = float(value)

    def derive_from_two_points(
        self,
        p1,
        p2,
        view_direction,
        world_up=WORLD_UP,
    ) -> None:
        """
        Set the plane to contain the segment p1-p2 and the view direction.

        The normal is ``cross(d, view_direction)`` where ``d`` is the direction
        from p1 to p2. When the view looks (nearly) along ``d`` the cross product
        collapses, so ``world_up`` is used instead. The plane passes through the
        midpoint of the two points.

        Raises:
            DegenerateInputError: if p1 == p2, or if ``d`` is parallel to both
                the view direction and ``world_up``. The plane is left unchanged.
        """
        a = as_point(p1)
        b = as_point(p2)

        direction = normalize(b - a)
        if direction is None:
            raise DegenerateInputError("Cannot derive a plane from two coincident points.")

        cross = np.cross(direction, as_point(view_direction))
        if np.linalg.norm(cross) < PARALLEL_THRESHOLD:
            logger.debug("View direction is parallel to the picked segment, using world up.")
            cross = np.cross(direction, as_point(world_up))
            if np.linalg.norm(cross) < PARALLEL_THRESHOLD:
                raise DegenerateInputError(
                    "Picked segment is parallel to both the view direction and the up axis."
                )

        normal = cross / np.linalg.norm(cross)
        midpoint = (a + b) * 0.5

        self.normal = normal
        self.offset = float(np.dot(normal, midpoint))
        logger.info(f"Plane derived from two points: normal={np.round(normal, 4)}, offset={self.offset:.4f}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def signed_distance(self, points):
        """
        Signed distance of one point (float) or of an (..., 3) array of points.
        """
        pts = np.asarray(points, dtype=np.float64)
        dist = pts @ self.normal - self.offset
        if np.ndim(dist) == 0:
            return float(dist)
        return dist

    @property
    def origin(self) -> npt.NDArray[np.float64]:
        """Point of the plane closest to the world origin."""
        return self.normal * self.offset

    def basis(self, reference: Optional[npt.ArrayLike] = None) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Orthonormal in-plane axes (u, v) with ``cross(u, v) == normal``.

        Args:
            reference: Direction that u should follow as closely as possible.
                Falls back to the basis axis least aligned with the normal.
        """
        ref = None if reference is None else normalize(as_point(reference))
        if ref is None or abs(np.dot(ref, self.normal)) > 0.999:
            ref = least_aligned_axis(self.normal)

        u = ref - np.dot(ref, self.normal) * self.normal
        u /= np.linalg.norm(u)
        v = np.cross(self.normal, u)
        return u, v

    def to_plane_coords(self, points, reference: Optional[npt.ArrayLike] = None) -> npt.NDArray[np.float64]:
        """Project (..., 3) points to (..., 2) coordinates in the plane basis."""
        u, v = self.basis(reference)
        rel = np.asarray(points, dtype=np.float64) - self.origin
        return np.stack([rel @ u, rel @ v], axis=-1)

    def project_point(self, point) -> npt.NDArray[np.float64]:
        p = as_point(point)
        return p - self.signed_distance(p) * self.normal

    def key(self) -> tuple[float, float, float, float]:
        """Hashable snapshot, used to key cached slicing results."""
        return (float(self.normal[0]), float(self.normal[1]), float(self.normal[2]), self.offset)

    def copy(self) -> Plane:
        return Plane(normal=self.normal.copy(), offset=self.offset)
