"""
Camera & Viewport Model
=======================
A renderer-independent camera: pose (position, focal point, up) plus either a
perspective or an orthographic projection. Matrices follow the OpenGL
convention (right-handed view space, camera looking down -Z, NDC in [-1, 1]).

The viewer copies this state to and from the PyVista camera; the geometry core
only ever sees this class.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import math
import numpy as np

from meshsection.config import (
    DEFAULT_FOV_DEG, MAIN_CAMERA_FAR, MAIN_CAMERA_NEAR, SECTION_DEFAULT_EXTENT
)
from meshsection.model.geometry import as_point, least_aligned_axis, normalize

if TYPE_CHECKING:
    import numpy.typing as npt


class ProjectionType(str, Enum):
    PERSPECTIVE = "perspective"
    ORTHOGRAPHIC = "orthographic"


@dataclass(frozen=True)
class Viewport:
    """Pixel dimensions of a render surface. Pixel (0, 0) is the top-left corner."""
    width: int
    height: int

    @property
    def aspect(self) -> float:
        return self.width / self.height if self.height > 0 else 1.0

    def to_ndc(self, x_px: float, y_px: float) -> tuple[float, float]:
        """Pixel coordinates -> normalized device coordinates (Y up)."""
        x = (x_px / self.width) * 2.0 - 1.0
        y = -(y_px / self.height) * 2.0 + 1.0
        return x, y

    def to_pixels(self, ndc_x: float, ndc_y: float) -> tuple[float, float]:
        """Normalized device coordinates -> pixel coordinates (Y down)."""
        x = (ndc_x * 0.5 + 0.5) * self.width
        y = (ndc_y * -0.5 + 0.5) * self.height
        return x, y


@dataclass(eq=False)
class Camera:
    position: npt.NDArray[np.float64] = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))
    focal_point: npt.NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    up: npt.NDArray[np.float64] = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    projection: ProjectionType = ProjectionType.PERSPECTIVE

    # Perspective: vertical field of view in degrees
    view_angle: float = DEFAULT_FOV_DEG
    aspect: float = 1.0
    near: float = MAIN_CAMERA_NEAR
    far: float = MAIN_CAMERA_FAR

    # Orthographic frustum extents (view space units)
    left: float = -SECTION_DEFAULT_EXTENT
    right: float = SECTION_DEFAULT_EXTENT
    top: float = SECTION_DEFAULT_EXTENT
    bottom: float = -SECTION_DEFAULT_EXTENT

    def __post_init__(self) -> None:
        self.position = as_point(self.position)
        self.focal_point = as_point(self.focal_point)
        self.up = as_point(self.up)
        self.projection = ProjectionType(self.projection)

    # ------------------------------------------------------------------
    # Pose
    # ------------------------------------------------------------------

    @property
    def is_orthographic(self) -> bool:
        return self.projection == ProjectionType.ORTHOGRAPHIC

    @property
    def direction(self) -> npt.NDArray[np.float64]:
        """Unit vector the camera looks along (world space)."""
        forward = normalize(self.focal_point - self.position)
        if forward is None:
            return np.array([0.0, 0.0, -1.0])
        return forward

    @property
    def distance(self) -> float:
        return float(np.linalg.norm(self.focal_point - self.position))

    def look_at(self, target) -> None:
        self.focal_point = as_point(target)

    def set_orthographic_extents(self, half_width: float, half_height: float) -> None:
        self.left, self.right = -float(half_width), float(half_width)
        self.bottom, self.top = -float(half_height), float(half_height)

    def axes(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Returns the orthonormal (right, up, forward) triple.
        An up vector parallel to the view direction is replaced by a basis axis.
        """
        forward = self.direction
        right = normalize(np.cross(forward, self.up))
        if right is None:
            right = normalize(np.cross(forward, least_aligned_axis(forward)))
        true_up = np.cross(right, forward)
        return right, true_up, forward

    # ------------------------------------------------------------------
    # Matrices
    # ------------------------------------------------------------------

    def view_matrix(self) -> npt.NDArray[np.float64]:
        right, up, forward = self.axes()
        eye = self.position
        return np.array([
            [right[0], right[1], right[2], -np.dot(right, eye)],
            [up[0], up[1], up[2], -np.dot(up, eye)],
            [-forward[0], -forward[1], -forward[2], np.dot(forward, eye)],
            [0.0, 0.0, 0.0, 1.0],
        ])

    def projection_matrix(self) -> npt.NDArray[np.float64]:
        n, f = self.near, self.far
        if self.is_orthographic:
            l, r, t, b = self.left, self.right, self.top, self.bottom
            return np.array([
                [2.0 / (r - l), 0.0, 0.0, -(r + l) / (r - l)],
                [0.0, 2.0 / (t - b), 0.0, -(t + b) / (t - b)],
                [0.0, 0.0, -2.0 / (f - n), -(f + n) / (f - n)],
                [0.0, 0.0, 0.0, 1.0],
            ])

        cot = 1.0 / math.tan(math.radians(self.view_angle) / 2.0)
        return np.array([
            [cot / self.aspect, 0.0, 0.0, 0.0],
            [0.0, cot, 0.0, 0.0],
            [0.0, 0.0, (f + n) / (n - f), 2.0 * f * n / (n - f)],
            [0.0, 0.0, -1.0, 0.0],
        ])

    def view_projection_matrix(self) -> npt.NDArray[np.float64]:
        return self.projection_matrix() @ self.view_matrix()

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def project(self, point) -> npt.NDArray[np.float64]:
        """World point -> normalized device coordinates (x, y, z)."""
        clip = self.view_projection_matrix() @ np.append(as_point(point), 1.0)
        return clip[:3] / clip[3]

    def unproject(self, ndc) -> npt.NDArray[np.float64]:
        """Normalized device coordinates -> world point."""
        inv = np.linalg.inv(self.view_projection_matrix())
        world = inv @ np.append(as_point(ndc), 1.0)
        return world[:3] / world[3]

    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Ray through an NDC position.

        Perspective rays start at the eye; orthographic rays start on the near
        plane and run parallel to the view direction.
        """
        near_point = self.unproject((ndc_x, ndc_y, -1.0))
        if self.is_orthographic:
            return near_point, self.direction

        direction = normalize(near_point - self.position)
        if direction is None:
            direction = self.direction
        return self.position.copy(), direction

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def state(self) -> tuple:
        """Plain-tuple snapshot of every camera parameter."""
        return (
            tuple(self.position.tolist()), tuple(self.focal_point.tolist()), tuple(self.up.tolist()),
            self.projection.value, self.view_angle, self.aspect, self.near, self.far,
            self.left, self.right, self.top, self.bottom,
        )

    def copy(self) -> Camera:
        return Camera(
            position=self.position.copy(),
            focal_point=self.focal_point.copy(),
            up=self.up.copy(),
            projection=self.projection,
            view_angle=self.view_angle,
            aspect=self.aspect,
            near=self.near,
            far=self.far,
            left=self.left,
            right=self.right,
            top=self.top,
            bottom=self.bottom,
        )
