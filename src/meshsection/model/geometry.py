"""
Vector helpers and axis-aligned bounding boxes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, TYPE_CHECKING

import numpy as np

from meshsection.config import ZERO_LENGTH_TOLERANCE

if TYPE_CHECKING:
    import numpy.typing as npt


class Axis(str, Enum):
    X = "x"
    Y = "y"
    Z = "z"

    @property
    def unit_vector(self) -> npt.NDArray[np.float64]:
        """Basis vector along this axis."""
        index = {"x": 0, "y": 1, "z": 2}[self.value]
        vec = np.zeros(3, dtype=np.float64)
        vec[index] = 1.0
        return vec


def as_point(value: Iterable[float]) -> npt.NDArray[np.float64]:
    """Convert any 3-sequence into a float (3,) array."""
    arr = np.asarray(value, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 coordinates, got shape {arr.shape}.")
    return arr


def as_points(values) -> npt.NDArray[np.float64]:
    """Convert a sequence of points into an (N, 3) float array."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    return arr.reshape(-1, 3)


def length(vector: npt.ArrayLike) -> float:
    return float(np.linalg.norm(vector))


def normalize(vector: npt.ArrayLike, tol: float = ZERO_LENGTH_TOLERANCE) -> Optional[npt.NDArray[np.float64]]:
    """
    Return the unit vector along `vector`, or None if it is (nearly) zero.
    """
    vec = np.asarray(vector, dtype=np.float64)
    norm = np.linalg.norm(vec)
    if norm < tol:
        return None
    return vec / norm


def least_aligned_axis(direction: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Basis axis with the smallest component along `direction`."""
    idx = int(np.argmin(np.abs(np.asarray(direction, dtype=np.float64))))
    axis = np.zeros(3, dtype=np.float64)
    axis[idx] = 1.0
    return axis


@dataclass(eq=False)
class BoundingBox:
    """
    Axis-aligned bounding box.

    A fresh box is empty (min = +inf, max = -inf) until points are added.
    """
    min: npt.NDArray[np.float64] = field(default_factory=lambda: np.full(3, np.inf))
    max: npt.NDArray[np.float64] = field(default_factory=lambda: np.full(3, -np.inf))

    @classmethod
    def from_points(cls, points) -> BoundingBox:
        box = cls()
        box.expand_by_points(points)
        return box

    def expand_by_points(self, points) -> BoundingBox:
        pts = as_points(points)
        if len(pts) == 0:
            return self
        self.min = np.minimum(self.min, pts.min(axis=0))
        self.max = np.maximum(self.max, pts.max(axis=0))
        return self

    def union(self, other: BoundingBox) -> BoundingBox:
        if other.is_empty:
            return self
        self.min = np.minimum(self.min, other.min)
        self.max = np.maximum(self.max, other.max)
        return self

    @property
    def is_empty(self) -> bool:
        return bool(np.any(self.max < self.min))

    @property
    def center(self) -> npt.NDArray[np.float64]:
        if self.is_empty:
            return np.zeros(3, dtype=np.float64)
        return (self.min + self.max) * 0.5

    @property
    def size(self) -> npt.NDArray[np.float64]:
        if self.is_empty:
            return np.zeros(3, dtype=np.float64)
        return self.max - self.min

    @property
    def max_dimension(self) -> float:
        return float(np.max(self.size))
