"""
Mesh Slicing
============
Intersects a plane with triangle soups and produces the cross-section contour
as unordered line segments.

For every triangle the signed distances of its vertices to the plane are
computed. Each edge whose endpoints lie strictly on opposite sides contributes
one interpolated crossing point; a triangle with exactly two crossings yields
one segment. Vertices lying exactly on the plane are not handled: triangles
touching the plane only at a vertex produce nothing, and coplanar triangles are
skipped.

Classes:
    Contour: Segments of one slicing pass plus derived views (2D, points).
    MeshSlicer: The slicing algorithm.
    SliceCache: Memoizes contours keyed on (plane, mesh set version).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from meshsection.config import COPLANAR_TOLERANCE, JOIN_TOLERANCE, SECTION_VIEW_UP
from meshsection.model.geometry import BoundingBox
from meshsection.model.plane import Plane

if TYPE_CHECKING:
    import numpy.typing as npt
    from meshsection.model.mesh import MeshSet, SurfaceMesh

logger = logging.getLogger(__name__)

# Triangle edges as vertex index pairs (v0-v1, v1-v2, v2-v0)
_EDGES = ((0, 1), (1, 2), (2, 0))


def _empty_segments() -> npt.NDArray[np.float64]:
    return np.empty((0, 2, 3), dtype=np.float64)


@dataclass(eq=False)
class Contour:
    """Result of slicing: (K, 2, 3) world-space segments lying in `plane`."""
    plane: Plane
    segments: npt.NDArray[np.float64] = field(default_factory=_empty_segments)

    @property
    def is_empty(self) -> bool:
        return len(self.segments) == 0

    @property
    def segment_count(self) -> int:
        return int(len(self.segments))

    @property
    def points(self) -> npt.NDArray[np.float64]:
        """All segment endpoints as an (2K, 3) array."""
        return self.segments.reshape(-1, 3)

    @property
    def perimeter(self) -> float:
        if self.is_empty:
            return 0.0
        return float(np.linalg.norm(self.segments[:, 1] - self.segments[:, 0], axis=1).sum())

    def segments_2d(self, reference=SECTION_VIEW_UP) -> npt.NDArray[np.float64]:
        """Segments in the in-plane coordinate system, (K, 2, 2)."""
        if self.is_empty:
            return np.empty((0, 2, 2), dtype=np.float64)
        return self.plane.to_plane_coords(self.segments, reference)

    def bounds(self) -> BoundingBox:
        return BoundingBox.from_points(self.points)

    def polylines(self, tol: float = JOIN_TOLERANCE) -> List[Tuple[npt.NDArray[np.float64], bool]]:
        return join_segments(self.segments, tol)

    @classmethod
    def merge(cls, plane: Plane, contours: List[Contour]) -> Contour:
        parts = [c.segments for c in contours if not c.is_empty]
        if not parts:
            return cls(plane=plane)
        return cls(plane=plane, segments=np.concatenate(parts, axis=0))


class MeshSlicer:
    @staticmethod
    def slice_triangles(plane: Plane, triangles: npt.ArrayLike) -> Contour:
        """
        Slice a world-space triangle soup.

        Args:
            plane: The cutting plane.
            triangles: (N, 3, 3) array of triangles in the plane's coordinate space.

        Returns:
            Contour with at most one segment per triangle. Zero triangles give
            an empty contour.
        """
        tris = np.asarray(triangles, dtype=np.float64)
        if tris.size == 0:
            return Contour(plane=plane.copy())
        tris = tris.reshape(-1, 3, 3)

        dist = plane.signed_distance(tris)  # (N, 3)
        coplanar = np.all(np.abs(dist) <= COPLANAR_TOLERANCE, axis=1)

        crossings = []
        masks = []
        for i, j in _EDGES:
            di, dj = dist[:, i], dist[:, j]
            crosses = (di * dj < 0.0) & ~coplanar
            with np.errstate(divide="ignore", invalid="ignore"):
                t = np.abs(di) / (np.abs(di) + np.abs(dj))
            t = np.where(crosses, t, 0.0)[:, None]
            crossings.append(tris[:, i] + t * (tris[:, j] - tris[:, i]))
            masks.append(crosses)

        hits = np.stack(masks, axis=1)  # (N, 3)
        points = np.stack(crossings, axis=1)  # (N, 3, 3)

        keep = hits.sum(axis=1) == 2
        if not np.any(keep):
            return Contour(plane=plane.copy())

        hits = hits[keep]
        points = points[keep]

        # Two crossings per kept triangle: first and second crossing edge in edge order
        first = np.argmax(hits, axis=1)
        second = 2 - np.argmax(hits[:, ::-1], axis=1)
        rows = np.arange(len(points))
        segments = np.stack([points[rows, first], points[rows, second]], axis=1)

        logger.debug(f"Sliced {len(tris)} triangles into {len(segments)} segments.")
        return Contour(plane=plane.copy(), segments=segments)

    @staticmethod
    def slice_mesh(plane: Plane, mesh: SurfaceMesh) -> Contour:
        """Slices one mesh in world space."""
        return MeshSlicer.slice_triangles(plane, mesh.world_triangles())

    @staticmethod
    def slice_meshes(plane: Plane, meshes: MeshSet) -> Dict[str, Contour]:
        """One contour per visible mesh, keyed by mesh id."""
        return {mesh.id: MeshSlicer.slice_mesh(plane, mesh) for mesh in meshes.visible()}


class SliceCache:
    """
    Keeps the last slicing result and recomputes only when the plane or the
    mesh set version changes.
    """

    def __init__(self) -> None:
        self._key: Optional[Hashable] = None
        self._contours: Dict[str, Contour] = {}
        self.computations: int = 0

    def invalidate(self) -> None:
        self._key = None
        self._contours = {}

    def contours(self, plane: Plane, meshes: MeshSet) -> Dict[str, Contour]:
        key = (plane.key(), meshes.version)
        if key != self._key:
            self._contours = MeshSlicer.slice_meshes(plane, meshes)
            self._key = key
            self.computations += 1
        return self._contours

    def contour(self, plane: Plane, meshes: MeshSet) -> Contour:
        """All meshes' contours merged into one."""
        return Contour.merge(plane.copy(), list(self.contours(plane, meshes).values()))


def join_segments(segments: npt.ArrayLike, tol: float = JOIN_TOLERANCE) -> List[Tuple[npt.NDArray[np.float64], bool]]:
    """
    Chain unordered segments into polylines by matching shared endpoints.

    Args:
        segments: (K, 2, 3) segments.
        tol: Distance below which two endpoints are considered the same point.

    Returns:
        List of (points, closed) tuples. A closed loop does not repeat its
        first point at the end.
    """
    segs = np.asarray(segments, dtype=np.float64).reshape(-1, 2, 3)
    if len(segs) == 0:
        return []

    # Snap endpoints onto a grid so shared endpoints hash to the same key
    keys = [tuple(k) for k in np.round(segs.reshape(-1, 3) / tol).astype(np.int64).tolist()]

    adjacency: Dict[tuple, List[int]] = {}
    for idx, key in enumerate(keys):
        adjacency.setdefault(key, []).append(idx // 2)

    used = np.zeros(len(segs), dtype=bool)
    polylines: List[Tuple[npt.NDArray[np.float64], bool]] = []

    def next_segment(key: tuple) -> Optional[int]:
        for seg_idx in adjacency.get(key, []):
            if not used[seg_idx]:
                return seg_idx
        return None

    for start in range(len(segs)):
        if used[start]:
            continue
        used[start] = True
        chain = [keys[2 * start], keys[2 * start + 1]]
        chain_pts = [segs[start, 0], segs[start, 1]]

        # Extend forward, then backward from the start point
        for forward in (True, False):
            while True:
                end_key = chain[-1] if forward else chain[0]
                seg_idx = next_segment(end_key)
                if seg_idx is None:
                    break
                used[seg_idx] = True
                a_key, b_key = keys[2 * seg_idx], keys[2 * seg_idx + 1]
                if a_key == end_key:
                    new_key, new_pt = b_key, segs[seg_idx, 1]
                else:
                    new_key, new_pt = a_key, segs[seg_idx, 0]
                if forward:
                    chain.append(new_key)
                    chain_pts.append(new_pt)
                else:
                    chain.insert(0, new_key)
                    chain_pts.insert(0, new_pt)

        closed = len(chain) > 3 and chain[0] == chain[-1]
        if closed:
            chain_pts = chain_pts[:-1]
        polylines.append((np.array(chain_pts), closed))

    return polylines
