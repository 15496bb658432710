"""
Surface Meshes
==============
Triangle-soup meshes and the collection of meshes loaded into the viewer.

Classes:
    SurfaceMesh: One loaded mesh (triangles, world transform, display state).
    MeshSet: Ordered collection of meshes with a change version for caching.
    MeshStats: Summary numbers shown in the side panel.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, TYPE_CHECKING

import numpy as np

from meshsection.config import MESH_COLOR
from meshsection.model.geometry import BoundingBox, as_point

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# Rays closer to parallel with a triangle than this are treated as misses
_RAY_EPSILON = 1e-12


@dataclass(frozen=True)
class MeshStats:
    mesh_count: int = 0
    vertex_count: int = 0
    triangle_count: int = 0


class SurfaceMesh:
    """
    A triangle soup with a world transform.

    `triangles` is an (N, 3, 3) array in the mesh's local space. No shared
    vertex topology is assumed.
    """

    def __init__(
        self,
        triangles: npt.ArrayLike,
        name: str = "mesh",
        color: str = MESH_COLOR,
        transform: Optional[npt.ArrayLike] = None,
    ) -> None:
        tris = np.asarray(triangles, dtype=np.float64)
        if tris.size == 0:
            tris = np.empty((0, 3, 3), dtype=np.float64)
        self.triangles: npt.NDArray[np.float64] = tris.reshape(-1, 3, 3)

        self.id: str = f"mesh-{uuid.uuid4().hex[:12]}"
        self.name = name
        self.color = color
        self.pickable: bool = True

        self._opacity: float = 1.0
        self._visible: bool = True
        self._transform: npt.NDArray[np.float64] = np.eye(4)
        self._world_cache: Optional[npt.NDArray[np.float64]] = None
        # Bumped whenever anything affecting slicing changes
        self.revision: int = 0

        if transform is not None:
            self.transform = transform

    def __repr__(self) -> str:
        return f"SurfaceMesh(name={self.name!r}, triangles={self.triangle_count})"

    # --- Display state ---

    @property
    def opacity(self) -> float:
        return self._opacity

    @opacity.setter
    def opacity(self, value: float) -> None:
        self._opacity = float(min(max(value, 0.0), 1.0))

    @property
    def visible(self) -> bool:
        return self._visible

    @visible.setter
    def visible(self, value: bool) -> None:
        if bool(value) != self._visible:
            self._visible = bool(value)
            self.revision += 1

    # --- Geometry ---

    @property
    def transform(self) -> npt.NDArray[np.float64]:
        return self._transform

    @transform.setter
    def transform(self, matrix: npt.ArrayLike) -> None:
        mat = np.asarray(matrix, dtype=np.float64)
        if mat.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 transform, got shape {mat.shape}.")
        self._transform = mat.copy()
        self._world_cache = None
        self.revision += 1

    def translate(self, offset) -> None:
        mat = self._transform.copy()
        mat[:3, 3] += as_point(offset)
        self.transform = mat

    @property
    def triangle_count(self) -> int:
        return int(self.triangles.shape[0])

    @property
    def vertex_count(self) -> int:
        return self.triangle_count * 3

    def world_triangles(self) -> npt.NDArray[np.float64]:
        """Triangles with the world transform applied, (N, 3, 3)."""
        if self._world_cache is None:
            if np.allclose(self._transform, np.eye(4)):
                self._world_cache = self.triangles
            else:
                rot = self._transform[:3, :3]
                trans = self._transform[:3, 3]
                self._world_cache = self.triangles @ rot.T + trans
        return self._world_cache

    def bounds(self) -> BoundingBox:
        return BoundingBox.from_points(self.world_triangles().reshape(-1, 3))

    def intersect_ray(self, origin, direction) -> Optional[float]:
        """
        Nearest hit of the ray ``origin + t * direction`` (t > 0) with the
        mesh, using the Moller-Trumbore test on all triangles at once.
        Both triangle sides are hit.

        Returns:
            The ray parameter t of the closest hit, or None.
        """
        tris = self.world_triangles()
        if len(tris) == 0:
            return None

        o = as_point(origin)
        d = as_point(direction)

        v0 = tris[:, 0]
        e1 = tris[:, 1] - v0
        e2 = tris[:, 2] - v0

        p = np.cross(d, e2)
        det = np.einsum("ij,ij->i", e1, p)
        hit = np.abs(det) > _RAY_EPSILON

        with np.errstate(divide="ignore", invalid="ignore"):
            inv_det = np.where(hit, 1.0 / det, 0.0)
            s = o - v0
            u = np.einsum("ij,ij->i", s, p) * inv_det
            q = np.cross(s, e1)
            v = (q @ d) * inv_det
            t = np.einsum("ij,ij->i", e2, q) * inv_det

        hit &= (u >= 0.0) & (v >= 0.0) & (u + v <= 1.0) & (t > _RAY_EPSILON)
        if not np.any(hit):
            return None
        return float(np.min(t[hit]))


class MeshSet:
    """
    The meshes currently loaded into the viewer.

    `version` changes whenever the set or any member's geometry changes, so
    slicing results can be cached against it.
    """

    def __init__(self) -> None:
        self._meshes: List[SurfaceMesh] = []
        self._counter: int = 0
        self._listeners: List[Callable[[], None]] = []

    def __iter__(self) -> Iterator[SurfaceMesh]:
        return iter(self._meshes)

    def __len__(self) -> int:
        return len(self._meshes)

    def __contains__(self, mesh: object) -> bool:
        return mesh in self._meshes

    @property
    def version(self) -> tuple:
        return (self._counter, tuple((m.id, m.revision) for m in self._meshes))

    def on_changed(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def _notify(self) -> None:
        self._counter += 1
        for callback in list(self._listeners):
            callback()

    # --- Mutation ---

    def add(self, mesh: SurfaceMesh) -> SurfaceMesh:
        self._meshes.append(mesh)
        logger.info(f"Mesh added: {mesh.name} ({mesh.triangle_count} triangles), total meshes: {len(self)}")
        self._notify()
        return mesh

    def remove(self, mesh: SurfaceMesh) -> bool:
        if mesh not in self._meshes:
            return False
        self._meshes.remove(mesh)
        logger.info(f"Mesh removed: {mesh.name}, total meshes: {len(self)}")
        self._notify()
        return True

    def clear(self) -> None:
        self._meshes.clear()
        logger.info("All meshes cleared.")
        self._notify()

    def get(self, mesh_id: str) -> Optional[SurfaceMesh]:
        for mesh in self._meshes:
            if mesh.id == mesh_id:
                return mesh
        return None

    # --- Queries ---

    def visible(self) -> List[SurfaceMesh]:
        return [m for m in self._meshes if m.visible]

    def pickable(self) -> List[SurfaceMesh]:
        return [m for m in self._meshes if m.visible and m.pickable]

    def world_triangles(self) -> npt.NDArray[np.float64]:
        """All visible triangles in world space, concatenated."""
        parts = [m.world_triangles() for m in self.visible()]
        if not parts:
            return np.empty((0, 3, 3), dtype=np.float64)
        return np.concatenate(parts, axis=0)

    def bounding_box(self) -> BoundingBox:
        box = BoundingBox()
        for mesh in self._meshes:
            box.union(mesh.bounds())
        return box

    def stats(self) -> MeshStats:
        return MeshStats(
            mesh_count=len(self._meshes),
            vertex_count=sum(m.vertex_count for m in self._meshes),
            triangle_count=sum(m.triangle_count for m in self._meshes),
        )
