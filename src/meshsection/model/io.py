"""
Mesh Input
Reads triangle meshes from disk (STL and other VTK-readable surface formats)
and flattens them into SurfaceMesh triangle soups.
"""
import logging
import os
from typing import Optional

import numpy as np
import numpy.typing as npt
import pyvista as pv

from meshsection.config import MESH_COLOR, SUPPORTED_MESH_EXTENSIONS
from meshsection.model.errors import MeshLoadError
from meshsection.model.mesh import SurfaceMesh

logger = logging.getLogger(__name__)


class MeshLoader:
    @staticmethod
    def is_supported(filepath: str) -> bool:
        return os.path.splitext(filepath)[1].lower() in SUPPORTED_MESH_EXTENSIONS

    @staticmethod
    def polydata_to_triangles(surface: pv.DataSet) -> npt.NDArray[np.float64]:
        """
        Converts any PyVista dataset into an (N, 3, 3) triangle soup.
        Non-triangular faces are triangulated first; lines and vertices are dropped.
        """
        if not isinstance(surface, pv.PolyData):
            surface = surface.extract_surface()

        tri = surface.triangulate()
        if tri.n_cells == 0 or tri.faces.size == 0:
            return np.empty((0, 3, 3), dtype=np.float64)

        # Faces come packed as [3, i0, i1, i2, 3, ...] after triangulation
        faces = np.asarray(tri.faces).reshape(-1, 4)[:, 1:]
        points = np.asarray(tri.points, dtype=np.float64)
        return points[faces]

    @staticmethod
    def load(filepath: str, name: Optional[str] = None, color: str = MESH_COLOR) -> SurfaceMesh:
        """
        Load a surface mesh file.

        Raises:
            MeshLoadError: If the file is missing, has an unsupported extension,
                cannot be parsed or contains no triangles.
        """
        logger.info(f"Loading mesh from: {filepath}")

        if not os.path.exists(filepath):
            raise MeshLoadError(f"Mesh file not found: {filepath}")

        if not MeshLoader.is_supported(filepath):
            supported = ", ".join(SUPPORTED_MESH_EXTENSIONS)
            raise MeshLoadError(f"Unsupported mesh format '{filepath}'. Supported: {supported}")

        try:
            data = pv.read(filepath)
        except Exception as e:
            logger.exception(f"Failed to read mesh: {e}")
            raise MeshLoadError(f"Failed to read mesh file '{filepath}': {e}") from e

        if isinstance(data, pv.MultiBlock):
            data = data.combine()

        triangles = MeshLoader.polydata_to_triangles(data)
        if len(triangles) == 0:
            raise MeshLoadError(f"Mesh file contains no triangles: {filepath}")

        mesh = SurfaceMesh(
            triangles,
            name=name or os.path.basename(filepath),
            color=color,
        )
        logger.info(f"Loaded {mesh.name}: {mesh.vertex_count} vertices, {mesh.triangle_count} triangles.")
        return mesh
