"""
Configuration & Constants
=========================
Central registry for asset paths and the numeric constants shared by the
geometry core and the viewer.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    SUPPORTED_MESH_EXTENSIONS: File suffixes accepted by the mesh loader.
    Geometry / camera / display constants (see below).
"""
import sys
import os
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # config.py is in src/meshsection/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


ASSETS_PATH: str = get_resource_path("assets")

# --- Mesh input ---
SUPPORTED_MESH_EXTENSIONS: tuple[str, ...] = (".stl", ".ply", ".obj", ".vtk", ".vtp")
LENGTH_UNIT: str = "mm"

# --- Plane derivation ---
WORLD_UP: tuple[float, float, float] = (0.0, 1.0, 0.0)
# Below this cross-product length the view direction is treated as parallel
PARALLEL_THRESHOLD: float = 0.1
# Below this length a vector is treated as zero
ZERO_LENGTH_TOLERANCE: float = 1e-9

# --- Slicing ---
COPLANAR_TOLERANCE: float = 1e-12
JOIN_TOLERANCE: float = 1e-6

# --- Framing ---
CONTOUR_PADDING: float = 1.2
SECTION_CAMERA_DISTANCE: float = 1000.0
SECTION_VIEW_UP: tuple[float, float, float] = (1.0, 0.0, 0.0)
# Three-quarter view offset applied to the whole-scene framing distance
SCENE_VIEW_OFFSET: tuple[float, float, float] = (0.5, -0.8, 0.5)

# --- Cameras ---
DEFAULT_FOV_DEG: float = 40.0
MAIN_CAMERA_NEAR: float = 0.1
MAIN_CAMERA_FAR: float = 10000.0
MAIN_CAMERA_POSITION: tuple[float, float, float] = (50.0, 50.0, 100.0)
SECTION_CAMERA_NEAR: float = 0.1
SECTION_CAMERA_FAR: float = 2000.0
SECTION_DEFAULT_EXTENT: float = 50.0

# --- Display ---
MESH_COLOR: str = "#808080"
BACKGROUND_COLOR: str = "#2a2a2a"
SECTION_BACKGROUND_COLOR: str = "#1a1a1a"
SECTION_COLOR: str = "#00ff00"
MEASUREMENT_COLOR: str = "#ff0000"
MARKER_RADIUS: float = 0.5
PLANE_HELPER_SIZE: float = 100.0
SECTION_VIEW_SIZE: int = 400
POSITION_SLIDER_RANGE: tuple[int, int] = (-50, 50)
