"""Shared fixtures: small meshes, cameras and viewports."""

import pytest

from meshsection.model.camera import Camera, ProjectionType, Viewport
from meshsection.model.mesh import SurfaceMesh
from tests.shapes import box_triangles, square_triangles


@pytest.fixture
def cube_mesh():
    return SurfaceMesh(box_triangles(1.0), name="cube")


@pytest.fixture
def ground_mesh():
    return SurfaceMesh(square_triangles(100.0), name="ground")


@pytest.fixture
def top_ortho_camera():
    """Orthographic camera on +Z looking at the origin, 100 x 100 world units."""
    return Camera(
        position=(0.0, 0.0, 100.0),
        focal_point=(0.0, 0.0, 0.0),
        up=(0.0, 1.0, 0.0),
        projection=ProjectionType.ORTHOGRAPHIC,
        left=-50.0, right=50.0, top=50.0, bottom=-50.0,
    )


@pytest.fixture
def viewport():
    return Viewport(100, 100)
