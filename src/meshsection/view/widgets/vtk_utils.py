"""
VTK and Geometry Utilities
Helper functions converting between the geometry core and PyVista objects.
"""
import numpy as np
import numpy.typing as npt
import pyvista as pv

import logging

from meshsection.model.camera import Camera, ProjectionType, Viewport
from meshsection.model.mesh import SurfaceMesh
from meshsection.model.plane import Plane

logger = logging.getLogger(__name__)


class VtkUtils:
    @staticmethod
    def viewport_of(plotter: pv.Plotter) -> Viewport:
        """Render window size in pixels (same units as VTK event positions)."""
        width, height = plotter.window_size
        return Viewport(int(width), int(height))

    @staticmethod
    def event_position_top_left(plotter: pv.Plotter) -> tuple[float, float]:
        """
        Current interactor event position with the origin moved to the
        top-left corner (VTK reports bottom-left).
        """
        x, y = plotter.iren.get_event_position()
        _, height = plotter.window_size
        return float(x), float(height - y)

    @staticmethod
    def camera_from_plotter(plotter: pv.Plotter) -> Camera:
        """Snapshot of the PyVista camera as a geometry-core Camera."""
        cam = plotter.camera
        viewport = VtkUtils.viewport_of(plotter)
        near, far = cam.clipping_range

        camera = Camera(
            position=np.array(cam.position, dtype=np.float64),
            focal_point=np.array(cam.focal_point, dtype=np.float64),
            up=np.array(cam.up, dtype=np.float64),
            projection=ProjectionType.ORTHOGRAPHIC if cam.parallel_projection else ProjectionType.PERSPECTIVE,
            view_angle=float(cam.view_angle),
            aspect=viewport.aspect,
            near=float(near),
            far=float(far),
        )
        if camera.is_orthographic:
            half_h = float(cam.parallel_scale)
            camera.set_orthographic_extents(half_h * viewport.aspect, half_h)
        return camera

    @staticmethod
    def apply_camera(plotter: pv.Plotter, camera: Camera, reset_clipping: bool = True) -> None:
        """Copy a geometry-core Camera onto the PyVista camera."""
        cam = plotter.camera
        cam.position = tuple(camera.position)
        cam.focal_point = tuple(camera.focal_point)
        cam.up = tuple(camera.up)
        cam.view_angle = camera.view_angle

        if camera.is_orthographic:
            cam.parallel_projection = True
            cam.parallel_scale = (camera.top - camera.bottom) / 2.0
        else:
            cam.parallel_projection = False

        if reset_clipping:
            plotter.reset_camera_clipping_range()
        else:
            cam.clipping_range = (camera.near, camera.far)

    @staticmethod
    def mesh_to_polydata(mesh: SurfaceMesh) -> pv.PolyData:
        """Triangle soup (world space) -> PolyData with one face per triangle."""
        tris = mesh.world_triangles()
        n = len(tris)
        if n == 0:
            return pv.PolyData()
        points = tris.reshape(-1, 3)
        faces = np.hstack([np.full((n, 1), 3, dtype=np.int_), np.arange(3 * n, dtype=np.int_).reshape(n, 3)])
        pd = pv.PolyData(points, faces=faces.ravel())
        # Merge the duplicated soup vertices so shading can be smooth
        return pd.clean()

    @staticmethod
    def segments_to_polydata(segments: npt.NDArray[np.float64]) -> pv.PolyData:
        """(K, 2, 3) segments -> PolyData with one line cell per segment."""
        segs = np.asarray(segments, dtype=np.float64).reshape(-1, 2, 3)
        k = len(segs)
        if k == 0:
            return pv.PolyData()
        points = segs.reshape(-1, 3)
        lines = np.hstack([np.full((k, 1), 2, dtype=np.int_), np.arange(2 * k, dtype=np.int_).reshape(k, 2)])
        return pv.PolyData(points, lines=lines.ravel())

    @staticmethod
    def plane_to_polydata(plane: Plane, size: float) -> pv.PolyData:
        """Square patch of the plane centered on its point closest to the origin."""
        return pv.Plane(
            center=tuple(plane.origin),
            direction=tuple(plane.normal),
            i_size=size,
            j_size=size,
        )
