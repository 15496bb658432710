import pytest
import pyvista as pv

from meshsection.model.errors import MeshLoadError
from meshsection.model.io import MeshLoader


def test_load_stl(tmp_path):
    path = tmp_path / "cube.stl"
    pv.Cube(x_length=2.0, y_length=2.0, z_length=2.0).triangulate().save(str(path))

    mesh = MeshLoader.load(str(path))
    assert mesh.name == "cube.stl"
    assert mesh.triangle_count == 12
    assert mesh.bounds().max_dimension == pytest.approx(2.0)


def test_load_custom_name(tmp_path):
    path = tmp_path / "sphere.vtp"
    pv.Sphere().save(str(path))
    mesh = MeshLoader.load(str(path), name="ball")
    assert mesh.name == "ball"
    assert mesh.triangle_count > 0


def test_quads_are_triangulated():
    triangles = MeshLoader.polydata_to_triangles(pv.Plane(i_resolution=2, j_resolution=2))
    assert triangles.shape == (8, 3, 3)


def test_non_polydata_input():
    grid = pv.Cube().cast_to_unstructured_grid()
    assert MeshLoader.polydata_to_triangles(grid).shape == (12, 3, 3)


def test_missing_file(tmp_path):
    with pytest.raises(MeshLoadError, match="not found"):
        MeshLoader.load(str(tmp_path / "nope.stl"))


def test_unsupported_extension(tmp_path):
    path = tmp_path / "mesh.txt"
    path.write_text("not a mesh")
    assert not MeshLoader.is_supported(str(path))
    with pytest.raises(MeshLoadError, match="Unsupported"):
        MeshLoader.load(str(path))


def test_file_without_triangles(tmp_path):
    path = tmp_path / "line.vtp"
    pv.Line().save(str(path))
    with pytest.raises(MeshLoadError, match="no triangles"):
        MeshLoader.load(str(path))
