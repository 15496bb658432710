import pyvista as pv

# Tube with a wall: the sections show two concentric loops
outer = pv.Cylinder(center=(0, 0, 0), direction=(0, 1, 0), radius=20.0, height=60.0, resolution=64)
inner = pv.Cylinder(center=(0, 0, 0), direction=(0, 1, 0), radius=15.0, height=60.0, resolution=64)
tube = outer.triangulate().merge(inner.triangulate())

samples = {
    "cube": pv.Cube(center=(0, 0, 0), x_length=40.0, y_length=40.0, z_length=40.0),
    "sphere": pv.Sphere(radius=25.0, center=(0, 0, 0), theta_resolution=48, phi_resolution=48),
    "torus": pv.ParametricTorus(ringradius=25.0, crosssectionradius=8.0),
    "tube": tube,
}

for name, mesh in samples.items():
    surface = mesh.extract_surface().triangulate()
    print(f"{name}: {surface.n_points} points, {surface.n_cells} triangles")
    surface.save(f"{name}.stl")
