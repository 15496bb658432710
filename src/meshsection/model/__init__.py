"""
The MODEL layer contains pure data structures and geometric algorithms.
It has NO knowledge of the GUI (Qt) or the Visualization (PyVista),
with the single exception of the file loader in io.py.
It deals with Planes, Meshes, Cameras, Picking, Slicing and Framing.
"""
