"""
Error types raised by the geometry core.

A ray that hits nothing is not an error: picking returns ``None`` instead.
Slicing zero triangles or framing an empty box are successful no-ops.
"""


class SectionError(Exception):
    """Base class for all meshsection errors."""


class DegenerateInputError(SectionError, ValueError):
    """Geometry input does not define a unique result (e.g. coincident points)."""


class MeshLoadError(SectionError, IOError):
    """A mesh file could not be read or contains no triangles."""
