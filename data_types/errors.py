"""
Exception types raised by the smoothing and region assembly routines.

All of them derive from ValueError so callers that already catch
ValueError for bad mesh input keep working.
"""


class MeshError(ValueError):
    """Base class for mesh input errors."""


class MeshConfigurationError(MeshError):
    """An invalid parameter: smoothing factor, iteration count, spacing, precision."""


class MeshStructureError(MeshError):
    """Index out of bounds or mismatched array shapes in vertex/face/adjacency data."""


class RegionGeometryError(MeshError):
    """A region boundary curve that does not close or intersects itself."""
