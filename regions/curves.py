"""
Boundary curve utilities for region triangulation.

Curves are closed polylines given as n x 2 point arrays without a closing
duplicate point.
"""

import numpy as np
from numpy.typing import NDArray

from data_types import MeshStructureError, RegionGeometryError


def polygon_area(curve: NDArray[np.float64]) -> float:
    """Signed area of a closed polyline (positive when counter-clockwise)."""
    x, y = curve[:, 0], curve[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def normalize_curve(curve, label: str = "curve") -> NDArray[np.float64]:
    """
    Convert a boundary curve to a clean n x 2 float array and check that it closes.

    Consecutive repeated points and a closing duplicate of the first point are
    removed.

    Args:
        curve: Sequence of 2D points
        label: Name used in error messages

    Returns:
        NDArray[np.float64]: Cleaned curve

    Raises:
        RegionGeometryError: If the curve has fewer than 3 distinct points, encloses
            no area, has non-finite coordinates, or intersects itself
    """
    points = np.asarray(curve, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 2:
        raise MeshStructureError(f"{label} must be an n x 2 array of points, got shape {points.shape}")
    if not np.all(np.isfinite(points)):
        raise RegionGeometryError(f"{label} has non-finite coordinates")

    if len(points) > 1:
        moved = np.any(np.diff(points, axis=0) != 0.0, axis=1)
        points = points[np.concatenate([[True], moved])]
    if len(points) > 1 and np.array_equal(points[0], points[-1]):
        points = points[:-1]

    if len(points) < 3:
        raise RegionGeometryError(f"{label} does not close: it needs at least 3 distinct points, got {len(points)}")
    if polygon_area(points) == 0.0:
        raise RegionGeometryError(f"{label} does not close: it encloses zero area")

    crossing = find_self_intersection(points)
    if crossing is not None:
        i, j = crossing
        raise RegionGeometryError(f"{label} self-intersects: edge {i} crosses edge {j}")
    return points


def find_self_intersection(curve: NDArray[np.float64]):
    """
    Return the first pair (i, j) of non-adjacent edges of a closed curve that touch or cross.

    Edge i runs from point i to point (i + 1) % n. Returns None for a simple curve.
    """
    n = len(curve)
    if n < 4:
        return None
    starts = curve
    ends = np.roll(curve, -1, axis=0)

    def cross(origin, target, point):
        d1 = target - origin
        d2 = point - origin
        return d1[..., 0] * d2[..., 1] - d1[..., 1] * d2[..., 0]

    a1, b1 = starts[:, np.newaxis], ends[:, np.newaxis]
    a2, b2 = starts[np.newaxis, :], ends[np.newaxis, :]
    o1 = cross(a1, b1, a2)
    o2 = cross(a1, b1, b2)
    o3 = cross(a2, b2, a1)
    o4 = cross(a2, b2, b1)

    straddles = (o1 * o2 <= 0) & (o3 * o4 <= 0)
    collinear = (o1 == 0) & (o2 == 0)
    # Collinear edges only meet when their bounding boxes overlap
    lo1, hi1 = np.minimum(a1, b1), np.maximum(a1, b1)
    lo2, hi2 = np.minimum(a2, b2), np.maximum(a2, b2)
    boxes_overlap = np.all((lo1 <= hi2) & (lo2 <= hi1), axis=-1)
    hits = straddles & (~collinear | boxes_overlap)

    index = np.arange(n)
    i, j = index[:, np.newaxis], index[np.newaxis, :]
    adjacent = (j == i) | (j == (i + 1) % n) | (i == (j + 1) % n)
    hits &= ~adjacent & (j > i)

    found = np.argwhere(hits)
    if len(found) == 0:
        return None
    return int(found[0, 0]), int(found[0, 1])


def subdivide_segment(start: NDArray[np.float64], end: NDArray[np.float64], pieces: int) -> NDArray[np.float64]:
    """
    Points splitting a segment into equal pieces, start included and end excluded.

    The points are computed from the lexicographically smaller endpoint so that
    two regions walking a shared segment in opposite directions get the same
    coordinates.
    """
    steps = np.arange(pieces, dtype=np.float64)
    if tuple(start) <= tuple(end):
        return start + (steps / pieces)[:, np.newaxis] * (end - start)
    reverse = end + ((pieces - steps) / pieces)[:, np.newaxis] * (start - end)
    reverse[0] = start
    return reverse


def resample_curve(curve: NDArray[np.float64], point_spacing: float) -> NDArray[np.float64]:
    """
    Refine a closed curve so no segment is longer than point_spacing.

    Every input point is kept; each segment is split into
    ceil(length / point_spacing) equal pieces.
    """
    ends = np.roll(curve, -1, axis=0)
    lengths = np.linalg.norm(ends - curve, axis=1)
    pieces = np.maximum(1, np.ceil(lengths / point_spacing - 1e-9)).astype(int)
    return np.vstack([
        subdivide_segment(start, end, count)
        for start, end, count in zip(curve, ends, pieces)
    ])
