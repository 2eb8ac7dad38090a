"""
Constrained 2D triangulation of a single region using the Triangle library.
"""

import math
from typing import List, Tuple
import numpy as np
from numpy.typing import NDArray
import triangle

from data_types import RegionSpec, MeshConfigurationError, RegionGeometryError
from .curves import normalize_curve, resample_curve


DEFAULT_MIN_ANGLE = 30.0
# Above roughly 34 degrees Triangle may not terminate
MAX_MIN_ANGLE = 34.0


def check_point_spacing(point_spacing) -> float:
    if isinstance(point_spacing, bool) or not isinstance(point_spacing, (int, float, np.integer, np.floating)):
        raise MeshConfigurationError(f"point_spacing must be a number, got {point_spacing!r}")
    if not math.isfinite(point_spacing) or point_spacing <= 0:
        raise MeshConfigurationError(f"point_spacing must be a positive finite number, got {point_spacing}")
    return float(point_spacing)


def target_triangle_area(point_spacing: float) -> float:
    """Area of an equilateral triangle with edge length point_spacing."""
    return math.sqrt(3.0) / 4.0 * point_spacing ** 2


def loop_segments(loops: List[NDArray[np.float64]]) -> Tuple[NDArray[np.float64], NDArray[np.int64]]:
    """Stack closed loops into one point array with the segments joining consecutive points of each loop."""
    points = []
    segments = []
    offset = 0
    for loop in loops:
        n = len(loop)
        index = np.arange(n) + offset
        segments.append(np.column_stack([index, np.roll(index, -1)]))
        points.append(loop)
        offset += n
    return np.vstack(points), np.vstack(segments).astype(np.int64)


def interior_point(loop: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    A point strictly inside a simple closed polygon.

    The polygon is triangulated on its own and the centroid of its largest
    triangle is returned, which also works for concave shapes.
    """
    points, segments = loop_segments([loop])
    result = triangle.triangulate({"vertices": points, "segments": segments.astype(np.int32)}, "pQ")
    triangles = result.get("triangles")
    if triangles is None or len(triangles) == 0:
        raise RegionGeometryError("Could not find a point inside hole curve")
    corners = result["vertices"][triangles]
    edge_1 = corners[:, 1] - corners[:, 0]
    edge_2 = corners[:, 2] - corners[:, 0]
    areas = np.abs(edge_1[:, 0] * edge_2[:, 1] - edge_1[:, 1] * edge_2[:, 0])
    return corners[np.argmax(areas)].mean(axis=0)


def triangulation_options(point_spacing: float, min_angle: float) -> str:
    """
    Triangle switches: p (segment-bounded input), q (minimum angle), a (maximum area),
    Y (no extra points on the boundary, so boundary points stay as given), Q (quiet).
    """
    quality = f"q{min_angle:.6f}" if min_angle > 0 else ""
    return f"p{quality}a{target_triangle_area(point_spacing):.12f}YQ"


def triangulate_region(
    curves,
    point_spacing: float,
    resample_curves: bool = True,
    min_angle: float = DEFAULT_MIN_ANGLE,
    name: str = "",
) -> Tuple[NDArray[np.float64], NDArray[np.int64]]:
    """
    Triangulate one region bounded by an outer curve and optional hole curves.

    Boundary points (after optional resampling) are the first rows of the
    returned vertices, in curve order, and no extra points are inserted on the
    boundary. Interior points are added until triangles are about the size of
    an equilateral triangle with edge point_spacing.

    Args:
        curves: RegionSpec or list of closed curves; first is the outer boundary, the rest are holes
        point_spacing: Target edge length
        resample_curves: Split boundary segments longer than point_spacing
        min_angle: Minimum triangle angle in degrees, 0 disables quality refinement
        name: Region name used in error messages

    Returns:
        tuple: (n x 2 vertices, m x 3 faces)
    """
    point_spacing = check_point_spacing(point_spacing)
    if not 0.0 <= min_angle <= MAX_MIN_ANGLE:
        raise MeshConfigurationError(f"min_angle must be between 0 and {MAX_MIN_ANGLE} degrees, got {min_angle}")

    region = RegionSpec.from_curves(curves, name=name)
    region_label = f"region '{region.name}'" if region.name else "region"
    if len(region.curves) == 0:
        raise RegionGeometryError(f"{region_label} has no boundary curves")

    loops = []
    for curve_index, curve in enumerate(region.curves):
        kind = "outer boundary" if curve_index == 0 else f"hole {curve_index}"
        loop = normalize_curve(curve, label=f"{region_label} {kind}")
        if resample_curves:
            loop = resample_curve(loop, point_spacing)
        loops.append(loop)

    points, segments = loop_segments(loops)
    data = {"vertices": points, "segments": segments.astype(np.int32)}
    if len(loops) > 1:
        data["holes"] = np.array([interior_point(loop) for loop in loops[1:]])

    result = triangle.triangulate(data, triangulation_options(point_spacing, min_angle))
    triangles = result.get("triangles")
    if triangles is None or len(triangles) == 0:
        raise RegionGeometryError(f"Triangulation of {region_label} produced no triangles")

    return np.asarray(result["vertices"], dtype=np.float64), np.asarray(triangles, dtype=np.int64)
