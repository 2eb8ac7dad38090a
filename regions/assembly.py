"""
Assembly of independently triangulated regions into one mesh.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence
import numpy as np
from numpy.typing import NDArray
from tqdm import tqdm

from data_types import RegionSpec, RegionMesh, MeshConfigurationError
from deduplication import weld_vertices, collapsed_faces, DEFAULT_DECIMALS
from .triangulate import triangulate_region, check_point_spacing, DEFAULT_MIN_ANGLE


def _region_specs(regions: Sequence) -> List[RegionSpec]:
    specs = []
    for number, region in enumerate(regions, start=1):
        spec = RegionSpec.from_curves(region)
        if not spec.name:
            spec = RegionSpec(curves=spec.curves, name=str(number))
        specs.append(spec)
    return specs


def concatenate_regions(region_meshes) -> RegionMesh:
    """
    Stack per-region (vertices, faces) pairs into one mesh without merging anything.

    Faces of each region are offset by the number of vertices already stacked.
    Region labels are 1-based positions in region_meshes.
    """
    vertices: List[NDArray[np.float64]] = []
    faces: List[NDArray[np.int64]] = []
    labels: List[NDArray[np.int64]] = []
    offset = 0
    for number, (region_vertices, region_faces) in enumerate(region_meshes, start=1):
        vertices.append(region_vertices)
        faces.append(np.asarray(region_faces, dtype=np.int64) + offset)
        labels.append(np.full(len(region_faces), number, dtype=np.int64))
        offset += len(region_vertices)

    if not vertices:
        return RegionMesh.empty()
    return RegionMesh(
        vertices=np.vstack(vertices),
        faces=np.vstack(faces).reshape(-1, 3),
        region_labels=np.concatenate(labels),
    )


def assemble_regions(
    regions: Sequence,
    point_spacing: float,
    resample_curves: bool = True,
    decimals: int = DEFAULT_DECIMALS,
    min_angle: float = DEFAULT_MIN_ANGLE,
    max_workers: Optional[int] = None,
    verbose: bool = False,
) -> RegionMesh:
    """
    Triangulate several 2D regions and join them into one mesh with shared boundary vertices.

    Regions are triangulated without knowledge of each other. Points on a
    boundary shared by two regions are produced by both; after stacking, the
    vertices are welded by rounding to `decimals` decimal places so that each
    shared point is kept once.

    Args:
        regions: RegionSpec objects or lists of curves (outer boundary first, then holes)
        point_spacing: Target edge length
        resample_curves: Split boundary segments longer than point_spacing
        decimals: Decimal places used to detect coincident vertices
        min_angle: Minimum triangle angle in degrees passed to the triangulator
        max_workers: Triangulate regions on this many threads, None or 1 for sequential
        verbose: Whether to print progress information

    Returns:
        RegionMesh: vertices, faces and 1-based per-face region labels
    """
    point_spacing = check_point_spacing(point_spacing)
    if max_workers is not None and (isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1):
        raise MeshConfigurationError(f"max_workers must be a positive integer, got {max_workers!r}")

    specs = _region_specs(regions)
    if not specs:
        return RegionMesh.empty()

    def mesh_region(spec: RegionSpec):
        return triangulate_region(spec, point_spacing, resample_curves=resample_curves, min_angle=min_angle)

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(mesh_region, spec) for spec in specs]
            # Collect in input order; the first failing region raises
            region_meshes = [future.result() for future in futures]
    else:
        region_iter = tqdm(specs, desc="Triangulating regions") if verbose else specs
        region_meshes = [mesh_region(spec) for spec in region_iter]

    stacked = concatenate_regions(region_meshes)
    vertices, faces, _ = weld_vertices(stacked.vertices, stacked.faces, decimals=decimals)

    if verbose:
        for spec, (region_vertices, region_faces) in zip(specs, region_meshes):
            print(f"Region {spec.name}: {len(region_vertices)} vertices, {len(region_faces)} faces")
        print(f"Welded {len(stacked.vertices) - len(vertices)} duplicate vertices, "
              f"{len(vertices)} vertices remain")
        collapsed = collapsed_faces(faces)
        if np.any(collapsed):
            print(f"Warning: {collapsed.sum()} faces collapsed during welding, decimals={decimals} may be too coarse")

    return RegionMesh(vertices=vertices, faces=faces, region_labels=stacked.region_labels)
