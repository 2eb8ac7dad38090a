"""
Laplacian relaxation of mesh vertex positions.

Each iteration moves every vertex a fraction of the way toward the centroid of
its 1-ring neighbors. All neighbor reads of an iteration use the positions of
the previous iteration (Jacobi sweep), so the result does not depend on vertex
order.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple, Union
import numpy as np
from numpy.typing import NDArray
import trimesh
from tqdm import trange

from data_types import VertexAdjacency, MeshConfigurationError, MeshStructureError
from .adjacency import build_vertex_adjacency, boundary_vertices


DEFAULT_SMOOTHING_FACTOR = 0.5
DEFAULT_MAX_ITERATIONS = 1
SUPPORTED_DIMENSIONS = (2, 3)
PROGRESS_BAR_MIN_ITERATIONS = 100


@dataclass
class SmoothingParameters:
    """
    Configuration for laplacian_smooth.

    smoothing_factor: fraction of the step toward the neighbor centroid, in (0, 1]
    max_iterations: upper bound on the number of sweeps
    rigid_constraints: vertex indices (or a boolean mask) pinned to their input position
    tolerance: relative change of the summed squared displacement at which to stop early.
        The sum runs over all coordinates of all vertices, so the same tolerance
        behaves differently on meshes of different sizes.
    """
    smoothing_factor: float = DEFAULT_SMOOTHING_FACTOR
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    rigid_constraints: Optional[NDArray[np.int64]] = None
    tolerance: Optional[float] = None

    def validate(self) -> None:
        factor = self.smoothing_factor
        if not isinstance(factor, (int, float, np.integer, np.floating)) or isinstance(factor, bool):
            raise MeshConfigurationError(f"smoothing_factor must be a number, got {factor!r}")
        if not 0.0 < factor <= 1.0:
            raise MeshConfigurationError(f"smoothing_factor must be in (0, 1], got {factor}")

        iterations = self.max_iterations
        if not isinstance(iterations, (int, np.integer)) or isinstance(iterations, bool):
            raise MeshConfigurationError(f"max_iterations must be an integer, got {iterations!r}")
        if iterations < 0:
            raise MeshConfigurationError(f"max_iterations must be non-negative, got {iterations}")

        if self.tolerance is not None and not self.tolerance >= 0:
            raise MeshConfigurationError(f"tolerance must be non-negative, got {self.tolerance}")


@dataclass
class SmoothingInfo:
    iterations: int = 0
    converged: bool = False
    ssqd_history: List[float] = field(default_factory=list)  # sum of squared differences per iteration


def neighbor_mean(positions: NDArray[np.float64], adjacency: VertexAdjacency) -> NDArray[np.float64]:
    """
    Average the positions of each vertex's valid neighbors, per dimension.

    Unused slots and non-finite neighbor coordinates are left out of the
    average. A vertex with nothing left to average keeps its own position.
    """
    means = positions.copy()
    if adjacency.indices.shape[1] == 0:
        return means

    slot_indices = np.where(adjacency.valid, adjacency.indices, 0)
    gathered = positions[slot_indices]  # V x K x D
    usable = adjacency.valid[:, :, np.newaxis] & np.isfinite(gathered)

    totals = np.where(usable, gathered, 0.0).sum(axis=1)
    counts = usable.sum(axis=1)
    has_neighbors = counts > 0
    means[has_neighbors] = totals[has_neighbors] / counts[has_neighbors]
    return means


def _rigid_indices(rigid_constraints, num_vertices: int) -> NDArray[np.int64]:
    if rigid_constraints is None:
        return np.zeros(0, dtype=np.int64)
    rigid = np.asarray(rigid_constraints)
    if rigid.dtype == bool:
        if rigid.shape != (num_vertices,):
            raise MeshStructureError(
                f"Rigid constraint mask has shape {rigid.shape}, expected ({num_vertices},)"
            )
        return np.flatnonzero(rigid)
    rigid = rigid.reshape(-1)
    if rigid.size == 0:
        return np.zeros(0, dtype=np.int64)
    if not np.issubdtype(rigid.dtype, np.integer):
        raise MeshStructureError(f"Rigid constraints must be integer vertex indices, got dtype {rigid.dtype}")
    if rigid.min() < 0 or rigid.max() >= num_vertices:
        raise MeshStructureError(
            f"Rigid constraint index out of bounds: found {rigid.min()}-{rigid.max()}, "
            f"valid range is 0-{num_vertices - 1}"
        )
    return np.unique(rigid.astype(np.int64))


def _prepare_vertices(vertices) -> NDArray[np.float64]:
    vertices = np.array(vertices, dtype=np.float64)
    if vertices.ndim != 2 or vertices.shape[1] not in SUPPORTED_DIMENSIONS:
        raise MeshConfigurationError(
            f"Vertices must be an N x 2 or N x 3 array, got shape {vertices.shape}"
        )
    return vertices


def laplacian_smooth(
    vertices,
    faces=None,
    adjacency: Union[VertexAdjacency, NDArray[np.int64], None] = None,
    params: Optional[SmoothingParameters] = None,
    smoothing_factor: float = DEFAULT_SMOOTHING_FACTOR,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    rigid_constraints=None,
    tolerance: Optional[float] = None,
    verbose: bool = False,
    return_info: bool = False,
) -> Union[NDArray[np.float64], Tuple[NDArray[np.float64], SmoothingInfo]]:
    """
    Relax vertex positions toward the centroid of their neighbors.

    Per iteration: P <- P + smoothing_factor * (neighbor_mean(P) - P), then
    rigid vertices are reset to their input coordinates. With a tolerance the
    loop stops once |1 - ssqd_k / ssqd_(k-1)| <= tolerance, where ssqd_k is the
    sum of squared coordinate changes of iteration k.

    Args:
        vertices: N x D vertex coordinates, D in (2, 3). Not modified.
        faces: M x 3 face indices, used to derive the 1-ring adjacency when adjacency is not given
        adjacency: VertexAdjacency, or an N x K table with negative entries in unused slots
        params: SmoothingParameters; when given it overrides the keyword configuration below
        smoothing_factor: Step fraction in (0, 1]
        max_iterations: Maximum number of iterations
        rigid_constraints: Indices (or boolean mask) of vertices held at their input position
        tolerance: Relative-change stopping threshold, None to always run max_iterations.
            Scale dependent: the squared differences are summed, not averaged.
        verbose: Whether to print progress information
        return_info: Also return a SmoothingInfo with the iteration count and ssqd history

    Returns:
        NDArray[np.float64]: Relaxed N x D vertex positions, plus SmoothingInfo if return_info
    """
    if params is None:
        params = SmoothingParameters(
            smoothing_factor=smoothing_factor,
            max_iterations=max_iterations,
            rigid_constraints=rigid_constraints,
            tolerance=tolerance,
        )
    params.validate()

    original = _prepare_vertices(vertices)
    num_vertices = len(original)

    if adjacency is None:
        if faces is None:
            raise MeshConfigurationError("Either faces or adjacency must be given to smooth a mesh")
        adjacency = build_vertex_adjacency(faces, num_vertices)
    elif not isinstance(adjacency, VertexAdjacency):
        adjacency = VertexAdjacency.from_table(adjacency)
    adjacency.validate(num_vertices)

    rigid = _rigid_indices(params.rigid_constraints, num_vertices)

    info = SmoothingInfo()
    positions = original.copy()
    previous = positions
    ssqd_previous = None
    ratio = 0.0

    # Determine whether to use progress bar based on iteration count
    use_progress = verbose and params.max_iterations >= PROGRESS_BAR_MIN_ITERATIONS
    range_func = (lambda x: trange(x, desc="Laplacian smoothing")) if use_progress else range

    for iteration in range_func(params.max_iterations):
        means = neighbor_mean(positions, adjacency)
        positions = positions + params.smoothing_factor * (means - positions)

        # Put back constrained points
        if rigid.size:
            positions[rigid] = original[rigid]
        info.iterations = iteration + 1

        if params.tolerance is None:
            continue

        squared = (positions - previous) ** 2
        ssqd = float(np.sum(squared[np.isfinite(squared)]))
        if ssqd_previous is not None:
            if ssqd == 0.0 and ssqd_previous == 0.0:
                ratio = 1.0
            else:
                with np.errstate(divide="ignore", invalid="ignore"):
                    ratio = float(np.float64(ssqd) / np.float64(ssqd_previous))
        info.ssqd_history.append(ssqd)
        previous = positions
        ssqd_previous = ssqd

        if abs(1.0 - ratio) <= params.tolerance:
            info.converged = True
            if verbose:
                print(f"Smoothing converged after {info.iterations} iterations "
                      f"(relative change {abs(1.0 - ratio):.3e} <= {params.tolerance})")
            break

    if verbose and not info.converged:
        print(f"Smoothing ran {info.iterations} iterations on {num_vertices} vertices "
              f"({rigid.size} rigid)")

    if return_info:
        return positions, info
    return positions


def smooth_trimesh(mesh: trimesh.Trimesh, fix_boundary: bool = False, **kwargs) -> trimesh.Trimesh:
    """
    Smooth a trimesh object and return a new mesh with the same faces.

    Args:
        mesh: The input mesh, left untouched
        fix_boundary: Add the vertices of open boundary edges to the rigid constraints
        **kwargs: Passed on to laplacian_smooth (smoothing_factor, max_iterations, rigid_constraints, tolerance, verbose)

    Returns:
        trimesh.Trimesh: Smoothed mesh, built without vertex merging so indices are preserved
    """
    kwargs.pop("return_info", None)
    vertices = np.asarray(mesh.vertices, dtype=np.float64)
    faces = np.asarray(mesh.faces, dtype=np.int64)

    if fix_boundary:
        # A params object takes precedence over keywords, so the boundary goes into it
        params = kwargs.get("params")
        given = params.rigid_constraints if params is not None else kwargs.pop("rigid_constraints", None)
        rigid = np.union1d(_rigid_indices(given, len(vertices)), boundary_vertices(faces)).astype(np.int64)
        if params is not None:
            kwargs["params"] = replace(params, rigid_constraints=rigid)
        else:
            kwargs["rigid_constraints"] = rigid

    adjacency = VertexAdjacency.from_neighbor_lists([sorted(row) for row in mesh.vertex_neighbors])
    smoothed = laplacian_smooth(vertices, adjacency=adjacency, **kwargs)
    return trimesh.Trimesh(vertices=smoothed, faces=faces.copy(), process=False)
