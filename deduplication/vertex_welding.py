import numpy as np
from numpy.typing import NDArray
from typing import Tuple

from data_types import MeshConfigurationError, MeshStructureError
from smoothing.adjacency import check_faces


DEFAULT_DECIMALS = 5


def rounded_coordinates(vertices: NDArray[np.float64], decimals: int) -> NDArray[np.float64]:
    """Round to a fixed number of decimal places, folding -0.0 into 0.0 so both compare equal."""
    return np.round(vertices, decimals) + 0.0


def weld_vertices(
    vertices,
    faces,
    decimals: int = DEFAULT_DECIMALS,
) -> Tuple[NDArray[np.float64], NDArray[np.int64], NDArray[np.int64]]:
    """
    Merge vertices whose coordinates agree after rounding to `decimals` decimal places.

    This is a heuristic coincidence test, not an exact one: two distinct points
    closer than the rounding precision can be merged, and two copies of one
    point that straddle a rounding boundary stay apart. Choose decimals well
    below the point spacing of the mesh.

    Each group of coincident vertices keeps its first occurrence with its
    original (unrounded) coordinates. Kept vertices stay in their original
    relative order.

    Args:
        vertices: N x D vertex coordinates
        faces: M x 3 vertex indices
        decimals: Number of decimal places compared

    Returns:
        tuple: (welded vertices, remapped faces, index_map) where index_map[i] is the
            new index of old vertex i
    """
    if isinstance(decimals, bool) or not isinstance(decimals, (int, np.integer)) or decimals < 0:
        raise MeshConfigurationError(f"decimals must be a non-negative integer, got {decimals!r}")

    vertices = np.asarray(vertices, dtype=np.float64)
    if vertices.ndim != 2:
        raise MeshStructureError(f"Vertices must be an N x D array, got shape {vertices.shape}")
    faces = check_faces(faces, len(vertices))

    if len(vertices) == 0:
        return vertices.copy(), faces.copy(), np.zeros(0, dtype=np.int64)

    _, first_index, inverse = np.unique(
        rounded_coordinates(vertices, decimals), axis=0, return_index=True, return_inverse=True
    )
    inverse = inverse.reshape(-1)

    # np.unique sorts the groups; renumber them by first occurrence instead
    order = np.argsort(first_index)
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))

    index_map = rank[inverse].astype(np.int64)
    welded = vertices[first_index[order]]
    return welded, index_map[faces], index_map


def collapsed_faces(faces) -> NDArray[np.bool_]:
    """Mask of faces that reference the same vertex more than once."""
    faces = np.asarray(faces).reshape(-1, 3)
    return (faces[:, 0] == faces[:, 1]) | (faces[:, 1] == faces[:, 2]) | (faces[:, 0] == faces[:, 2])
