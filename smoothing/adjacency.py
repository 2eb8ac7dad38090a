"""
Vertex connectivity helpers for smoothing.
"""

import numpy as np
from numpy.typing import NDArray
import networkx as nx
import trimesh

from data_types import VertexAdjacency, MeshStructureError


def check_faces(faces, num_vertices: int) -> NDArray[np.int64]:
    """Return faces as an M x 3 int64 array, raising if any index is out of range."""
    faces = np.asarray(faces)
    if faces.size == 0:
        return np.zeros((0, 3), dtype=np.int64)
    if faces.ndim != 2 or faces.shape[1] != 3:
        raise MeshStructureError(f"Faces must be an M x 3 array, got shape {faces.shape}")
    if not np.issubdtype(faces.dtype, np.integer):
        raise MeshStructureError(f"Faces must hold integer vertex indices, got dtype {faces.dtype}")
    faces = faces.astype(np.int64)
    if faces.min() < 0 or faces.max() >= num_vertices:
        raise MeshStructureError(
            f"Face index out of bounds: found {faces.min()}-{faces.max()}, valid range is 0-{num_vertices - 1}"
        )
    return faces


def build_vertex_adjacency(faces, num_vertices: int) -> VertexAdjacency:
    """
    Build the 1-ring neighbor table of a triangle mesh.

    Args:
        faces: M x 3 array of vertex indices
        num_vertices: Number of vertices in the mesh; vertices not used by any face get an empty row

    Returns:
        VertexAdjacency with sorted neighbor ids per row, padded with SENTINEL
    """
    faces = check_faces(faces, num_vertices)

    graph = nx.Graph()
    graph.add_nodes_from(range(num_vertices))
    graph.add_edges_from(trimesh.geometry.faces_to_edges(faces).tolist())

    neighbor_lists = [sorted(graph.neighbors(i)) for i in range(num_vertices)]
    return VertexAdjacency.from_neighbor_lists(neighbor_lists)


def boundary_edges(faces) -> NDArray[np.int64]:
    """Edges (sorted vertex pairs) used by exactly one face."""
    faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    if len(faces) == 0:
        return np.zeros((0, 2), dtype=np.int64)
    edges = np.sort(trimesh.geometry.faces_to_edges(faces), axis=1)
    single_use = trimesh.grouping.group_rows(edges, require_count=1)
    return edges[np.asarray(single_use, dtype=np.int64).reshape(-1)]


def boundary_vertices(faces) -> NDArray[np.int64]:
    """Sorted indices of vertices lying on the open boundary of a triangle mesh."""
    return np.unique(boundary_edges(faces).ravel())
