from dataclasses import dataclass
from typing import List, Sequence
import numpy as np
from numpy.typing import NDArray

from .errors import MeshStructureError


SENTINEL = -1


@dataclass
class VertexAdjacency:
    indices: NDArray[np.int64]  # V x K table of neighbor vertex indices, SENTINEL in unused slots
    valid: NDArray[np.bool_]  # V x K mask, True where the slot holds a real neighbor

    @classmethod
    def from_neighbor_lists(cls, neighbor_lists: Sequence[Sequence[int]]) -> "VertexAdjacency":
        """Pad ragged per-vertex neighbor lists into a rectangular table."""
        num_vertices = len(neighbor_lists)
        width = max((len(row) for row in neighbor_lists), default=0)
        indices = np.full((num_vertices, width), SENTINEL, dtype=np.int64)
        for i, row in enumerate(neighbor_lists):
            indices[i, :len(row)] = row
        return cls(indices=indices, valid=indices != SENTINEL)

    @classmethod
    def from_table(cls, table) -> "VertexAdjacency":
        """Wrap a rectangular table where negative entries mark unused slots."""
        indices = np.asarray(table)
        if indices.ndim != 2:
            raise MeshStructureError(f"Adjacency table must be 2-dimensional, got shape {indices.shape}")
        if indices.size and not np.issubdtype(indices.dtype, np.integer):
            raise MeshStructureError(f"Adjacency table must hold integer indices, got dtype {indices.dtype}")
        indices = indices.astype(np.int64)
        valid = indices >= 0
        return cls(indices=np.where(valid, indices, SENTINEL), valid=valid)

    @property
    def num_vertices(self) -> int:
        return self.indices.shape[0]

    def degrees(self) -> NDArray[np.int64]:
        """Number of valid neighbors of every vertex."""
        return self.valid.sum(axis=1)

    def neighbors(self, vertex_index: int) -> List[int]:
        return self.indices[vertex_index][self.valid[vertex_index]].tolist()

    def validate(self, num_vertices: int) -> None:
        """Check that the table has one row per vertex and every valid entry is in range."""
        if self.indices.ndim != 2:
            raise MeshStructureError(f"Adjacency table must be 2-dimensional, got shape {self.indices.shape}")
        if self.valid.shape != self.indices.shape:
            raise MeshStructureError(
                f"Adjacency mask shape {self.valid.shape} does not match table shape {self.indices.shape}"
            )
        if self.indices.shape[0] != num_vertices:
            raise MeshStructureError(
                f"Adjacency has {self.indices.shape[0]} rows but the mesh has {num_vertices} vertices"
            )
        used = self.indices[self.valid]
        if used.size and (used.min() < 0 or used.max() >= num_vertices):
            bad = used[(used < 0) | (used >= num_vertices)][0]
            raise MeshStructureError(f"Adjacency references vertex {bad}, valid range is 0-{num_vertices - 1}")
