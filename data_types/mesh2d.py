from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray
import trimesh


@dataclass
class RegionMesh:
    vertices: NDArray[np.float64]  # V x 2 array of vertex coordinates
    faces: NDArray[np.int64]  # F x 3 array of vertex *indices* which are face corners
    region_labels: NDArray[np.int64]  # F array, 1-based number of the region each face came from

    @classmethod
    def empty(cls, dimensions: int = 2) -> "RegionMesh":
        return cls(
            vertices=np.zeros((0, dimensions), dtype=np.float64),
            faces=np.zeros((0, 3), dtype=np.int64),
            region_labels=np.zeros(0, dtype=np.int64),
        )

    def __iter__(self):
        # Unpacks as (vertices, faces, region_labels)
        return iter((self.vertices, self.faces, self.region_labels))

    def region_faces(self, region_number: int) -> NDArray[np.int64]:
        """Faces produced by one region (1-based region number)."""
        return self.faces[self.region_labels == region_number]

    def to_trimesh(self) -> trimesh.Trimesh:
        """Build a trimesh object, padding 2D vertices with z = 0. No vertices are merged."""
        vertices = self.vertices
        if vertices.shape[1] == 2:
            vertices = np.column_stack([vertices, np.zeros(len(vertices))])
        mesh = trimesh.Trimesh(vertices=vertices, faces=self.faces, process=False)
        mesh.metadata["region_labels"] = self.region_labels.copy()
        return mesh
