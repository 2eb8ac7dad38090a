"""
Tests for the mesh data containers and error types.
"""

import os
import sys
import numpy as np

# Add the parent directory to the Python path so we can import the data_types module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from data_types import (
    MeshError,
    MeshConfigurationError,
    MeshStructureError,
    RegionGeometryError,
    RegionMesh,
    RegionSpec,
    VertexAdjacency,
)


def test_error_hierarchy():
    for error in (MeshConfigurationError, MeshStructureError, RegionGeometryError):
        assert issubclass(error, MeshError)
        assert issubclass(error, ValueError)


def test_region_spec_from_curves():
    outer = [[0, 0], [1, 0], [1, 1]]
    hole = [[0.2, 0.2], [0.4, 0.2], [0.4, 0.4]]
    spec = RegionSpec.from_curves([outer, hole], name="plate")

    assert spec.name == "plate"
    assert spec.outer.dtype == np.float64
    assert np.array_equal(spec.outer, outer)
    assert len(spec.holes) == 1
    assert RegionSpec.from_curves(spec) is spec


def test_region_mesh_unpacks_as_triple():
    mesh = RegionMesh(
        vertices=np.zeros((3, 2)),
        faces=np.array([[0, 1, 2]]),
        region_labels=np.array([1]),
    )
    vertices, faces, labels = mesh
    assert vertices.shape == (3, 2)
    assert faces.shape == (1, 3)
    assert np.array_equal(labels, [1])


def test_empty_region_mesh():
    mesh = RegionMesh.empty()
    assert mesh.vertices.shape == (0, 2)
    assert mesh.faces.dtype == np.int64
    assert RegionMesh.empty(dimensions=3).vertices.shape == (0, 3)


def test_adjacency_from_neighbor_lists():
    adjacency = VertexAdjacency.from_neighbor_lists([[1, 2], [0], []])
    assert adjacency.indices.shape == (3, 2)
    assert np.array_equal(adjacency.degrees(), [2, 1, 0])
    assert adjacency.neighbors(2) == []

    empty = VertexAdjacency.from_neighbor_lists([])
    assert empty.indices.shape == (0, 0)
