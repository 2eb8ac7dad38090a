from .errors import MeshError, MeshConfigurationError, MeshStructureError, RegionGeometryError
from .vertex_adjacency import VertexAdjacency, SENTINEL
from .region_spec import RegionSpec
from .mesh2d import RegionMesh
