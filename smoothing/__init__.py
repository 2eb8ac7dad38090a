from .adjacency import build_vertex_adjacency, boundary_edges, boundary_vertices
from .laplacian import laplacian_smooth, smooth_trimesh, neighbor_mean, SmoothingParameters, SmoothingInfo
