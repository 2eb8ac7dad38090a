from .vertex_welding import weld_vertices, collapsed_faces, rounded_coordinates, DEFAULT_DECIMALS
