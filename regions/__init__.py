from .curves import normalize_curve, resample_curve, polygon_area, find_self_intersection
from .triangulate import triangulate_region, interior_point, DEFAULT_MIN_ANGLE
from .assembly import assemble_regions, concatenate_regions
