import argparse
import sys
import numpy as np

from data_types import RegionSpec, MeshError
from regions import assemble_regions
from smoothing import laplacian_smooth, boundary_vertices


POINT_SPACING = 0.25
SMOOTHING_ITERATIONS = 25
SMOOTHING_FACTOR = 0.5
SMOOTHING_TOLERANCE = None
WELD_DECIMALS = 5


def rectangle(x0, y0, x1, y1):
    return np.array([[x0, y0], [x1, y0], [x1, y1], [x0, y1]], dtype=float)


def circle(center, radius, num_points=24):
    angles = np.linspace(0, 2 * np.pi, num_points, endpoint=False)
    return np.column_stack([center[0] + radius * np.cos(angles), center[1] + radius * np.sin(angles)])


def demo_regions():
    """
    A 2 x 1 plate split into two halves, the right half with a round hole,
    and a disc filling that hole.
    """
    hole = circle((1.5, 0.5), 0.25)
    return [
        RegionSpec(curves=[rectangle(0.0, 0.0, 1.0, 1.0)], name="left"),
        RegionSpec(curves=[rectangle(1.0, 0.0, 2.0, 1.0), hole], name="right"),
        RegionSpec(curves=[hole], name="insert"),
    ]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Triangulate a multi-region plate and relax the result.')
    parser.add_argument('--spacing', type=float, default=POINT_SPACING, help='Target point spacing')
    parser.add_argument('--iterations', type=int, default=SMOOTHING_ITERATIONS, help='Maximum smoothing iterations')
    parser.add_argument('--smoothing-factor', type=float, default=SMOOTHING_FACTOR, help='Smoothing factor in (0, 1]')
    parser.add_argument('--tolerance', type=float, default=SMOOTHING_TOLERANCE, help='Relative change at which smoothing stops')
    parser.add_argument('--decimals', type=int, default=WELD_DECIMALS, help='Decimal places used to weld shared vertices')
    parser.add_argument('--workers', type=int, default=None, help='Triangulate regions on this many threads')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    regions = demo_regions()

    try:
        mesh = assemble_regions(
            regions,
            point_spacing=args.spacing,
            decimals=args.decimals,
            max_workers=args.workers,
            verbose=args.verbose,
        )
        rigid = boundary_vertices(mesh.faces)
        smoothed, info = laplacian_smooth(
            mesh.vertices,
            mesh.faces,
            smoothing_factor=args.smoothing_factor,
            max_iterations=args.iterations,
            rigid_constraints=rigid,
            tolerance=args.tolerance,
            verbose=args.verbose,
            return_info=True,
        )
    except MeshError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Mesh has {len(mesh.vertices)} vertices and {len(mesh.faces)} faces.")
    for number, region in enumerate(regions, start=1):
        print(f"  region {number} ({region.name}): {np.sum(mesh.region_labels == number)} faces")
    displacement = np.linalg.norm(smoothed - mesh.vertices, axis=1)
    print(f"Smoothing ran {info.iterations} iterations with {len(rigid)} boundary vertices fixed; "
          f"max displacement {displacement.max():.4f}")
    return mesh, smoothed


if __name__ == "__main__":
    main()
