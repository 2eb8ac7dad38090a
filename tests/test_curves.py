"""
Tests for boundary curve validation and resampling.
"""

import os
import sys
import numpy as np
import pytest

# Add the parent directory to the Python path so we can import the regions module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from data_types import MeshStructureError, RegionGeometryError
from regions.curves import (
    find_self_intersection,
    normalize_curve,
    polygon_area,
    resample_curve,
    subdivide_segment,
)


UNIT_SQUARE = np.array([
    [0.0, 0.0],
    [1.0, 0.0],
    [1.0, 1.0],
    [0.0, 1.0],
])

BOWTIE = np.array([
    [0.0, 0.0],
    [1.0, 1.0],
    [1.0, 0.0],
    [0.0, 1.0],
])


def test_polygon_area_sign_follows_orientation():
    assert np.isclose(polygon_area(UNIT_SQUARE), 1.0)
    assert np.isclose(polygon_area(UNIT_SQUARE[::-1]), -1.0)


def test_normalize_curve_strips_duplicates():
    curve = np.array([
        [0.0, 0.0],
        [1.0, 0.0],
        [1.0, 0.0],
        [1.0, 1.0],
        [0.0, 1.0],
        [0.0, 0.0],
    ])
    assert np.array_equal(normalize_curve(curve), UNIT_SQUARE)


def test_normalize_curve_accepts_lists():
    assert np.array_equal(normalize_curve(UNIT_SQUARE.tolist()), UNIT_SQUARE)


def test_normalize_curve_rejects_open_curves():
    with pytest.raises(RegionGeometryError, match="does not close"):
        normalize_curve([[0.0, 0.0], [1.0, 0.0]])
    with pytest.raises(RegionGeometryError, match="does not close"):
        normalize_curve([[0.0, 0.0], [1.0, 0.0], [0.0, 0.0]])
    # Collinear points enclose nothing
    with pytest.raises(RegionGeometryError, match="does not close"):
        normalize_curve([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]])


def test_normalize_curve_rejects_self_intersection():
    with pytest.raises(RegionGeometryError, match="self-intersects"):
        normalize_curve(BOWTIE, label="bowtie")


def test_normalize_curve_rejects_bad_points():
    with pytest.raises(MeshStructureError):
        normalize_curve(np.zeros((4, 3)))
    with pytest.raises(RegionGeometryError):
        normalize_curve([[0.0, 0.0], [1.0, np.nan], [1.0, 1.0]])


def test_find_self_intersection():
    assert find_self_intersection(UNIT_SQUARE) is None
    assert find_self_intersection(BOWTIE) == (0, 2)

    # Concave but simple
    l_shape = np.array([[0, 0], [2, 0], [2, 1], [1, 1], [1, 2], [0, 2]], dtype=float)
    assert find_self_intersection(l_shape) is None

    # Two edges touching at a point count as an intersection
    pinched = np.array([[0, 0], [2, 0], [1, 1], [2, 2], [0, 2], [1, 1]], dtype=float)
    assert find_self_intersection(pinched) is not None


def test_resample_curve_keeps_corners():
    resampled = resample_curve(UNIT_SQUARE, 0.5)

    assert resampled.shape == (8, 2)
    assert np.array_equal(resampled[::2], UNIT_SQUARE)
    assert np.allclose(resampled[1::2], [[0.5, 0.0], [1.0, 0.5], [0.5, 1.0], [0.0, 0.5]])


def test_resample_curve_leaves_short_segments():
    assert np.array_equal(resample_curve(UNIT_SQUARE, 2.0), UNIT_SQUARE)


def test_resample_curve_segment_lengths_within_spacing():
    curve = np.array([[0.0, 0.0], [3.3, 0.0], [3.3, 1.7], [0.0, 0.4]])
    resampled = resample_curve(curve, 0.25)
    lengths = np.linalg.norm(np.roll(resampled, -1, axis=0) - resampled, axis=1)
    assert lengths.max() <= 0.25 + 1e-12


def test_subdivide_segment_is_direction_independent():
    """A segment walked in either direction yields bit-identical interior points."""
    start = np.array([0.1, 0.3])
    end = np.array([1.7, 2.9])

    forward = subdivide_segment(start, end, 7)
    backward = subdivide_segment(end, start, 7)

    assert np.array_equal(forward[0], start)
    assert np.array_equal(backward[0], end)
    assert np.array_equal(forward[1:], backward[1:][::-1])
