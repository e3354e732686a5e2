"""
Tests for the flat mappings and the reference point batches.
"""
import numpy as np
import pytest
from numpy.testing import assert_allclose

from curvedmesh.eclass import CUBE_CLASS_BY_DIMENSION, ElementClass
from curvedmesh.interpolation import compute_linear_geometry, linear_interpolation, multilinear_weights
from curvedmesh.reference import (
    gauss_points_weights,
    gauss_points_weights_line,
    gauss_points_weights_triangle,
    reference_centroid,
    reference_corners,
)


def _random_vertices(eclass: ElementClass, seed: int = 1) -> np.ndarray:
    return np.random.default_rng(seed).normal(size=(eclass.num_corners, 3))


# =============================================================================
# Multilinear interpolation
# =============================================================================

@pytest.mark.parametrize("dim", [0, 1, 2, 3])
def test_weights_form_partition_of_unity(dim):
    ref = np.random.default_rng(0).uniform(size=(20, dim))
    weights = multilinear_weights(ref, dim)
    assert weights.shape == (20, 1 << dim)
    assert_allclose(weights.sum(axis=1), 1.0)


@pytest.mark.parametrize("dim", [1, 2, 3])
def test_interpolation_reproduces_corners(dim):
    eclass = CUBE_CLASS_BY_DIMENSION[dim]
    corners = _random_vertices(eclass)
    assert_allclose(linear_interpolation(reference_corners(eclass), corners, dim), corners, atol=1e-14)


def test_bilinear_center_is_corner_average():
    corners = np.array([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, 2.0, 0.0], [2.0, 2.0, 4.0]])
    out = linear_interpolation(np.array([[0.5, 0.5]]), corners, 2)
    assert_allclose(out, [[1.0, 1.0, 1.0]])


def test_interpolation_uses_leading_corners_only():
    hex_vertices = _random_vertices(ElementClass.HEX)
    ref = np.array([[0.25, 0.75, 0.5]])
    assert_allclose(
        linear_interpolation(ref, hex_vertices, 2),
        linear_interpolation(ref[:, :2], hex_vertices[:4], 2),
    )


def test_interpolation_rejects_bad_dimension():
    with pytest.raises(ValueError):
        linear_interpolation(np.zeros((1, 4)), np.zeros((16, 3)), 4)


# =============================================================================
# Flat mapping per element class
# =============================================================================

@pytest.mark.parametrize("eclass", list(ElementClass))
def test_flat_mapping_reproduces_corners(eclass):
    vertices = _random_vertices(eclass)
    out = compute_linear_geometry(eclass, vertices, reference_corners(eclass))
    assert out.shape == (eclass.num_corners, 3)
    assert_allclose(out, vertices, atol=1e-14)


# The pyramid centroid is not the vertex average
@pytest.mark.parametrize("eclass", [eclass for eclass in ElementClass if eclass != ElementClass.PYRAMID])
def test_flat_mapping_centroid_is_vertex_average(eclass):
    vertices = _random_vertices(eclass)
    out = compute_linear_geometry(eclass, vertices, reference_centroid(eclass))
    assert_allclose(out[0], vertices.mean(axis=0), atol=1e-14)


def test_prism_interpolates_between_base_and_top():
    base = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0]])
    vertices = np.vstack([base, base + [0.0, 0.0, 2.0]])
    out = compute_linear_geometry(ElementClass.PRISM, vertices, np.array([[0.5, 0.25, 0.25]]))
    assert_allclose(out, [[0.5, 0.25, 0.5]])


def test_pyramid_apex_is_finite():
    vertices = _random_vertices(ElementClass.PYRAMID)
    out = compute_linear_geometry(ElementClass.PYRAMID, vertices, np.array([[1.0, 1.0, 1.0], [0.9, 0.95, 0.9]]))
    assert np.all(np.isfinite(out))
    assert_allclose(out[0], vertices[4])


# =============================================================================
# Reference batches
# =============================================================================

@pytest.mark.parametrize("eclass", list(ElementClass))
def test_reference_shapes(eclass):
    assert reference_corners(eclass).shape == (eclass.num_corners, eclass.dimension)
    assert reference_centroid(eclass).shape == (1, eclass.dimension)


@pytest.mark.parametrize("n_points", [1, 2, 3])
def test_gauss_line_integrates_polynomials(n_points):
    points, weights = gauss_points_weights_line(n_points)
    assert weights.sum() == pytest.approx(1.0)
    degree = 2 * n_points - 1
    assert np.sum(weights * points ** degree) == pytest.approx(1.0 / (degree + 1))


@pytest.mark.parametrize("n_points", [1, 3])
def test_gauss_triangle(n_points):
    points, weights = gauss_points_weights_triangle(n_points)
    assert weights.sum() == pytest.approx(0.5)
    assert np.all(points[:, 1] <= points[:, 0])
    # Integral of x over the reference triangle
    assert np.sum(weights * points[:, 0]) == pytest.approx(1.0 / 3.0)


@pytest.mark.parametrize("eclass, total", [
    (ElementClass.VERTEX, 1.0),
    (ElementClass.LINE, 1.0),
    (ElementClass.QUAD, 1.0),
    (ElementClass.HEX, 1.0),
    (ElementClass.TRIANGLE, 0.5),
    (ElementClass.PRISM, 0.5),
])
def test_gauss_weights_sum_to_volume(eclass, total):
    points, weights = gauss_points_weights(eclass, 3)
    assert points.shape == (weights.shape[0], eclass.dimension)
    assert weights.sum() == pytest.approx(total)


def test_gauss_cube_points_run_x_fastest():
    points, _ = gauss_points_weights(ElementClass.QUAD, 2)
    assert points[0, 1] == points[1, 1]
    assert points[0, 0] < points[1, 0]


@pytest.mark.parametrize("eclass", [ElementClass.TET, ElementClass.PYRAMID])
def test_gauss_unsupported_classes(eclass):
    with pytest.raises(ValueError):
        gauss_points_weights(eclass, 1)


def test_gauss_unsupported_point_counts():
    with pytest.raises(ValueError):
        gauss_points_weights_line(4)
    with pytest.raises(ValueError):
        gauss_points_weights_triangle(2)
