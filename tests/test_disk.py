"""
Tests for the quadrangulated disk.
"""
import numpy as np
import pytest
from numpy.testing import assert_allclose

from conftest import SEAM_TOLERANCE, interior_reference_points, max_seam_gap
from curvedmesh.cmesh import new_quadrangulated_disk
from curvedmesh.eclass import ElementClass
from curvedmesh.geometry import ActiveTree, GeometryPreconditionError, QuadrangulatedDisk, create_geometry
from curvedmesh.interpolation import compute_linear_geometry

RADIUS = 2.0


@pytest.fixture
def disk():
    cmesh = new_quadrangulated_disk(RADIUS)
    yield cmesh
    cmesh.destroy()


def test_mesh_layout(disk):
    assert disk.num_trees == 12
    assert disk.geometry.name == "quadrangulated_disk"


def test_reference_axes():
    assert QuadrangulatedDisk.reference_axes(1) == (1, 0)
    assert QuadrangulatedDisk.reference_axes(2) == (0, 1)
    assert QuadrangulatedDisk.reference_axes(5) == (0, 1)


def test_center_trees_are_flat(disk):
    ref = interior_reference_points(ElementClass.QUAD, 50)
    for tree in disk:
        if tree.tree_id % 3 != 0:
            continue
        expected = compute_linear_geometry(tree.eclass, tree.vertices, ref)
        assert_allclose(disk.evaluate(tree.tree_id, ref), expected, atol=1e-14)


def test_outer_edge_lies_on_circle(disk):
    t = np.linspace(0.0, 1.0, 21)
    for tree in disk:
        if tree.tree_id % 3 == 0:
            continue
        r_coord, a_coord = QuadrangulatedDisk.reference_axes(tree.tree_id)
        ref = np.zeros((t.size, 2))
        ref[:, r_coord] = 1.0
        ref[:, a_coord] = t
        out = disk.evaluate(tree.tree_id, ref)
        assert_allclose(np.linalg.norm(out, axis=1), RADIUS, rtol=1e-12)
        assert_allclose(out[:, 2], 0.0, atol=1e-14)


def test_inner_edge_matches_flat_map(disk):
    t = np.linspace(0.0, 1.0, 11)
    for tree in disk:
        if tree.tree_id % 3 == 0:
            continue
        r_coord, a_coord = QuadrangulatedDisk.reference_axes(tree.tree_id)
        ref = np.zeros((t.size, 2))
        ref[:, a_coord] = t
        expected = compute_linear_geometry(tree.eclass, tree.vertices, ref)
        assert_allclose(disk.evaluate(tree.tree_id, ref), expected, atol=1e-14)


def test_points_stay_inside_disk(disk):
    ref = interior_reference_points(ElementClass.QUAD, 200)
    for tree in disk:
        out = disk.evaluate(tree.tree_id, ref)
        assert np.all(np.linalg.norm(out, axis=1) < RADIUS)


def test_seams_are_continuous(disk):
    assert max_seam_gap(disk, n=9) < SEAM_TOLERANCE


def test_corners_are_finite(disk):
    ref = [[0.0, 0.0], [1.0, 1.0], [0.999999, 0.999999], [1.0, 0.0], [0.0, 1.0]]
    for tree in disk:
        assert np.all(np.isfinite(disk.evaluate(tree.tree_id, ref)))


def test_order_is_preserved(disk):
    ref = interior_reference_points(ElementClass.QUAD, 10)
    batch = disk.evaluate(1, ref)
    single = np.vstack([disk.evaluate(1, point) for point in ref])
    assert_allclose(batch, single)


def test_empty_batch(disk):
    assert disk.evaluate(1, np.empty((0, 2))).shape == (0, 3)


def test_parallel_edges_are_degenerate():
    geometry = create_geometry("quadrangulated_disk")
    # Control point 3 is perpendicular to control point 0
    tree = ActiveTree(
        tree_id=1,
        eclass="quad",
        vertices=[[0.0, 1.0, 0.0], [1.0, 1.0, 0.0], [0.0, 2.0, 0.0], [2.0, 0.0, 0.0]],
    )
    with pytest.raises(GeometryPreconditionError):
        geometry.evaluate(tree, [[0.5, 0.5]])


def test_zero_control_point_is_degenerate():
    geometry = create_geometry("quadrangulated_disk")
    tree = ActiveTree(tree_id=2, eclass="quad", vertices=np.zeros((4, 3)))
    with pytest.raises(GeometryPreconditionError):
        geometry.evaluate(tree, [[0.5, 0.5]])
