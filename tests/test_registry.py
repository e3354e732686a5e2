"""
Tests for the geometry registry and the shared geometry contract.
"""
import logging

import numpy as np
import pytest

from curvedmesh.eclass import ElementClass
from curvedmesh.geometry import (
    ActiveTree,
    CubedSphere,
    Geometry,
    GeometryKind,
    GeometryPreconditionError,
    LinearAxisAlignedGeometry,
    UnsupportedOperationError,
    create_geometry,
    destroy_geometry,
    is_geometry_kind,
    list_kinds,
    register_geometry,
)

FIXED_KINDS = {
    GeometryKind.QUADRANGULATED_DISK: 2,
    GeometryKind.TRIANGULATED_SPHERICAL_SURFACE: 2,
    GeometryKind.PRISMED_SPHERICAL_SHELL: 3,
    GeometryKind.QUADRANGULATED_SPHERICAL_SURFACE: 2,
    GeometryKind.CUBED_SPHERICAL_SHELL: 3,
    GeometryKind.CUBED_SPHERE: 3,
}


def test_all_kinds_are_registered():
    assert set(list_kinds()) == set(GeometryKind)


@pytest.mark.parametrize("kind, dimension", list(FIXED_KINDS.items()))
def test_create_fixed_dimension_kinds(kind, dimension):
    geometry = create_geometry(kind)
    assert geometry.dimension == dimension
    assert geometry.name == str(kind)
    assert is_geometry_kind(geometry, kind)
    assert not is_geometry_kind(geometry, GeometryKind.LINEAR_AXIS_ALIGNED)
    assert not geometry.supports_jacobian
    assert not geometry.supports_point_inside
    destroy_geometry(geometry)


@pytest.mark.parametrize("dimension", [0, 1, 2, 3])
def test_create_axis_aligned(dimension):
    geometry = create_geometry("linear_axis_aligned", dimension)
    assert isinstance(geometry, LinearAxisAlignedGeometry)
    assert geometry.dimension == dimension
    assert geometry.name == f"linear_axis_aligned_{dimension}"
    assert geometry.supports_jacobian
    assert geometry.supports_point_inside


def test_unknown_kind():
    with pytest.raises(KeyError):
        create_geometry("moebius_strip")
    with pytest.raises(KeyError):
        is_geometry_kind(create_geometry("cubed_sphere"), "moebius_strip")


def test_dimension_checks():
    with pytest.raises(ValueError):
        create_geometry(GeometryKind.LINEAR_AXIS_ALIGNED)
    with pytest.raises(ValueError):
        create_geometry(GeometryKind.LINEAR_AXIS_ALIGNED, 4)
    with pytest.raises(ValueError):
        create_geometry(GeometryKind.CUBED_SPHERE, 2)
    assert create_geometry(GeometryKind.CUBED_SPHERE, 3).dimension == 3


def test_register_requires_key():
    class Nameless(Geometry):
        KEY = ""

        def _evaluate(self, tree, ref_coords):
            return ref_coords

    with pytest.raises(ValueError):
        register_geometry(Nameless)


def test_creation_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="curvedmesh"):
        geometry = create_geometry("cubed_sphere")
        destroy_geometry(geometry)
    assert "Created geometry 'cubed_sphere'" in caplog.text
    assert "Destroyed geometry 'cubed_sphere'" in caplog.text


# =============================================================================
# Lifecycle and preconditions
# =============================================================================

def _disk_tree(tree_id: int = 0) -> ActiveTree:
    return ActiveTree(tree_id=tree_id, eclass="quad", vertices=np.eye(4, 3))


def test_destroyed_geometry_rejects_calls():
    geometry = create_geometry("quadrangulated_disk")
    destroy_geometry(geometry)
    assert geometry.is_destroyed
    with pytest.raises(GeometryPreconditionError):
        geometry.evaluate(_disk_tree(), [[0.5, 0.5]])
    with pytest.raises(ValueError):
        destroy_geometry(geometry)


def test_wrong_element_class():
    geometry = create_geometry("quadrangulated_disk")
    tree = ActiveTree(tree_id=0, eclass=ElementClass.TRIANGLE, vertices=np.eye(3))
    with pytest.raises(GeometryPreconditionError):
        geometry.evaluate(tree, [[0.5, 0.25]])


def test_wrong_number_of_control_points():
    geometry = create_geometry("quadrangulated_disk")
    tree = ActiveTree(tree_id=0, eclass="quad", vertices=np.eye(3))
    with pytest.raises(GeometryPreconditionError):
        geometry.evaluate(tree, [[0.5, 0.5]])


def test_axis_aligned_dimension_must_match_tree():
    geometry = create_geometry("linear_axis_aligned", 3)
    tree = ActiveTree(tree_id=0, eclass="quad", vertices=[[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])
    with pytest.raises(GeometryPreconditionError):
        geometry.evaluate(tree, [[0.5, 0.5]])


def test_reference_dimension_must_match_tree():
    geometry = create_geometry("quadrangulated_disk")
    with pytest.raises(GeometryPreconditionError):
        geometry.evaluate(_disk_tree(), [[0.5, 0.5, 0.5]])


def test_non_finite_control_points():
    geometry = create_geometry("quadrangulated_disk")
    vertices = np.eye(4, 3)
    vertices[2, 1] = np.nan
    tree = ActiveTree(tree_id=0, eclass="quad", vertices=vertices)
    with pytest.raises(GeometryPreconditionError):
        geometry.evaluate(tree, [[0.5, 0.5]])


def test_control_points_need_three_coordinates():
    with pytest.raises(GeometryPreconditionError):
        ActiveTree(tree_id=0, eclass="quad", vertices=np.zeros(10))


def test_tree_vertices_are_read_only():
    tree = _disk_tree()
    with pytest.raises(ValueError):
        tree.vertices[0, 0] = 5.0


def test_flat_reference_coordinates_are_accepted():
    geometry = create_geometry("quadrangulated_disk")
    tree = _disk_tree()
    assert geometry.evaluate(tree, [0.5, 0.5, 0.25, 0.75]).shape == (2, 3)


def test_empty_batches():
    geometry = create_geometry("cubed_sphere")
    tree = ActiveTree(tree_id=0, eclass="hex", vertices=np.eye(8, 3))
    assert geometry.evaluate(tree, np.empty((0, 3))).shape == (0, 3)
    axis_aligned = create_geometry("linear_axis_aligned", 3)
    box = ActiveTree(tree_id=0, eclass="hex", vertices=[[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])
    assert axis_aligned.evaluate_jacobian(box, np.empty((0, 3))).shape == (0, 3, 3)


def test_degenerate_control_points_are_logged(caplog):
    geometry = CubedSphere()
    tree = ActiveTree(tree_id=1, eclass="hex", vertices=np.zeros((8, 3)))
    with caplog.at_level(logging.ERROR, logger="curvedmesh"):
        with pytest.raises(GeometryPreconditionError):
            geometry.evaluate(tree, [[0.5, 0.5, 0.5]])
    assert "Degenerate control points in tree 1" in caplog.text


def test_unsupported_error_is_not_implemented():
    geometry = create_geometry("cubed_sphere")
    tree = ActiveTree(tree_id=1, eclass="hex", vertices=np.eye(8, 3))
    with pytest.raises(NotImplementedError):
        geometry.evaluate_jacobian(tree, [[0.5, 0.5, 0.5]])
    with pytest.raises(UnsupportedOperationError):
        geometry.evaluate_jacobian(tree, np.empty((0, 3)))
