"""
Shared fixtures and helpers for the geometry tests.
"""
from __future__ import annotations

from itertools import product

import numpy as np
import pytest
from scipy.spatial import cKDTree

from curvedmesh.cmesh import CoarseMesh
from curvedmesh.eclass import ElementClass
from curvedmesh.geometry import ActiveTree
from curvedmesh.interpolation import compute_linear_geometry

SEAM_MATCH_RADIUS = 1e-9
SEAM_TOLERANCE = 1e-10


def reference_grid(eclass: ElementClass, n: int) -> np.ndarray:
    """Uniform grid of ``n`` points per axis restricted to the reference domain."""
    ticks = np.linspace(0.0, 1.0, n)
    dimension = eclass.dimension
    if dimension == 0:
        return np.zeros((1, 0))
    points = np.array(list(product(ticks, repeat=dimension)))
    if eclass in (ElementClass.TRIANGLE, ElementClass.PRISM):
        points = points[points[:, 1] <= points[:, 0]]
    return points


def interior_reference_points(eclass: ElementClass, n: int, seed: int = 0) -> np.ndarray:
    """Random points strictly inside the reference domain."""
    rng = np.random.default_rng(seed)
    points = rng.uniform(0.02, 0.98, size=(n, eclass.dimension))
    if eclass in (ElementClass.TRIANGLE, ElementClass.PRISM):
        x = np.maximum(points[:, 0], points[:, 1])
        y = np.minimum(points[:, 0], points[:, 1])
        points[:, 0], points[:, 1] = x, y
    return points


def max_seam_gap(cmesh: CoarseMesh, n: int = 7) -> float:
    """
    Largest distance between the images of coincident flat points of
    different trees.

    Points are sampled on a reference grid of every tree. Two samples are
    coincident if their flat (multilinear or barycentric) images agree; the
    curved images of such pairs must agree as well.
    """
    flat, curved, owner = [], [], []
    for tree in cmesh:
        ref = reference_grid(tree.eclass, n)
        flat.append(compute_linear_geometry(tree.eclass, tree.vertices, ref))
        curved.append(cmesh.evaluate(tree.tree_id, ref))
        owner.append(np.full(ref.shape[0], tree.tree_id))
    flat_all = np.vstack(flat)
    curved_all = np.vstack(curved)
    owner_all = np.concatenate(owner)

    pairs = cKDTree(flat_all).query_pairs(SEAM_MATCH_RADIUS, output_type="ndarray")
    pairs = pairs[owner_all[pairs[:, 0]] != owner_all[pairs[:, 1]]]
    assert len(pairs) > 0, "no shared points between trees"
    return float(np.max(np.linalg.norm(curved_all[pairs[:, 0]] - curved_all[pairs[:, 1]], axis=1)))


@pytest.fixture
def unit_square_tree():
    return ActiveTree(tree_id=0, eclass=ElementClass.QUAD, vertices=[[0.0, 0.0, 0.0], [1.0, 1.0, 0.0]])
