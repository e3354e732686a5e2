"""
Example Coarse Meshes
=====================
Builders for small coarse meshes, one per geometry kind. Every builder
creates its geometry through the registry and returns a :class:`CoarseMesh`
that owns it.

The tree layouts follow the conventions of the geometries: for the disk and
the cubed sphere the tree id selects the role of a tree (center or side),
for the sphere surfaces every tree is one face of an octahedron or a cube.
"""
from __future__ import annotations

from itertools import product
import logging
from typing import Sequence, TYPE_CHECKING

import numpy as np
from scipy.spatial.transform import Rotation

from curvedmesh.cmesh.cmesh import CoarseMesh
from curvedmesh.config import (
    DEFAULT_DISK_INNER_FRACTION,
    DEFAULT_SPHERE_INNER_FRACTION,
    SQRT2,
    SQRT3,
)
from curvedmesh.eclass import CUBE_CLASS_BY_DIMENSION, ElementClass
from curvedmesh.geometry.registry import GeometryKind, create_geometry

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def _check_positive(**values: float) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ValueError(f"'{key}' must be positive, got {value}.")


def _layer_radii(inner_radius: float, shell_thickness: float, num_layers: int) -> npt.NDArray[np.float64]:
    if num_layers < 1:
        raise ValueError(f"'num_layers' must be at least 1, got {num_layers}.")
    return inner_radius + shell_thickness * np.arange(num_layers + 1) / num_layers


# ---- axis-aligned ----

def new_axis_aligned_box(
    dimension: int,
    lower: Sequence[float] = (0.0, 0.0, 0.0),
    upper: Sequence[float] = (1.0, 1.0, 1.0)
) -> CoarseMesh:
    """
    A single axis-aligned tree spanning ``[lower, upper]``.

    Args:
        dimension: Dimension of the tree, 0 to 3.
        lower: Minimum corner.
        upper: Maximum corner.
    """
    return new_axis_aligned_brick(dimension, lower, upper, divisions=(1,) * dimension)


def new_axis_aligned_brick(
    dimension: int,
    lower: Sequence[float] = (0.0, 0.0, 0.0),
    upper: Sequence[float] = (1.0, 1.0, 1.0),
    divisions: Sequence[int] | None = None
) -> CoarseMesh:
    """
    A brick of axis-aligned trees.

    Trees are numbered lexicographically with the first axis running fastest.

    Args:
        dimension: Dimension of the trees, 0 to 3.
        lower: Minimum corner of the brick.
        upper: Maximum corner of the brick.
        divisions: Number of trees along each of the first ``dimension`` axes.
    """
    lower_arr = np.asarray(lower, dtype=np.float64)
    upper_arr = np.asarray(upper, dtype=np.float64)
    if lower_arr.shape != (3,) or upper_arr.shape != (3,):
        raise ValueError("'lower' and 'upper' must have 3 coordinates.")
    if np.any(upper_arr[:dimension] <= lower_arr[:dimension]):
        raise ValueError(f"Empty box: lower={lower_arr}, upper={upper_arr}.")

    if divisions is None:
        divisions = (1,) * dimension
    divisions = tuple(int(d) for d in divisions)
    if len(divisions) != dimension or any(d < 1 for d in divisions):
        raise ValueError(f"'divisions' must hold {dimension} positive counts, got {divisions}.")

    cmesh = CoarseMesh(create_geometry(GeometryKind.LINEAR_AXIS_ALIGNED, dimension))
    eclass = CUBE_CLASS_BY_DIMENSION[dimension]
    step = np.zeros(3)
    step[:dimension] = (upper_arr[:dimension] - lower_arr[:dimension]) / divisions

    # product() runs the last index fastest; reverse to make the first axis fastest.
    for index in product(*(range(d) for d in reversed(divisions))):
        offset = np.zeros(3)
        offset[:dimension] = index[::-1]
        v_min = lower_arr + offset * step
        v_max = v_min + step
        cmesh.add_tree(eclass, [v_min, v_max])

    logger.info(f"Created axis-aligned brick with {cmesh.num_trees} trees.")
    return cmesh


# ---- disk ----

def new_quadrangulated_disk(radius: float, inner_fraction: float = DEFAULT_DISK_INNER_FRACTION) -> CoarseMesh:
    """
    A disk in the xy-plane from 12 quads.

    Each quadrant holds a flat center quad and two side quads, in this order.

    Args:
        radius: Radius of the disk.
        inner_fraction: Half-diagonal of the center square relative to ``radius``.
    """
    _check_positive(radius=radius)
    if not 0.0 < inner_fraction < 1.0:
        raise ValueError(f"'inner_fraction' must lie in (0, 1), got {inner_fraction}.")

    ci = inner_fraction * radius / SQRT2
    co = radius / SQRT2

    quadrant = [
        # center
        [[0.0, 0.0, 0.0], [ci, 0.0, 0.0], [0.0, ci, 0.0], [ci, ci, 0.0]],
        # radial along y
        [[0.0, ci, 0.0], [ci, ci, 0.0], [0.0, co, 0.0], [co, co, 0.0]],
        # radial along x
        [[ci, 0.0, 0.0], [co, 0.0, 0.0], [ci, ci, 0.0], [co, co, 0.0]],
    ]

    cmesh = CoarseMesh(create_geometry(GeometryKind.QUADRANGULATED_DISK))
    for angle in (0.0, 90.0, 180.0, 270.0):
        rotation = Rotation.from_euler("z", angle, degrees=True)
        for vertices in quadrant:
            cmesh.add_tree(ElementClass.QUAD, rotation.apply(vertices))

    logger.info(f"Created quadrangulated disk with {cmesh.num_trees} trees.")
    return cmesh


# ---- octahedron ----

def _octahedron_faces(radius: float) -> list[npt.NDArray[np.float64]]:
    faces = []
    for signs in product((1.0, -1.0), repeat=3):
        faces.append(np.diag(signs) * radius)
    return faces


def new_triangulated_spherical_surface_octahedron(radius: float) -> CoarseMesh:
    """
    A sphere surface from the 8 triangles of an octahedron.

    Args:
        radius: Radius of the sphere.
    """
    _check_positive(radius=radius)
    cmesh = CoarseMesh(create_geometry(GeometryKind.TRIANGULATED_SPHERICAL_SURFACE))
    for face in _octahedron_faces(radius):
        cmesh.add_tree(ElementClass.TRIANGLE, face)

    logger.info(f"Created triangulated spherical surface with {cmesh.num_trees} trees.")
    return cmesh


def new_prismed_spherical_shell_octahedron(
    inner_radius: float,
    shell_thickness: float,
    num_layers: int = 1
) -> CoarseMesh:
    """
    A spherical shell from prisms stacked on the faces of an octahedron.

    Args:
        inner_radius: Inner radius of the shell.
        shell_thickness: Outer radius minus inner radius.
        num_layers: Number of prism layers through the shell.
    """
    _check_positive(inner_radius=inner_radius, shell_thickness=shell_thickness)
    radii = _layer_radii(inner_radius, shell_thickness, num_layers)

    cmesh = CoarseMesh(create_geometry(GeometryKind.PRISMED_SPHERICAL_SHELL))
    for r_in, r_out in zip(radii[:-1], radii[1:]):
        for face in _octahedron_faces(1.0):
            cmesh.add_tree(ElementClass.PRISM, np.vstack([face * r_in, face * r_out]))

    logger.info(f"Created prismed spherical shell with {cmesh.num_trees} trees.")
    return cmesh


# ---- cube faces ----

def _cube_face_patches(num_trees: int) -> list[tuple[int, int, int, float, float, float, float, float]]:
    """
    Patches of the six cube faces.

    Returns:
        List of ``(a, b, c, sign, u0, u1, v0, v1)``: the normal axis ``a`` of
        the face and its sign, the in-plane axes ``b`` and ``c`` and the patch
        bounds on them, in [-1, 1].
    """
    if num_trees < 1:
        raise ValueError(f"'num_trees' must be at least 1, got {num_trees}.")
    bounds = np.linspace(-1.0, 1.0, num_trees + 1)
    patches = []
    for a in range(3):
        b, c = [axis for axis in range(3) if axis != a]
        for sign in (1.0, -1.0):
            for j in range(num_trees):
                for i in range(num_trees):
                    patches.append((a, b, c, sign, bounds[i], bounds[i + 1], bounds[j], bounds[j + 1]))
    return patches


def _cube_face_quad(
    half_edge: float,
    a: int,
    b: int,
    c: int,
    sign: float,
    u: tuple[float, float],
    v: tuple[float, float]
) -> npt.NDArray[np.float64]:
    quad = np.zeros((4, 3))
    for corner in range(4):
        quad[corner, a] = sign * half_edge
        quad[corner, b] = half_edge * u[corner & 1]
        quad[corner, c] = half_edge * v[(corner >> 1) & 1]
    return quad


def new_quadrangulated_spherical_surface(radius: float, num_trees: int = 1) -> CoarseMesh:
    """
    A sphere surface from the faces of its inscribed cube.

    Args:
        radius: Radius of the sphere.
        num_trees: Trees along each edge of a cube face; the mesh has
            ``6 * num_trees**2`` trees.
    """
    _check_positive(radius=radius)
    half_edge = radius / SQRT3

    cmesh = CoarseMesh(create_geometry(GeometryKind.QUADRANGULATED_SPHERICAL_SURFACE))
    for a, b, c, sign, u0, u1, v0, v1 in _cube_face_patches(num_trees):
        cmesh.add_tree(ElementClass.QUAD, _cube_face_quad(half_edge, a, b, c, sign, (u0, u1), (v0, v1)))

    logger.info(f"Created quadrangulated spherical surface with {cmesh.num_trees} trees.")
    return cmesh


def new_cubed_spherical_shell(
    inner_radius: float,
    shell_thickness: float,
    num_trees: int = 1,
    num_layers: int = 1
) -> CoarseMesh:
    """
    A spherical shell from hexahedra stacked on the faces of a cube.

    Args:
        inner_radius: Inner radius of the shell.
        shell_thickness: Outer radius minus inner radius.
        num_trees: Trees along each edge of a cube face.
        num_layers: Number of hex layers through the shell.
    """
    _check_positive(inner_radius=inner_radius, shell_thickness=shell_thickness)
    radii = _layer_radii(inner_radius, shell_thickness, num_layers)

    cmesh = CoarseMesh(create_geometry(GeometryKind.CUBED_SPHERICAL_SHELL))
    for r_in, r_out in zip(radii[:-1], radii[1:]):
        for a, b, c, sign, u0, u1, v0, v1 in _cube_face_patches(num_trees):
            inner = _cube_face_quad(r_in / SQRT3, a, b, c, sign, (u0, u1), (v0, v1))
            outer = _cube_face_quad(r_out / SQRT3, a, b, c, sign, (u0, u1), (v0, v1))
            cmesh.add_tree(ElementClass.HEX, np.vstack([inner, outer]))

    logger.info(f"Created cubed spherical shell with {cmesh.num_trees} trees.")
    return cmesh


# ---- cubed sphere ----

# Radial axis of the side hexes, by position in their group of four
_SIDE_RADIAL_AXIS: tuple[int, int, int] = (1, 0, 2)


def _cubed_sphere_octant(inner: float, outer: float) -> list[npt.NDArray[np.float64]]:
    """Center hex and the three side hexes of the positive octant."""
    center = np.zeros((8, 3))
    for corner in range(8):
        bits = (corner & 1, (corner >> 1) & 1, (corner >> 2) & 1)
        center[corner] = [inner * bit for bit in bits]

    hexes = [center]
    for radial in _SIDE_RADIAL_AXIS:
        side = np.zeros((8, 3))
        for corner in range(8):
            bits = (corner & 1, (corner >> 1) & 1, (corner >> 2) & 1)
            level = outer if bits[radial] else inner
            for axis in range(3):
                side[corner, axis] = level if (axis == radial or bits[axis]) else 0.0
        hexes.append(side)
    return hexes


def new_cubed_sphere(radius: float, inner_fraction: float = DEFAULT_SPHERE_INNER_FRACTION) -> CoarseMesh:
    """
    A solid ball from 32 hexahedra, 4 per octant.

    Each octant holds a flat center hex and three side hexes, in this order.

    Args:
        radius: Radius of the ball.
        inner_fraction: Half-diagonal of the center cube relative to ``radius``.
    """
    _check_positive(radius=radius)
    if not 0.0 < inner_fraction < 1.0:
        raise ValueError(f"'inner_fraction' must lie in (0, 1), got {inner_fraction}.")

    octant = _cubed_sphere_octant(inner_fraction * radius / SQRT3, radius / SQRT3)

    cmesh = CoarseMesh(create_geometry(GeometryKind.CUBED_SPHERE))
    for signs in product((1.0, -1.0), repeat=3):
        for vertices in octant:
            cmesh.add_tree(ElementClass.HEX, vertices * np.asarray(signs))

    logger.info(f"Created cubed sphere with {cmesh.num_trees} trees.")
    return cmesh
