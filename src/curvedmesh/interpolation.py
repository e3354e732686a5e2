"""
Flat (uncorrected) mappings from reference coordinates to physical space.

Every curvilinear geometry starts from one of these maps and then applies its
own correction.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from curvedmesh.eclass import ElementClass

if TYPE_CHECKING:
    import numpy.typing as npt


def multilinear_weights(
    ref_coords: npt.NDArray[np.float64],
    interpolation_dim: int
) -> npt.NDArray[np.float64]:
    """
    Weights of the ``2**d`` cube corners at the given reference points.

    Corner ``i`` sits at reference position ``(i & 1, (i >> 1) & 1, (i >> 2) & 1)``.

    Args:
        ref_coords: (N, >= d) array of reference coordinates.
        interpolation_dim: Interpolation dimension d (0 to 3).

    Returns:
        (N, 2**d) array of corner weights.
    """
    n_points = ref_coords.shape[0]
    n_corners = 1 << interpolation_dim
    weights = np.ones((n_points, n_corners), dtype=np.float64)
    for corner in range(n_corners):
        for axis in range(interpolation_dim):
            xi = ref_coords[:, axis]
            if (corner >> axis) & 1:
                weights[:, corner] *= xi
            else:
                weights[:, corner] *= 1.0 - xi
    return weights


def linear_interpolation(
    ref_coords: npt.NDArray[np.float64],
    corner_values: npt.NDArray[np.float64],
    interpolation_dim: int
) -> npt.NDArray[np.float64]:
    """
    Linear, bilinear or trilinear interpolation of corner values.

    Only the first ``2**interpolation_dim`` rows of ``corner_values`` are used,
    so the base face of a hexahedron can be interpolated with d = 2.

    Args:
        ref_coords: (N, >= d) array of reference coordinates in [0, 1]^d.
        corner_values: (>= 2**d, k) array of values at the cube corners.
        interpolation_dim: Interpolation dimension d (0 to 3).

    Returns:
        (N, k) array of interpolated values.
    """
    if not 0 <= interpolation_dim <= 3:
        raise ValueError(f"Unsupported interpolation dimension: {interpolation_dim}. "
                         f"'interpolation_dim' must be 0, 1, 2 or 3.")
    weights = multilinear_weights(ref_coords, interpolation_dim)
    return weights @ corner_values[:1 << interpolation_dim]


def _triangle(
    vertices: npt.NDArray[np.float64],
    x: npt.NDArray[np.float64],
    y: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    # Reference triangle (0, 0), (1, 0), (1, 1)
    return (
        vertices[0]
        + x[:, np.newaxis] * (vertices[1] - vertices[0])
        + y[:, np.newaxis] * (vertices[2] - vertices[1])
    )


def compute_linear_geometry(
    eclass: ElementClass,
    vertices: npt.NDArray[np.float64],
    ref_coords: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Flat mapping of a tree of the given class.

    Reference domains:
        - line, quad, hex: the unit cube, corners ordered ``x + 2y + 4z``
        - triangle: ``0 <= y <= x <= 1``
        - tet: ``0 <= z <= y <= x <= 1``
        - prism: triangle times ``0 <= z <= 1``, base corners first
        - pyramid: ``0 <= z <= min(x, y)``, apex at (1, 1, 1)

    Args:
        eclass: Topology of the tree.
        vertices: (num_corners, 3) array of corner control points.
        ref_coords: (N, dim) array of reference coordinates.

    Returns:
        (N, 3) array of physical coordinates.
    """
    n_points = ref_coords.shape[0]

    if eclass == ElementClass.VERTEX:
        return np.repeat(vertices[:1], n_points, axis=0)

    if eclass.is_cube:
        return linear_interpolation(ref_coords, vertices, eclass.dimension)

    if eclass == ElementClass.TRIANGLE:
        return _triangle(vertices, ref_coords[:, 0], ref_coords[:, 1])

    if eclass == ElementClass.TET:
        z = ref_coords[:, 2]
        return _triangle(vertices, ref_coords[:, 0], ref_coords[:, 1]) + z[:, np.newaxis] * (vertices[3] - vertices[2])

    if eclass == ElementClass.PRISM:
        z = ref_coords[:, 2][:, np.newaxis]
        base = _triangle(vertices[:3], ref_coords[:, 0], ref_coords[:, 1])
        top = _triangle(vertices[3:6], ref_coords[:, 0], ref_coords[:, 1])
        return (1.0 - z) * base + z * top

    if eclass == ElementClass.PYRAMID:
        z = ref_coords[:, 2]
        height = 1.0 - z
        # Collapse the base coordinates towards the apex; at the apex any base point works.
        safe_height = np.where(height > 0.0, height, 1.0)
        base_coords = (ref_coords[:, :2] - z[:, np.newaxis]) / safe_height[:, np.newaxis]
        base = linear_interpolation(base_coords, vertices[:4], 2)
        return height[:, np.newaxis] * base + z[:, np.newaxis] * vertices[4]

    raise ValueError(f"Unknown element class: {eclass}")
