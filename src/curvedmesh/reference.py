"""
Reference point batches: corners, centroids and quadrature points of the
reference domains used by :mod:`curvedmesh.interpolation`.
"""
from __future__ import annotations

from itertools import product
from typing import TYPE_CHECKING

import numpy as np

from curvedmesh.eclass import ElementClass

if TYPE_CHECKING:
    import numpy.typing as npt


_CORNERS: dict[ElementClass, list[tuple[float, ...]]] = {
    ElementClass.VERTEX: [()],
    ElementClass.LINE: [(0.0,), (1.0,)],
    ElementClass.QUAD: [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0)],
    ElementClass.TRIANGLE: [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)],
    ElementClass.HEX: [
        (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 1.0, 0.0),
        (0.0, 0.0, 1.0), (1.0, 0.0, 1.0), (0.0, 1.0, 1.0), (1.0, 1.0, 1.0),
    ],
    ElementClass.TET: [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (1.0, 1.0, 1.0)],
    ElementClass.PRISM: [
        (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0),
        (0.0, 0.0, 1.0), (1.0, 0.0, 1.0), (1.0, 1.0, 1.0),
    ],
    ElementClass.PYRAMID: [
        (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 1.0, 0.0), (1.0, 1.0, 1.0),
    ],
}

_CENTROIDS: dict[ElementClass, tuple[float, ...]] = {
    ElementClass.VERTEX: (),
    ElementClass.LINE: (0.5,),
    ElementClass.QUAD: (0.5, 0.5),
    ElementClass.TRIANGLE: (2.0 / 3.0, 1.0 / 3.0),
    ElementClass.HEX: (0.5, 0.5, 0.5),
    ElementClass.TET: (0.75, 0.5, 0.25),
    ElementClass.PRISM: (2.0 / 3.0, 1.0 / 3.0, 0.5),
    ElementClass.PYRAMID: (0.625, 0.625, 0.25),
}


def reference_corners(eclass: ElementClass) -> npt.NDArray[np.float64]:
    """
    Reference coordinates of the corners of a tree class.

    Returns:
        (num_corners, dim) array, in control point order.
    """
    return np.array(_CORNERS[eclass], dtype=np.float64).reshape(eclass.num_corners, eclass.dimension)


def reference_centroid(eclass: ElementClass) -> npt.NDArray[np.float64]:
    """
    Reference coordinates of the centroid of a tree class.

    Returns:
        (1, dim) array, ready to be passed to ``evaluate``.
    """
    return np.array(_CENTROIDS[eclass], dtype=np.float64).reshape(1, eclass.dimension)


def gauss_points_weights_line(n_points: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Generate Gauss points and weights on the unit interval [0, 1].

    Args:
        n_points: Number of integration points.

    Raises:
        ValueError: If `n_points` is not 1, 2, or 3.

    Returns:
        A tuple containing the Gauss points and weights (weights sum to 1).
    """
    if n_points == 1:
        points, weights = np.array([0.0]), np.array([2.0])
    elif n_points == 2:
        points, weights = np.array([-1/np.sqrt(3), 1/np.sqrt(3)]), np.array([1.0, 1.0])
    elif n_points == 3:
        points, weights = np.array([-np.sqrt(3/5), 0.0, np.sqrt(3/5)]), np.array([5/9, 8/9, 5/9])
    else:
        raise ValueError(f"Unsupported number of Gauss points: {n_points}. "
                         f"'n_points' must be 1, 2, or 3.")
    # [-1, 1] -> [0, 1]
    return 0.5 * (points + 1.0), 0.5 * weights


def gauss_points_weights_triangle(n_points: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Generate Gauss points and weights on the reference triangle (0, 0), (1, 0), (1, 1).

    Args:
        n_points: Number of integration points.

    Raises:
        ValueError: If `n_points` is not 1 or 3.

    Returns:
        A tuple containing the Gauss points (N, 2) and weights (sum 1/2).
    """
    if n_points == 1:
        barycentric = np.array([[1.0/3.0, 1.0/3.0, 1.0/3.0]])
        weights = np.array([1.0])
    elif n_points == 3:
        barycentric = np.array([
            [2.0/3.0, 1.0/6.0, 1.0/6.0],
            [1.0/6.0, 2.0/3.0, 1.0/6.0],
            [1.0/6.0, 1.0/6.0, 2.0/3.0]]
        )
        weights = np.array([1.0/3.0, 1.0/3.0, 1.0/3.0])
    else:
        raise ValueError(f"Unsupported number of Gauss points: {n_points}. "
                         f"'n_points' must be 1 or 3.")
    # Barycentric (l0, l1, l2) -> x = l1 + l2, y = l2
    points = np.column_stack((barycentric[:, 1] + barycentric[:, 2], barycentric[:, 2]))
    return points, 0.5 * weights


def gauss_points_weights(
    eclass: ElementClass,
    n_points: int
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Quadrature rule on the reference domain of a tree class.

    Cube classes use the tensor product of the 1D rule with ``n_points`` per
    axis; the triangle uses the 1- or 3-point rule; the prism combines both.

    Raises:
        ValueError: For unsupported classes or point counts.
    """
    if eclass == ElementClass.VERTEX:
        return np.empty((1, 0)), np.array([1.0])

    if eclass.is_cube:
        points_1d, weights_1d = gauss_points_weights_line(n_points)
        points = np.array(list(product(points_1d, repeat=eclass.dimension)))[:, ::-1]
        weights = np.prod(np.array(list(product(weights_1d, repeat=eclass.dimension))), axis=1)
        return np.ascontiguousarray(points), weights

    if eclass == ElementClass.TRIANGLE:
        return gauss_points_weights_triangle(n_points)

    if eclass == ElementClass.PRISM:
        tri_points, tri_weights = gauss_points_weights_triangle(n_points)
        line_points, line_weights = gauss_points_weights_line(min(n_points, 3))
        points = np.array([(x, y, z) for z in line_points for x, y in tri_points])
        weights = np.array([wt * wl for wl in line_weights for wt in tri_weights])
        return points, weights

    raise ValueError(f"No quadrature rule for element class '{eclass}'.")
