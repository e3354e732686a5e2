"""
Vector Kernel
=============
Small linear-algebra primitives on 3-component vectors.

The scalar kernels are compiled with numba and follow value semantics: they
return new arrays and never modify their inputs. The ``*_rows`` helpers work
on batches of shape (N, 3).
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numba as nb

from curvedmesh.config import DEGENERACY_TOLERANCE

if TYPE_CHECKING:
    import numpy.typing as npt


@nb.njit(cache=True, fastmath=True)
def dot(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64]) -> float:
    """Euclidean inner product of two 3-vectors."""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


@nb.njit(cache=True, fastmath=True)
def cross(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Cross product ``a x b``."""
    out = np.empty(3, dtype=np.float64)
    out[0] = a[1] * b[2] - a[2] * b[1]
    out[1] = a[2] * b[0] - a[0] * b[2]
    out[2] = a[0] * b[1] - a[1] * b[0]
    return out


@nb.njit(cache=True, fastmath=True)
def norm(a: npt.NDArray[np.float64]) -> float:
    """Euclidean length of a 3-vector."""
    return np.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


@nb.njit(cache=True, fastmath=True)
def normalize(a: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """
    Unit vector pointing in the direction of ``a``.

    Raises:
        ZeroDivisionError: If the length of ``a`` is below ``DEGENERACY_TOLERANCE``.
    """
    length = norm(a)
    if length < DEGENERACY_TOLERANCE:
        raise ZeroDivisionError("Cannot normalize a zero-length vector.")
    out = np.empty(3, dtype=np.float64)
    for i in range(3):
        out[i] = a[i] / length
    return out


@nb.njit(cache=True, fastmath=True)
def dist(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64]) -> float:
    """Euclidean distance between two points."""
    d0 = a[0] - b[0]
    d1 = a[1] - b[1]
    d2 = a[2] - b[2]
    return np.sqrt(d0 * d0 + d1 * d1 + d2 * d2)


@nb.njit(cache=True, fastmath=True)
def axpy(x: npt.NDArray[np.float64], y: npt.NDArray[np.float64], alpha: float) -> npt.NDArray[np.float64]:
    """Return ``y + alpha * x``."""
    out = np.empty(3, dtype=np.float64)
    for i in range(3):
        out[i] = y[i] + alpha * x[i]
    return out


@nb.njit(cache=True, fastmath=True)
def axy(x: npt.NDArray[np.float64], alpha: float) -> npt.NDArray[np.float64]:
    """Return ``alpha * x``."""
    out = np.empty(3, dtype=np.float64)
    for i in range(3):
        out[i] = alpha * x[i]
    return out


@nb.njit(cache=True, fastmath=True)
def diff(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Return ``a - b``."""
    out = np.empty(3, dtype=np.float64)
    for i in range(3):
        out[i] = a[i] - b[i]
    return out


@nb.njit(cache=True, fastmath=True)
def rescale(a: npt.NDArray[np.float64], new_length: float) -> npt.NDArray[np.float64]:
    """
    Scale ``a`` so that its length becomes ``new_length``.

    Raises:
        ZeroDivisionError: If the length of ``a`` is below ``DEGENERACY_TOLERANCE``.
    """
    length = norm(a)
    if length < DEGENERACY_TOLERANCE:
        raise ZeroDivisionError("Cannot rescale a zero-length vector.")
    factor = new_length / length
    out = np.empty(3, dtype=np.float64)
    for i in range(3):
        out[i] = factor * a[i]
    return out


@nb.njit(cache=True, fastmath=True)
def tri_normal(
    p1: npt.NDArray[np.float64],
    p2: npt.NDArray[np.float64],
    p3: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Non-normalized normal of the triangle (p1, p2, p3): ``(p2 - p1) x (p3 - p1)``.
    """
    return cross(diff(p2, p1), diff(p3, p1))


def norm_rows(points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Euclidean length of every row of an (N, 3) array."""
    return np.linalg.norm(points, axis=1)


def normalize_rows(points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """
    Normalize every row of an (N, 3) array.

    Raises:
        ZeroDivisionError: If any row is shorter than ``DEGENERACY_TOLERANCE``.
    """
    lengths = norm_rows(points)
    if np.any(lengths < DEGENERACY_TOLERANCE):
        raise ZeroDivisionError("Cannot normalize a zero-length vector.")
    return points / lengths[:, np.newaxis]


def rescale_rows(
    points: npt.NDArray[np.float64],
    new_lengths: float | npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Scale every row of an (N, 3) array to the given length(s).

    Args:
        points: (N, 3) array of vectors.
        new_lengths: A single length or an (N,) array of lengths.

    Raises:
        ZeroDivisionError: If any row is shorter than ``DEGENERACY_TOLERANCE``.
    """
    lengths = norm_rows(points)
    if np.any(lengths < DEGENERACY_TOLERANCE):
        raise ZeroDivisionError("Cannot rescale a zero-length vector.")
    factors = np.asarray(new_lengths, dtype=np.float64) / lengths
    return points * factors[:, np.newaxis]
