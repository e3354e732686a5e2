"""
Spherical geometries built from the faces of an octahedron.

Both variants share :func:`map_triangle_to_sphere`: the reference triangle is
mapped three times, each time anchored at another corner, and the three
sphere projections are averaged. The correction straightens out the elements
near the triangle corners, which shrink under a plain radial projection
while the ones near the face center expand.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from curvedmesh import vec
from curvedmesh.eclass import ElementClass
from curvedmesh.geometry.base import ActiveTree, Geometry, reciprocal
from curvedmesh.geometry.registry import GeometryKind, register_geometry
from curvedmesh.interpolation import compute_linear_geometry

if TYPE_CHECKING:
    import numpy.typing as npt


# (shift, u_ref, v_ref, w_ref): the reference triangle seen from each of its
# corners. The local coordinates are u_ref + x * v_ref + y * w_ref.
_CORNER_FRAMES: tuple[tuple[int, tuple[float, float], tuple[float, float], tuple[float, float]], ...] = (
    (0, (0.0, 0.0), (1.0, 0.0), (-1.0, 1.0)),
    (1, (1.0, 0.0), (-1.0, 1.0), (0.0, -1.0)),
    (2, (0.0, 1.0), (0.0, -1.0), (1.0, 0.0)),
)


def _tangent_stretch(t: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Maps [0, 1] onto itself, fixing 0, 1/2 and 1."""
    return np.tan(0.5 * np.pi * (t - 0.5)) * 0.5 + 0.5


def map_triangle_to_sphere(
    vertices: npt.NDArray[np.float64],
    ref_coords: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Average of the three corner-anchored sphere projections of a triangle.

    The sphere radius is the norm of the first control point.

    Args:
        vertices: (>= 3, 3) control points; the first three span the triangle.
        ref_coords: (N, >= 2) reference coordinates; only x and y are used.

    Returns:
        (N, 3) array of averaged projections.
    """
    sphere_radius = vec.norm(vertices[0])
    x_ref = ref_coords[:, 0]
    y_ref = ref_coords[:, 1]

    out_coords = np.zeros((ref_coords.shape[0], 3), dtype=np.float64)
    for shift, u_ref, v_ref, w_ref in _CORNER_FRAMES:
        # Circular rotation of the corners according to `shift`
        u = vertices[(3 - shift) % 3]
        v = vertices[(4 - shift) % 3] - u
        w = vertices[(5 - shift) % 3] - u

        vv_ref = u_ref[0] + x_ref * v_ref[0] + y_ref * w_ref[0]
        ww_ref = u_ref[1] + x_ref * v_ref[1] + y_ref * w_ref[1]

        # TODO: the stretch is not optimal for strongly distorted triangles; a
        # correction derived from the exact spherical area would be more uniform.
        vv_corr = _tangent_stretch(vv_ref)
        ww_corr = _tangent_stretch(ww_ref)

        # The position vector pokes through the triangle plane; pull it onto the sphere.
        pos = u + vv_corr[:, np.newaxis] * v + ww_corr[:, np.newaxis] * w
        out_coords += vec.rescale_rows(pos, sphere_radius) * (1.0 / 3.0)

    return out_coords


@register_geometry
class TriangulatedSphericalSurface(Geometry):
    """
    Maps the triangular faces of an octahedron onto a sphere.

    The average of the three projections lies slightly inside the sphere away
    from the triangle edges, so the result is projected back onto it.
    """
    KEY = GeometryKind.TRIANGULATED_SPHERICAL_SURFACE
    DIMENSION = 2
    ECLASSES = (ElementClass.TRIANGLE,)

    def _evaluate(self, tree: ActiveTree, ref_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        sphere_radius = vec.norm(tree.vertices[0])
        return vec.rescale_rows(map_triangle_to_sphere(tree.vertices, ref_coords), sphere_radius)


@register_geometry
class PrismedSphericalShell(Geometry):
    """
    Maps prisms on the faces of an octahedron onto a spherical shell.

    The base triangle (control points 0 to 2) lies on the inner surface of the
    prism; the through-thickness coordinate is padded radially.
    """
    KEY = GeometryKind.PRISMED_SPHERICAL_SHELL
    DIMENSION = 3
    ECLASSES = (ElementClass.PRISM,)

    def _evaluate(self, tree: ActiveTree, ref_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        vertices = tree.vertices
        out_coords = map_triangle_to_sphere(vertices, ref_coords)

        # Normal of the base triangle and radial direction through its first corner
        n = vec.normalize(vec.tri_normal(vertices[0], vertices[1], vertices[2]))
        r = vec.normalize(vertices[0])

        inv_denominator = reciprocal(vec.dot(r, n))

        # Intersection of `r` with the plane through the flat prism point `p`
        p = compute_linear_geometry(ElementClass.PRISM, vertices, ref_coords)
        return vec.rescale_rows(out_coords, (p @ n) * inv_denominator)
