"""
Cubed sphere: a solid ball from a flat center hexahedron and side hexahedra.

Trees come in groups of four: the center hex (``tree_id % 4 == 0``) is mapped
trilinearly, the three side hexes blend from the flat inner face to the
spherical outer face.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from curvedmesh import vec
from curvedmesh.eclass import ElementClass
from curvedmesh.geometry.base import ActiveTree, Geometry, reciprocal
from curvedmesh.geometry.registry import GeometryKind, register_geometry
from curvedmesh.interpolation import linear_interpolation

if TYPE_CHECKING:
    import numpy.typing as npt


# tree_id % 4 -> (radial, theta, phi) reference axes of the side hexes
_SIDE_AXES: dict[int, tuple[int, int, int]] = {
    1: (1, 0, 2),
    2: (0, 1, 2),
    3: (2, 0, 1),
}


@register_geometry
class CubedSphere(Geometry):
    """
    Maps groups of a center hex and three side hexes onto a ball.

    For side hexes, control point 0 lies on a straight edge through the center
    and control point 7 on the outer sphere.
    """
    KEY = GeometryKind.CUBED_SPHERE
    DIMENSION = 3
    ECLASSES = (ElementClass.HEX,)

    @staticmethod
    def reference_axes(tree_id: int) -> tuple[int, int, int] | None:
        """
        Radial, theta and phi reference axis of a side hex.

        Returns:
            ``(radial, theta, phi)``, or None for center hexes.
        """
        return _SIDE_AXES.get(tree_id % 4)

    def _evaluate(self, tree: ActiveTree, ref_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        vertices = tree.vertices

        axes = self.reference_axes(tree.tree_id)
        if axes is None:
            return linear_interpolation(ref_coords, vertices, 3)

        n = vec.normalize(vertices[0])
        r = vec.normalize(vertices[7])
        inv_denominator = reciprocal(vec.dot(r, n))

        r_coord, t_coord, p_coord = axes
        r_ref = ref_coords[:, r_coord]

        # Rectify elements near the corners on both angular axes
        corr_ref_coords = np.empty_like(ref_coords)
        corr_ref_coords[:, r_coord] = r_ref
        corr_ref_coords[:, t_coord] = np.tan(0.25 * np.pi * ref_coords[:, t_coord])
        corr_ref_coords[:, p_coord] = np.tan(0.25 * np.pi * ref_coords[:, p_coord])
        s = vec.normalize_rows(linear_interpolation(corr_ref_coords, vertices, 3))

        p = linear_interpolation(ref_coords, vertices, 3)

        # Intersection of line with a plane
        out_radius = (p @ n) * inv_denominator

        # Blend from flat to curved
        return (1.0 - r_ref)[:, np.newaxis] * p + (r_ref * out_radius)[:, np.newaxis] * s
