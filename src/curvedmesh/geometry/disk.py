"""
Quadrangulated disk.

The disk is built from groups of three quads: a flat center quad
(``tree_id % 3 == 0``) and two side quads that bend their outer edge onto
the circle. For side quads, control point 0 lies on a straight edge through
the center and control point 3 on the outer rim.
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


@register_geometry
class QuadrangulatedDisk(Geometry):
    """
    Maps quads arranged around a center square onto a disk.
    """
    KEY = GeometryKind.QUADRANGULATED_DISK
    DIMENSION = 2
    ECLASSES = (ElementClass.QUAD,)

    @staticmethod
    def reference_axes(tree_id: int) -> tuple[int, int]:
        """
        Radial and angular reference axis of a side quad.

        Returns:
            ``(radial, angular)`` axis indices.
        """
        return (0, 1) if tree_id % 3 == 2 else (1, 0)

    def _evaluate(self, tree: ActiveTree, ref_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        vertices = tree.vertices

        # Center quads
        if tree.tree_id % 3 == 0:
            return linear_interpolation(ref_coords, vertices, 2)

        n = vec.normalize(vertices[0])  # normal along one of the straight edges
        r = vec.normalize(vertices[3])  # radial along one of the tilted edges
        inv_denominator = reciprocal(vec.dot(r, n))

        r_coord, a_coord = self.reference_axes(tree.tree_id)
        r_ref = ref_coords[:, r_coord]
        a_ref = ref_coords[:, a_coord]

        # Rectify elements near the corners
        corr_ref_coords = np.empty_like(ref_coords)
        corr_ref_coords[:, r_coord] = r_ref
        corr_ref_coords[:, a_coord] = np.tan(0.25 * np.pi * a_ref)
        s = vec.normalize_rows(linear_interpolation(corr_ref_coords, vertices, 2))

        p = linear_interpolation(ref_coords, vertices, 2)

        # Intersection of line with a plane
        out_radius = (p @ n) * inv_denominator

        # Blend from flat to curved
        return (1.0 - r_ref)[:, np.newaxis] * p + (r_ref * out_radius)[:, np.newaxis] * s
