"""
Linear, axis-aligned geometry.

A tree is fully described by two control points: its minimum and its maximum
corner. Reference axis ``i`` is mapped linearly onto physical axis ``i``; the
physical axes beyond the tree dimension keep the coordinate of the minimum
corner.
"""
from __future__ import annotations

from typing import Any, TYPE_CHECKING

import numpy as np

from curvedmesh.eclass import ElementClass
from curvedmesh.geometry.base import ActiveTree, Forest, Geometry
from curvedmesh.geometry.registry import GeometryKind, register_geometry

if TYPE_CHECKING:
    import numpy.typing as npt


def compute_linear_axis_aligned_geometry(
    vertices: npt.NDArray[np.float64],
    ref_coords: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """
    Map reference points of an axis-aligned tree.

    Args:
        vertices: (2, 3) array with the minimum and maximum corner.
        ref_coords: (N, dim) array of reference coordinates, dim <= 3.

    Returns:
        (N, 3) array of physical coordinates.
    """
    dimension = ref_coords.shape[1]
    extent = vertices[1] - vertices[0]
    out = np.repeat(vertices[:1], ref_coords.shape[0], axis=0)
    out[:, :dimension] += ref_coords * extent[:dimension]
    return out


@register_geometry
class LinearAxisAlignedGeometry(Geometry):
    """
    Axis-aligned box geometry for vertices, lines, quads and hexahedra.
    """
    KEY = GeometryKind.LINEAR_AXIS_ALIGNED
    ECLASSES = (ElementClass.VERTEX, ElementClass.LINE, ElementClass.QUAD, ElementClass.HEX)

    def __init__(self, dimension: int) -> None:
        """
        Initialize the geometry.

        Args:
            dimension: Dimension of the trees, 0 to 3.
        """
        if not 0 <= dimension <= 3:
            raise ValueError(f"Unsupported dimension: {dimension}. 'dimension' must be 0, 1, 2 or 3.")
        super().__init__(dimension=dimension, name=f"{self.KEY}_{dimension}")

    def _expected_num_vertices(self, eclass: ElementClass) -> int:
        # Minimum and maximum corner, independent of the tree class
        return 2

    def _evaluate(self, tree: ActiveTree, ref_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return compute_linear_axis_aligned_geometry(tree.vertices, ref_coords)

    def _evaluate_jacobian(
        self,
        tree: ActiveTree,
        ref_coords: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        """
        The Jacobian is constant: reference axis ``i`` only moves physical axis ``i``.
        """
        dimension = ref_coords.shape[1]
        extent = tree.vertices[1] - tree.vertices[0]
        jacobian = np.zeros((dimension, 3), dtype=np.float64)
        for i in range(dimension):
            jacobian[i, i] = extent[i]
        return np.repeat(jacobian[np.newaxis], ref_coords.shape[0], axis=0)

    def _point_batch_inside_element(
        self,
        forest: Forest,
        tree_id: int,
        element: Any,
        points: npt.NDArray[np.float64],
        tolerance: float
    ) -> npt.NDArray[np.bool_]:
        """
        A point is inside if every coordinate lies between the element's
        minimum and maximum corner, widened by ``tolerance``.
        """
        v_min = np.asarray(forest.element_coordinate(tree_id, element, 0), dtype=np.float64)
        v_max = np.asarray(forest.element_coordinate(tree_id, element, 1), dtype=np.float64)
        return np.all((v_min - tolerance <= points) & (points <= v_max + tolerance), axis=1)
