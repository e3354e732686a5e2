"""
Coarse Mesh
===========
A minimal, serial table of coarse-mesh trees bound to one geometry.

It stands in for the tree lookup of the forest: it stores the topology and
the corner control points of every tree, builds the :class:`ActiveTree` for
an evaluation and forwards the call to the geometry. The mesh owns its
geometry and destroys it with itself.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterator, Sequence, TYPE_CHECKING

import numpy as np

from curvedmesh.eclass import ElementClass
from curvedmesh.geometry.base import ActiveTree, Geometry
from curvedmesh.geometry.registry import destroy_geometry
from curvedmesh.reference import reference_centroid, reference_corners

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementBox:
    """
    An axis-aligned element, stored by its two extreme reference corners.

    Corner 0 is ``lower``, corner 1 is ``upper``.
    """
    lower: tuple[float, ...]
    upper: tuple[float, ...]

    def corner(self, corner: int) -> tuple[float, ...]:
        if corner == 0:
            return self.lower
        if corner == 1:
            return self.upper
        raise ValueError(f"An element box has corners 0 and 1, got {corner}.")


class CoarseMesh:
    """
    Trees of a coarse mesh and the geometry that maps them.
    """
    def __init__(self, geometry: Geometry) -> None:
        """
        Initialize an empty mesh.

        Args:
            geometry: The geometry of all trees. The mesh takes ownership.
        """
        self.geometry = geometry
        self._trees: list[ActiveTree] = []

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(geometry='{self.geometry.name}', num_trees={self.num_trees})"

    def __len__(self) -> int:
        return len(self._trees)

    def __iter__(self) -> Iterator[ActiveTree]:
        return iter(self._trees)

    def __enter__(self) -> CoarseMesh:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.destroy()

    @property
    def num_trees(self) -> int:
        return len(self._trees)

    def add_tree(self, eclass: ElementClass | str, vertices: Sequence[Sequence[float]] | npt.NDArray[np.float64]) -> int:
        """
        Append a tree.

        Args:
            eclass: Topology of the tree.
            vertices: Corner control points, 3 coordinates each.

        Returns:
            The id of the new tree.
        """
        tree_id = len(self._trees)
        self._trees.append(ActiveTree(tree_id=tree_id, eclass=ElementClass(eclass), vertices=vertices))
        return tree_id

    def tree(self, tree_id: int) -> ActiveTree:
        """The tree context of ``tree_id``."""
        if not 0 <= tree_id < len(self._trees):
            raise KeyError(f"No tree with id {tree_id} (mesh has {len(self._trees)} trees).")
        return self._trees[tree_id]

    def evaluate(self, tree_id: int, ref_coords: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Map reference points of a tree to physical space."""
        return self.geometry.evaluate(self.tree(tree_id), ref_coords)

    def evaluate_jacobian(self, tree_id: int, ref_coords: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Jacobian of the mapping of a tree; see :meth:`Geometry.evaluate_jacobian`."""
        return self.geometry.evaluate_jacobian(self.tree(tree_id), ref_coords)

    def tree_corners(self, tree_id: int) -> npt.NDArray[np.float64]:
        """Physical position of the reference corners of a tree."""
        tree = self.tree(tree_id)
        return self.geometry.evaluate(tree, reference_corners(tree.eclass))

    def tree_centroid(self, tree_id: int) -> npt.NDArray[np.float64]:
        """Physical position of the reference centroid of a tree, shape (3,)."""
        tree = self.tree(tree_id)
        return self.geometry.evaluate(tree, reference_centroid(tree.eclass))[0]

    def element_coordinate(self, tree_id: int, element: ElementBox, corner: int) -> npt.NDArray[np.float64]:
        """
        Physical coordinates of a corner of an element of a tree.

        This lets the mesh act as the forest of
        :meth:`Geometry.point_batch_inside_element`.
        """
        return self.evaluate(tree_id, element.corner(corner))[0]

    def destroy(self) -> None:
        """Drop all trees and destroy the geometry."""
        if self.geometry.is_destroyed:
            return
        self._trees.clear()
        destroy_geometry(self.geometry)
        logger.debug(f"Destroyed coarse mesh of geometry '{self.geometry.name}'.")
