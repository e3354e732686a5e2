"""
Geometry Interface
==================
Defines the contract shared by all analytic geometries and the tree context
they are evaluated on.

A geometry maps batches of reference points of one coarse-mesh tree to
physical space. The tree it works on is not stored on the geometry; it is
passed in as an :class:`ActiveTree` with every call, so one geometry
instance can be shared by concurrent callers.

Capabilities:
    evaluate                     - required
    evaluate_jacobian            - required by the contract, may be unsupported
    point_batch_inside_element   - optional

Errors:
    UnsupportedOperationError: the variant does not implement a capability.
    GeometryPreconditionError: the caller broke the contract (malformed tree,
        degenerate control points, destroyed geometry).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging
from typing import Any, Protocol, TYPE_CHECKING

import numpy as np

from curvedmesh.config import DEFAULT_INSIDE_TOLERANCE, DEGENERACY_TOLERANCE
from curvedmesh.eclass import ElementClass

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class UnsupportedOperationError(NotImplementedError):
    """A geometry was asked for a capability it does not implement."""


class GeometryPreconditionError(ValueError):
    """A geometry was called with a context that violates its contract."""


class Forest(Protocol):
    """The part of the forest used by ``point_batch_inside_element``."""

    def element_coordinate(self, tree_id: int, element: Any, corner: int) -> npt.NDArray[np.float64]:
        """Physical coordinates of the given corner of an element."""
        ...


@dataclass(frozen=True, eq=False)
class ActiveTree:
    """
    The tree a geometry is evaluated on.

    Attributes:
        tree_id: Global index of the tree in its coarse mesh.
        eclass: Topology of the tree.
        vertices: (n, 3) array of corner control points in physical space.
    """
    tree_id: int
    eclass: ElementClass
    vertices: npt.NDArray[np.float64] = field(repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "eclass", ElementClass(self.eclass))
        vertices = np.array(self.vertices, dtype=np.float64)
        if vertices.size % 3 != 0:
            raise GeometryPreconditionError(
                f"Tree {self.tree_id}: control points must have 3 coordinates each, got {vertices.size} values."
            )
        vertices = vertices.reshape(-1, 3)
        vertices.setflags(write=False)
        object.__setattr__(self, "vertices", vertices)

    @property
    def num_vertices(self) -> int:
        return self.vertices.shape[0]


def reciprocal(value: float) -> float:
    """
    Return ``1 / value``.

    Raises:
        ZeroDivisionError: If ``value`` is numerically zero.
    """
    if abs(value) < DEGENERACY_TOLERANCE:
        raise ZeroDivisionError("Plane and line are parallel.")
    return 1.0 / value


def as_reference_batch(ref_coords: npt.ArrayLike, dimension: int) -> npt.NDArray[np.float64]:
    """
    Convert reference coordinates to a C-contiguous (N, dimension) array.

    A flat sequence of ``N * dimension`` numbers is accepted as well.

    Raises:
        GeometryPreconditionError: If the coordinates cannot be split into
            points of the given dimension.
    """
    coords = np.asarray(ref_coords, dtype=np.float64)
    if dimension == 0:
        n_points = coords.shape[0] if coords.ndim > 0 else 1
        return np.zeros((n_points, 0), dtype=np.float64)
    if coords.ndim == 2 and coords.shape[1] != dimension:
        raise GeometryPreconditionError(
            f"Expected reference points of dimension {dimension}, got shape {coords.shape}."
        )
    if coords.size % dimension != 0:
        raise GeometryPreconditionError(
            f"Cannot split {coords.size} reference coordinates into points of dimension {dimension}."
        )
    return np.ascontiguousarray(coords.reshape(-1, dimension))


class Geometry(ABC):
    """
    Abstract base class for analytic geometries.

    Subclasses define ``KEY`` (their kind), ``DIMENSION`` (when fixed) and
    ``ECLASSES`` (the accepted tree classes), and implement :meth:`_evaluate`. They may override
    :meth:`_evaluate_jacobian` and :meth:`_point_batch_inside_element`.
    """
    KEY: str = "base"
    DIMENSION: int | None = None
    ECLASSES: tuple[ElementClass, ...] = ()

    def __init__(self, dimension: int | None = None, name: str | None = None) -> None:
        """
        Initialize the geometry.

        Args:
            dimension: Reference dimension of the trees the geometry maps;
                defaults to ``DIMENSION``.
            name: Name of the geometry; defaults to ``KEY``.
        """
        if dimension is None:
            dimension = self.DIMENSION
        if dimension is None:
            raise ValueError(f"{self.__class__.__name__} requires a dimension.")
        self._dimension = dimension
        self._name = name if name is not None else str(self.KEY)
        self._destroyed = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self._name}', dimension={self._dimension})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def supports_jacobian(self) -> bool:
        """Whether :meth:`evaluate_jacobian` returns a result."""
        return type(self)._evaluate_jacobian is not Geometry._evaluate_jacobian

    @property
    def supports_point_inside(self) -> bool:
        """Whether :meth:`point_batch_inside_element` returns a result."""
        return type(self)._point_batch_inside_element is not Geometry._point_batch_inside_element

    def destroy(self) -> None:
        """Release the geometry. Any later call raises ``GeometryPreconditionError``."""
        self._destroyed = True

    # ---- public capabilities ----

    def evaluate(self, tree: ActiveTree, ref_coords: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Map reference points of ``tree`` to physical space.

        Args:
            tree: The tree the points belong to.
            ref_coords: (N, dim) reference coordinates.

        Returns:
            (N, 3) physical coordinates, in input order.
        """
        points = self._prepare(tree, ref_coords)
        if points.shape[0] == 0:
            return np.empty((0, 3), dtype=np.float64)
        try:
            return self._evaluate(tree, points)
        except ZeroDivisionError as e:
            raise self._degenerate(tree, e) from e

    def evaluate_jacobian(self, tree: ActiveTree, ref_coords: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Jacobian of the mapping at reference points of ``tree``.

        Returns:
            (N, dim, 3) array; entry ``[k, i, j]`` is ``d x_j / d xi_i`` at point k.

        Raises:
            UnsupportedOperationError: If the geometry does not implement Jacobians.
        """
        points = self._prepare(tree, ref_coords)
        if points.shape[0] == 0 and self.supports_jacobian:
            return np.empty((0, points.shape[1], 3), dtype=np.float64)
        try:
            return self._evaluate_jacobian(tree, points)
        except ZeroDivisionError as e:
            raise self._degenerate(tree, e) from e

    def point_batch_inside_element(
        self,
        forest: Forest,
        tree_id: int,
        element: Any,
        points: npt.ArrayLike,
        tolerance: float = DEFAULT_INSIDE_TOLERANCE
    ) -> npt.NDArray[np.bool_]:
        """
        Test which physical points lie inside an element.

        Args:
            forest: Provides the physical corners of the element.
            tree_id: Tree the element belongs to.
            element: The element, opaque to the geometry.
            points: (N, 3) physical points.
            tolerance: Widening of the element in every direction.

        Returns:
            (N,) boolean array.

        Raises:
            UnsupportedOperationError: If the geometry does not implement the test.
        """
        self._check_alive()
        physical = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        return self._point_batch_inside_element(forest, tree_id, element, physical, tolerance)

    # ---- hooks for subclasses ----

    @abstractmethod
    def _evaluate(self, tree: ActiveTree, ref_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Map a non-empty, validated (N, dim) batch."""
        pass

    def _evaluate_jacobian(
        self,
        tree: ActiveTree,
        ref_coords: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        raise UnsupportedOperationError(f"Geometry '{self._name}' does not implement evaluate_jacobian.")

    def _point_batch_inside_element(
        self,
        forest: Forest,
        tree_id: int,
        element: Any,
        points: npt.NDArray[np.float64],
        tolerance: float
    ) -> npt.NDArray[np.bool_]:
        raise UnsupportedOperationError(f"Geometry '{self._name}' does not implement point_batch_inside_element.")

    def _expected_num_vertices(self, eclass: ElementClass) -> int:
        """Number of control points a tree of the given class must carry."""
        return eclass.num_corners

    # ---- validation ----

    def _check_alive(self) -> None:
        if self._destroyed:
            raise GeometryPreconditionError(f"Geometry '{self._name}' has been destroyed.")

    def _check_tree(self, tree: ActiveTree) -> None:
        if self.ECLASSES and tree.eclass not in self.ECLASSES:
            accepted = ", ".join(str(e) for e in self.ECLASSES)
            raise GeometryPreconditionError(
                f"Geometry '{self._name}' cannot map {tree.eclass} trees (accepted: {accepted})."
            )
        if tree.eclass.dimension != self._dimension:
            raise GeometryPreconditionError(
                f"Geometry '{self._name}' has dimension {self._dimension}, "
                f"tree {tree.tree_id} ({tree.eclass}) has dimension {tree.eclass.dimension}."
            )
        if tree.tree_id < 0:
            raise GeometryPreconditionError(f"Invalid tree id {tree.tree_id}.")
        expected = self._expected_num_vertices(tree.eclass)
        if tree.num_vertices != expected:
            raise GeometryPreconditionError(
                f"Tree {tree.tree_id} ({tree.eclass}) has {tree.num_vertices} control points, "
                f"geometry '{self._name}' expects {expected}."
            )
        if not np.all(np.isfinite(tree.vertices)):
            raise GeometryPreconditionError(f"Tree {tree.tree_id} has non-finite control points.")

    def _prepare(self, tree: ActiveTree, ref_coords: npt.ArrayLike) -> npt.NDArray[np.float64]:
        self._check_alive()
        self._check_tree(tree)
        return as_reference_batch(ref_coords, tree.eclass.dimension)

    def _degenerate(self, tree: ActiveTree, error: ZeroDivisionError) -> GeometryPreconditionError:
        logger.error(f"Degenerate control points in tree {tree.tree_id} for geometry '{self._name}': {error}")
        return GeometryPreconditionError(
            f"Tree {tree.tree_id} has degenerate control points for geometry '{self._name}'."
        )
