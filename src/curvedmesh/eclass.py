"""
Element topology classes of coarse-mesh trees.
"""
from __future__ import annotations

from enum import StrEnum


class ElementClass(StrEnum):
    VERTEX = "vertex"
    LINE = "line"
    QUAD = "quad"
    TRIANGLE = "triangle"
    HEX = "hex"
    TET = "tet"
    PRISM = "prism"
    PYRAMID = "pyramid"

    @property
    def dimension(self) -> int:
        """Reference dimension of the class."""
        return _DIMENSION[self]

    @property
    def num_corners(self) -> int:
        """Number of corner control points of a tree of this class."""
        return _NUM_CORNERS[self]

    @property
    def is_cube(self) -> bool:
        """True for the tensor-product classes (vertex, line, quad, hex)."""
        return self in _CUBE_CLASSES


_DIMENSION: dict[ElementClass, int] = {
    ElementClass.VERTEX: 0,
    ElementClass.LINE: 1,
    ElementClass.QUAD: 2,
    ElementClass.TRIANGLE: 2,
    ElementClass.HEX: 3,
    ElementClass.TET: 3,
    ElementClass.PRISM: 3,
    ElementClass.PYRAMID: 3,
}

_NUM_CORNERS: dict[ElementClass, int] = {
    ElementClass.VERTEX: 1,
    ElementClass.LINE: 2,
    ElementClass.QUAD: 4,
    ElementClass.TRIANGLE: 3,
    ElementClass.HEX: 8,
    ElementClass.TET: 4,
    ElementClass.PRISM: 6,
    ElementClass.PYRAMID: 5,
}

_CUBE_CLASSES = frozenset({
    ElementClass.VERTEX,
    ElementClass.LINE,
    ElementClass.QUAD,
    ElementClass.HEX,
})

# Cube-type class for each reference dimension
CUBE_CLASS_BY_DIMENSION: dict[int, ElementClass] = {
    0: ElementClass.VERTEX,
    1: ElementClass.LINE,
    2: ElementClass.QUAD,
    3: ElementClass.HEX,
}
