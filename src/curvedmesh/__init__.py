"""
Analytic geometry mappings for the trees of a coarse mesh.

The package maps points given in the reference coordinates of a coarse-mesh
tree to physical space. It has NO knowledge of the forest (partitioning,
refinement, output); it only deals with closed-form geometry.

Structure:
    vec            - 3-vector kernel (numba)
    interpolation  - flat (multilinear / barycentric) mappings
    reference      - reference corners, centroids and quadrature points
    geometry/      - the geometry interface, the variants and the registry
    cmesh/         - a minimal tree table and example coarse meshes
"""
from curvedmesh.eclass import ElementClass
from curvedmesh.geometry import (
    ActiveTree,
    Geometry,
    GeometryKind,
    GeometryPreconditionError,
    UnsupportedOperationError,
    create_geometry,
    destroy_geometry,
)
from curvedmesh.cmesh import CoarseMesh, ElementBox

__all__ = [
    "ActiveTree",
    "CoarseMesh",
    "ElementBox",
    "ElementClass",
    "Geometry",
    "GeometryKind",
    "GeometryPreconditionError",
    "UnsupportedOperationError",
    "create_geometry",
    "destroy_geometry",
]
