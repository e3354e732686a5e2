"""
Analytic geometries and their registry.

Importing this package registers every geometry kind.
"""
from curvedmesh.geometry.base import (
    ActiveTree,
    Forest,
    Geometry,
    GeometryPreconditionError,
    UnsupportedOperationError,
)
from curvedmesh.geometry.registry import (
    GeometryKind,
    create_geometry,
    destroy_geometry,
    is_geometry_kind,
    list_kinds,
    register_geometry,
)
from curvedmesh.geometry.linear_axis_aligned import LinearAxisAlignedGeometry
from curvedmesh.geometry.disk import QuadrangulatedDisk
from curvedmesh.geometry.sphere import PrismedSphericalShell, TriangulatedSphericalSurface
from curvedmesh.geometry.cubed import CubedSphericalShell, QuadrangulatedSphericalSurface
from curvedmesh.geometry.cubed_sphere import CubedSphere

__all__ = [
    "ActiveTree",
    "CubedSphere",
    "CubedSphericalShell",
    "Forest",
    "Geometry",
    "GeometryKind",
    "GeometryPreconditionError",
    "LinearAxisAlignedGeometry",
    "PrismedSphericalShell",
    "QuadrangulatedDisk",
    "QuadrangulatedSphericalSurface",
    "TriangulatedSphericalSurface",
    "UnsupportedOperationError",
    "create_geometry",
    "destroy_geometry",
    "is_geometry_kind",
    "list_kinds",
    "register_geometry",
]
