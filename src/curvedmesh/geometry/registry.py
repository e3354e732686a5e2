"""
Geometry Registry
=================
Creates geometries by kind and hands them over to the caller, who owns them
until :func:`destroy_geometry`.
"""
from __future__ import annotations

from enum import StrEnum
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from curvedmesh.geometry.base import Geometry

logger = logging.getLogger(__name__)


class GeometryKind(StrEnum):
    LINEAR_AXIS_ALIGNED = "linear_axis_aligned"
    QUADRANGULATED_DISK = "quadrangulated_disk"
    TRIANGULATED_SPHERICAL_SURFACE = "triangulated_spherical_surface"
    PRISMED_SPHERICAL_SHELL = "prismed_spherical_shell"
    QUADRANGULATED_SPHERICAL_SURFACE = "quadrangulated_spherical_surface"
    CUBED_SPHERICAL_SHELL = "cubed_spherical_shell"
    CUBED_SPHERE = "cubed_sphere"


_REGISTRY: dict[GeometryKind, type[Geometry]] = {}


def register_geometry(cls: type[Geometry]) -> type[Geometry]:
    """Class decorator to register a geometry by its KEY."""
    key = getattr(cls, "KEY", None)
    if not key:
        raise ValueError(f"{cls.__name__} must define KEY")
    _REGISTRY[GeometryKind(key)] = cls
    return cls


def create_geometry(kind: GeometryKind | str, dimension: int | None = None) -> Geometry:
    """
    Create a geometry of the given kind.

    Args:
        kind: Kind of the geometry.
        dimension: Reference dimension. Required for the axis-aligned kind;
            optional for the others, which have a fixed dimension.

    Raises:
        KeyError: If no geometry is registered for ``kind``.
        ValueError: If ``dimension`` does not fit the kind.
    """
    try:
        key = GeometryKind(kind)
    except ValueError:
        raise KeyError(f"No geometry registered for kind '{kind}'") from None
    cls = _REGISTRY.get(key)
    if not cls:
        raise KeyError(f"No geometry registered for kind '{kind}'")

    fixed_dimension = getattr(cls, "DIMENSION", None)
    if fixed_dimension is None:
        if dimension is None:
            raise ValueError(f"Geometry kind '{key}' requires a dimension.")
        geometry = cls(dimension)
    else:
        if dimension is not None and dimension != fixed_dimension:
            raise ValueError(f"Geometry kind '{key}' has dimension {fixed_dimension}, got {dimension}.")
        geometry = cls()

    logger.debug(f"Created geometry '{geometry.name}'.")
    return geometry


def destroy_geometry(geometry: Geometry) -> None:
    """Release a geometry created by :func:`create_geometry`."""
    if geometry.is_destroyed:
        raise ValueError(f"Geometry '{geometry.name}' has already been destroyed.")
    geometry.destroy()
    logger.debug(f"Destroyed geometry '{geometry.name}'.")


def is_geometry_kind(geometry: Geometry, kind: GeometryKind | str) -> bool:
    """
    Whether ``geometry`` is an instance of the geometry registered for ``kind``.

    Raises:
        KeyError: If ``kind`` is not a geometry kind.
    """
    try:
        key = GeometryKind(kind)
    except ValueError:
        raise KeyError(f"No geometry registered for kind '{kind}'") from None
    cls = _REGISTRY.get(key)
    return cls is not None and isinstance(geometry, cls)


def list_kinds() -> list[GeometryKind]:
    return list(_REGISTRY.keys())
