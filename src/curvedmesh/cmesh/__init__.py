from curvedmesh.cmesh.cmesh import CoarseMesh, ElementBox
from curvedmesh.cmesh.examples import (
    new_axis_aligned_box,
    new_axis_aligned_brick,
    new_cubed_sphere,
    new_cubed_spherical_shell,
    new_prismed_spherical_shell_octahedron,
    new_quadrangulated_disk,
    new_quadrangulated_spherical_surface,
    new_triangulated_spherical_surface_octahedron,
)

__all__ = [
    "CoarseMesh",
    "ElementBox",
    "new_axis_aligned_box",
    "new_axis_aligned_brick",
    "new_cubed_sphere",
    "new_cubed_spherical_shell",
    "new_prismed_spherical_shell_octahedron",
    "new_quadrangulated_disk",
    "new_quadrangulated_spherical_surface",
    "new_triangulated_spherical_surface_octahedron",
]
