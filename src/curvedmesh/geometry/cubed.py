"""
Spherical geometries built from the faces of a cube.

Each tree sits on a cube face. The face is described by its outward normal,
its distance ``R`` from the origin and two orthonormal tangents; offsets in
the face plane get a tangent correction before the point is pushed onto the
sphere of radius ``R * sqrt(3)``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from curvedmesh import vec
from curvedmesh.config import DEGENERACY_TOLERANCE, SQRT3
from curvedmesh.eclass import ElementClass
from curvedmesh.geometry.base import ActiveTree, Geometry
from curvedmesh.geometry.registry import GeometryKind, register_geometry
from curvedmesh.interpolation import linear_interpolation

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class FaceFrame:
    """
    Orthonormal frame of a cube face.

    Attributes:
        normal: Outward unit normal.
        distance: Distance ``R`` of the face plane from the origin.
        tangent1: First unit tangent.
        tangent2: Second unit tangent, ``normal x tangent1``.
    """
    normal: npt.NDArray[np.float64]
    distance: float
    tangent1: npt.NDArray[np.float64]
    tangent2: npt.NDArray[np.float64]

    @property
    def origin(self) -> npt.NDArray[np.float64]:
        """Foot of the perpendicular from the sphere center onto the face."""
        return vec.axy(self.normal, self.distance)

    @classmethod
    def from_vertices(cls, vertices: npt.NDArray[np.float64]) -> FaceFrame:
        """
        Build the frame of the face spanned by control points 0, 1 and 2.

        The normal is flipped if needed so that it points away from the origin.

        Raises:
            ZeroDivisionError: If the control points are collinear or the face
                plane passes through the origin.
        """
        normal = vec.normalize(vec.tri_normal(vertices[0], vertices[1], vertices[2]))
        distance = vec.dot(vertices[0], normal)
        if abs(distance) < DEGENERACY_TOLERANCE:
            raise ZeroDivisionError("Face plane passes through the origin.")
        if distance < 0.0:
            normal = vec.axy(normal, -1.0)
            distance = -distance

        tangent1 = np.array([normal[1], normal[2], -normal[0]])
        tangent1 = vec.axpy(normal, tangent1, -vec.dot(normal, tangent1))
        tangent2 = vec.cross(normal, tangent1)

        return cls(
            normal=normal,
            distance=distance,
            tangent1=vec.normalize(tangent1),
            tangent2=vec.normalize(tangent2),
        )

    def project(self, position: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Tangent-corrected position of flat face points, before the radial rescale.

        Args:
            position: (N, 3) points on the face plane.

        Returns:
            (N, 3) corrected points on the face plane.
        """
        R = self.distance
        if R < DEGENERACY_TOLERANCE:
            raise ZeroDivisionError("Face plane passes through the origin.")
        origin = self.origin
        local_pos = position - origin

        alpha1 = R * np.tan(0.25 * np.pi * (local_pos @ self.tangent1) / R)
        alpha2 = R * np.tan(0.25 * np.pi * (local_pos @ self.tangent2) / R)

        return origin + alpha1[:, np.newaxis] * self.tangent1 + alpha2[:, np.newaxis] * self.tangent2


@register_geometry
class QuadrangulatedSphericalSurface(Geometry):
    """
    Maps the faces of a cube onto its circumscribed sphere.
    """
    KEY = GeometryKind.QUADRANGULATED_SPHERICAL_SURFACE
    DIMENSION = 2
    ECLASSES = (ElementClass.QUAD,)

    def _evaluate(self, tree: ActiveTree, ref_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        frame = FaceFrame.from_vertices(tree.vertices)
        radius = frame.distance * SQRT3

        position = linear_interpolation(ref_coords, tree.vertices, 2)
        return vec.rescale_rows(frame.project(position), radius)


@register_geometry
class CubedSphericalShell(Geometry):
    """
    Maps hexahedra stacked on the faces of a cube onto a spherical shell.

    Control points 0 to 3 span the inner face, 4 to 7 the outer face; the
    third reference coordinate runs through the shell.
    """
    KEY = GeometryKind.CUBED_SPHERICAL_SHELL
    DIMENSION = 3
    ECLASSES = (ElementClass.HEX,)

    def _evaluate(self, tree: ActiveTree, ref_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        vertices = tree.vertices
        frame = FaceFrame.from_vertices(vertices)

        inner_radius = frame.distance * SQRT3
        shell_thickness = abs(vec.dot(vertices[4], frame.normal)) * SQRT3 - inner_radius

        # Bilinear map of the inner face
        position = linear_interpolation(ref_coords, vertices, 2)
        return vec.rescale_rows(frame.project(position), inner_radius + ref_coords[:, 2] * shell_thickness)
