"""
Configuration & Global Constants
================================
This module serves as the central registry for numerical constants shared by
the geometry variants and the example coarse meshes.

Exports:
    SQRT3 (float): Ratio between the circumscribed sphere radius of a cube
        and the distance of its faces from the center.
    DEGENERACY_TOLERANCE (float): Vector norms below this value count as zero.
    DEFAULT_INSIDE_TOLERANCE (float): Default tolerance of point-in-element tests.
    DEFAULT_DISK_INNER_FRACTION (float): Size of the flat center square of the
        example disk, relative to the disk radius.
    DEFAULT_SPHERE_INNER_FRACTION (float): Size of the flat center cube of the
        example cubed sphere, relative to the sphere radius.
"""
import math

SQRT3: float = 1.7320508075688772
SQRT2: float = math.sqrt(2.0)

DEGENERACY_TOLERANCE: float = 1e-14
DEFAULT_INSIDE_TOLERANCE: float = 1e-10

DEFAULT_DISK_INNER_FRACTION: float = 0.5
DEFAULT_SPHERE_INNER_FRACTION: float = 0.5
