"""Infinite plane primitive with ray-plane distance.

A plane is stored as a unit normal ``N`` and a constant ``k`` so that every
point ``P`` on it satisfies

    dot(N, P) + k = 0

The plane ``y = 0`` is therefore ``N = (0, 1, 0), k = 0`` and the plane
``y = 5`` is ``N = (0, 1, 0), k = -5``.

A ray parallel to the plane (``dot(direction, N) == 0`` exactly) returns the
sentinel ``0``. Hits behind the origin are clamped to ``0`` as well. Both
are rejected by the nearest-hit resolver's ``t > epsilon`` filter, so ``0``
must keep meaning "no hit" for as long as that filter is in place; a hit
exactly at the ray origin is indistinguishable from a parallel ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.geometry.plane import Plane, plane_distance
    >>> ground = Plane(normal=ti.math.vec3(0, 1, 0), distance_from_origin=0.0)
    >>> # Use plane_distance within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


@ti.dataclass
class Plane:
    """An infinite plane.

    Attributes:
        normal: Unit normal of the plane (vec3).
        distance_from_origin: Constant term of dot(N, P) + k = 0.
    """

    normal: vec3
    distance_from_origin: ti.f32


@ti.func
def plane_distance(ray_origin: vec3, ray_direction: vec3, plane: Plane) -> ti.f32:
    """Distance along the ray to the plane.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        plane: The plane to test.

    Returns:
        The non-negative hit distance, or 0.0 for a parallel ray or a plane
        behind the origin.
    """
    d = tm.dot(ray_direction, plane.normal)

    t = 0.0
    if d != 0.0:
        dist = -(plane.distance_from_origin + tm.dot(ray_origin, plane.normal)) / d
        t = tm.max(dist, 0.0)
    return t


@ti.func
def make_plane(normal: vec3, distance_from_origin: ti.f32) -> Plane:
    """Create a plane from a unit normal and its constant term."""
    return Plane(normal=normal, distance_from_origin=distance_from_origin)
