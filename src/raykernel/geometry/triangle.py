"""Triangle primitive with Moller-Trumbore ray-triangle distance.

With edges ``e1 = v1 - v0`` and ``e2 = v2 - v0`` the test computes

    p   = cross(direction, e2)
    det = dot(e1, p)
    s   = origin - v0
    u   = dot(s, p) / det
    q   = cross(s, e1)
    v   = dot(direction, q) / det
    t   = dot(e2, q) / det

and rejects the hit (sentinel ``-1``) when ``det < TRIANGLE_EPSILON``,
``u`` is outside ``[0, 1]``, ``v < 0`` or ``u + v > 1``.

The determinant check is one-sided. A negative determinant means the ray
sees the back face, so back faces are culled: a triangle is only visible
from the side its face normal ``normalize(cross(e1, e2))`` points to. Wind
vertices counter-clockwise as seen from the visible side (right-hand rule).
Shadow and bounce rays leaving the front face of a triangle therefore never
re-hit it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.geometry.triangle import Triangle, triangle_distance
    >>> tri = Triangle(
    ...     v0=ti.math.vec3(-1, -1, 5),
    ...     v1=ti.math.vec3(0, 1, 5),
    ...     v2=ti.math.vec3(1, -1, 5),
    ... )
    >>> # Visible from the origin looking down +z
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

# Smallest determinant accepted as a front-facing, non-degenerate hit
TRIANGLE_EPSILON = 1e-6


@ti.dataclass
class Triangle:
    """A triangle given by its three vertices.

    Attributes:
        v0: First vertex (vec3).
        v1: Second vertex (vec3).
        v2: Third vertex (vec3).
    """

    v0: vec3
    v1: vec3
    v2: vec3


@ti.func
def triangle_distance(ray_origin: vec3, ray_direction: vec3, tri: Triangle) -> ti.f32:
    """Distance along the ray to a front-facing triangle.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        tri: The triangle to test.

    Returns:
        The hit distance, or -1.0 if the ray misses, is parallel, or hits
        the back face.
    """
    e1 = tri.v1 - tri.v0
    e2 = tri.v2 - tri.v0
    p = tm.cross(ray_direction, e2)
    det = tm.dot(e1, p)

    t = -1.0
    if det >= TRIANGLE_EPSILON:
        inv_det = 1.0 / det
        s = ray_origin - tri.v0
        u = tm.dot(s, p) * inv_det
        if 0.0 <= u <= 1.0:
            q = tm.cross(s, e1)
            v = tm.dot(ray_direction, q) * inv_det
            if v >= 0.0 and u + v <= 1.0:
                t = tm.dot(e2, q) * inv_det
    return t


@ti.func
def triangle_normal(tri: Triangle) -> vec3:
    """Unit face normal from the winding order, normalize(cross(e1, e2))."""
    return tm.normalize(tm.cross(tri.v1 - tri.v0, tri.v2 - tri.v0))


@ti.func
def make_triangle(v0: vec3, v1: vec3, v2: vec3) -> Triangle:
    """Create a triangle from three vertices."""
    return Triangle(v0=v0, v1=v1, v2=v2)
