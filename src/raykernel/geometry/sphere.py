"""Sphere primitive with closed-form ray-sphere distance.

The distance along a unit-length ray is found by solving

    |origin + t * direction - center|^2 = radius^2

which expands to ``t^2 + b t + c = 0`` with

    oc = origin - center
    b  = 2 * dot(oc, direction)
    c  = dot(oc, oc) - radius^2

The discriminant is ``h = b^2 - 4c``. A negative discriminant means the ray
misses and the sentinel ``-1`` is returned. Otherwise only the near root
``(-b - sqrt(h)) / 2`` is returned. The far root is never considered, so a
ray that starts inside a sphere reports no forward hit; the nearest-hit
resolver filters the negative near root out.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.geometry.sphere import Sphere, sphere_distance
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 10), radius=2.0)
    >>> # Use sphere_distance within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.func
def sphere_distance(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> ti.f32:
    """Signed distance to the near intersection of a ray and a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test.

    Returns:
        The near root of the intersection quadratic, or -1.0 if the ray's
        line misses the sphere. Values that are not greater than the
        resolver's epsilon mean "no forward hit".
    """
    oc = ray_origin - sphere.center
    b = 2.0 * tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    h = b * b - 4.0 * c

    t = -1.0
    if h >= 0.0:
        t = (-b - ti.sqrt(h)) / 2.0
    return t


@ti.func
def sphere_normal(point: vec3, sphere: Sphere) -> vec3:
    """Outward unit normal at a point on the sphere surface."""
    return (point - sphere.center) / sphere.radius


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
