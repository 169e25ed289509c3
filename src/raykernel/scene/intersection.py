"""Primitive storage and the nearest-hit resolver.

Primitives of every kind live in preallocated Structure-of-Arrays Taichi
fields together with their material IDs. ``trace`` walks all of them and
returns the closest valid hit as an ``Intersection`` record.

A candidate distance ``t`` is accepted only when ``epsilon < t < best``,
where ``best`` starts at the caller's bound (the frame's max distance for
camera and bounce rays, the distance to the light for shadow rays). The
strict lower bound rejects the primitives' no-hit sentinels (-1 and 0) and
keeps rays from re-hitting the surface they leave.

Primitives are visited in a fixed order: triangles, then spheres, then
planes, each in insertion order. The strict upper bound means that among
equal distances the first primitive visited wins, so results are
reproducible.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.scene.intersection import add_plane, add_sphere, clear_scene, trace
    >>> clear_scene()
    >>> add_sphere(vec3(0, 16, 0), 16.0, material_id=0)
    >>> add_plane(vec3(0, 1, 0), 0.0, material_id=1)
    >>> # Use trace(origin, direction, t_max) within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raykernel.config import epsilon
from raykernel.geometry.plane import Plane, plane_distance
from raykernel.geometry.sphere import Sphere, sphere_distance, sphere_normal
from raykernel.geometry.triangle import Triangle, triangle_distance, triangle_normal

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Intersection:
    """Result of a nearest-hit query.

    Attributes:
        hit: 1 if any primitive was hit, 0 otherwise.
        distance: Distance along the ray to the hit. Equals the search
            bound when hit == 0.
        point: World-space hit point, origin + distance * direction.
        normal: Unit surface normal at the hit (outward for spheres, the
            stored normal for planes, the winding normal for triangles).
        material_id: Material table index of the hit primitive, -1 on miss.
    """

    hit: ti.i32
    distance: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024
MAX_PLANES = 256
MAX_TRIANGLES = 4096

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Plane storage
plane_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
plane_constants = ti.field(dtype=ti.f32, shape=MAX_PLANES)
plane_material_ids = ti.field(dtype=ti.i32, shape=MAX_PLANES)
num_planes = ti.field(dtype=ti.i32, shape=())

# Triangle storage
triangle_v0 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_v1 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_v2 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_material_ids = ti.field(dtype=ti.i32, shape=MAX_TRIANGLES)
num_triangles = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive counts to zero. The field data is overwritten when
    new primitives are added.
    """
    num_spheres[None] = 0
    num_planes[None] = 0
    num_triangles[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def add_plane(normal: vec3, distance_from_origin: float, material_id: int = 0) -> int:
    """Add a plane dot(normal, P) + distance_from_origin = 0 to the scene.

    Raises:
        RuntimeError: If the maximum number of planes is exceeded.
    """
    idx = num_planes[None]
    if idx >= MAX_PLANES:
        raise RuntimeError(f"Maximum number of planes ({MAX_PLANES}) exceeded")
    plane_normals[idx] = normal
    plane_constants[idx] = distance_from_origin
    plane_material_ids[idx] = material_id
    num_planes[None] = idx + 1
    return idx


def add_triangle(v0: vec3, v1: vec3, v2: vec3, material_id: int = 0) -> int:
    """Add a single-sided triangle to the scene.

    Raises:
        RuntimeError: If the maximum number of triangles is exceeded.
    """
    idx = num_triangles[None]
    if idx >= MAX_TRIANGLES:
        raise RuntimeError(f"Maximum number of triangles ({MAX_TRIANGLES}) exceeded")
    triangle_v0[idx] = v0
    triangle_v1[idx] = v1
    triangle_v2[idx] = v2
    triangle_material_ids[idx] = material_id
    num_triangles[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_plane_count() -> int:
    """Get the number of planes in the scene."""
    return int(num_planes[None])


def get_triangle_count() -> int:
    """Get the number of triangles in the scene."""
    return int(num_triangles[None])


@ti.func
def _make_miss_record(t_max: ti.f32) -> Intersection:
    """Create an Intersection indicating no hit within t_max."""
    return Intersection(
        hit=0,
        distance=t_max,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def trace(ray_origin: vec3, ray_direction: vec3, t_max: ti.f32) -> Intersection:
    """Find the nearest primitive hit along a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        t_max: Exclusive upper bound on accepted distances.

    Returns:
        The closest Intersection, or a miss record (hit == 0).
    """
    eps = epsilon()
    result = _make_miss_record(t_max)
    best = t_max

    # Which primitive won: 0 = none, 1 = triangle, 2 = sphere, 3 = plane
    kind = 0
    index = -1

    for i in range(num_triangles[None]):
        tri = Triangle(v0=triangle_v0[i], v1=triangle_v1[i], v2=triangle_v2[i])
        t = triangle_distance(ray_origin, ray_direction, tri)
        if eps < t < best:
            best = t
            kind = 1
            index = i

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        t = sphere_distance(ray_origin, ray_direction, sphere)
        if eps < t < best:
            best = t
            kind = 2
            index = i

    for i in range(num_planes[None]):
        plane = Plane(normal=plane_normals[i], distance_from_origin=plane_constants[i])
        t = plane_distance(ray_origin, ray_direction, plane)
        if eps < t < best:
            best = t
            kind = 3
            index = i

    # Normals and material are resolved once, for the winner only
    if kind != 0:
        point = ray_origin + best * ray_direction
        normal = vec3(0.0, 0.0, 0.0)
        material_id = -1
        if kind == 1:
            tri = Triangle(v0=triangle_v0[index], v1=triangle_v1[index], v2=triangle_v2[index])
            normal = triangle_normal(tri)
            material_id = triangle_material_ids[index]
        elif kind == 2:
            sphere = Sphere(center=sphere_centers[index], radius=sphere_radii[index])
            normal = sphere_normal(point, sphere)
            material_id = sphere_material_ids[index]
        else:
            normal = plane_normals[index]
            material_id = plane_material_ids[index]

        result = Intersection(
            hit=1,
            distance=best,
            point=point,
            normal=normal,
            material_id=material_id,
        )

    return result


@ti.func
def trace_any(ray_origin: vec3, ray_direction: vec3, t_max: ti.f32) -> ti.i32:
    """Test if a ray hits any primitive closer than t_max (shadow query).

    Uses the same acceptance rule as trace(), so trace_any() == 1 exactly
    when trace().hit == 1.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        t_max: Exclusive upper bound on accepted distances.

    Returns:
        1 if any primitive was hit, 0 otherwise.
    """
    eps = epsilon()
    hit_any = 0

    for i in range(num_triangles[None]):
        if hit_any == 0:
            tri = Triangle(v0=triangle_v0[i], v1=triangle_v1[i], v2=triangle_v2[i])
            t = triangle_distance(ray_origin, ray_direction, tri)
            if eps < t < t_max:
                hit_any = 1

    for i in range(num_spheres[None]):
        if hit_any == 0:
            sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
            t = sphere_distance(ray_origin, ray_direction, sphere)
            if eps < t < t_max:
                hit_any = 1

    for i in range(num_planes[None]):
        if hit_any == 0:
            plane = Plane(normal=plane_normals[i], distance_from_origin=plane_constants[i])
            t = plane_distance(ray_origin, ray_direction, plane)
            if eps < t < t_max:
                hit_any = 1

    return hit_any
