"""Geometry module for analytic primitives.

This module provides the closed-form ray/primitive distance functions:

Components:
    sphere: Sphere primitive, near-root ray-sphere distance
    plane: Infinite plane, ray-plane distance with the 0 no-hit sentinel
    triangle: Single-sided triangle, Moller-Trumbore distance

All routines are Taichi functions (@ti.func). Each returns a signed scalar
distance where values not greater than the resolver's epsilon mean
"no valid forward hit":
    t = <shape>_distance(ray_origin, ray_direction, shape)
"""

from .plane import Plane, make_plane, plane_distance
from .sphere import Sphere, make_sphere, sphere_distance, sphere_normal
from .triangle import (
    TRIANGLE_EPSILON,
    Triangle,
    make_triangle,
    triangle_distance,
    triangle_normal,
)

__all__ = [
    "Sphere",
    "make_sphere",
    "sphere_distance",
    "sphere_normal",
    "Plane",
    "make_plane",
    "plane_distance",
    "Triangle",
    "make_triangle",
    "triangle_distance",
    "triangle_normal",
    "TRIANGLE_EPSILON",
]
