"""Core rendering module.

This module contains the fundamental building blocks of the kernel:

Components:
    ray: Ray data structure and vector utilities
    tracer: Bounce tracer state machine (shade, shadow, reflect, accumulate)
    frame: Frame driver, output surface and the Renderer wrapper

All compute-intensive operations use Taichi kernels, one task per pixel.
"""

from .ray import (
    Ray,
    cross,
    dot,
    length_squared,
    make_ray,
    mix,
    normalize,
    ray_at,
    reflect,
    vec3,
)

# Note: tracer and frame are NOT imported here to avoid circular imports.
# Import directly from raykernel.core.tracer or raykernel.core.frame when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "mix",
]
