"""Bounce tracer: shade, shadow-test, reflect and accumulate.

A camera ray is followed through at most ``max_bounces`` mirror
reflections. The loop is an explicit two-state machine:

    ACTIVE(bounce)  shade the current ray; continue with the reflected ray
                    if the hit is reflective and not shadowed
    TERMINATED      no hit, a non-reflective or shadowed hit, or the bounce
                    budget is used up

Each shading pass is blended into the running color with a reflection
weight that starts at 1 and halves after every pass:

    final = (1 - w) * final + w * mix(step_color, final, 1 - w)
    w *= 0.5

The first pass therefore sets ``final`` to the primary color and later
bounces contribute less and less. A pass whose ray hits nothing blends in
the background color, decays the weight and terminates.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.core.tracer import trace_bounces
    >>> # color, passes = trace_bounces(ray) within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from raykernel.config import background, max_bounces, max_distance
from raykernel.core.ray import Ray, mix, reflect
from raykernel.scene.intersection import trace
from raykernel.shading.lighting import shade_hit
from raykernel.shading.materials import is_reflective

vec3 = tm.vec3

# Reflection weight of the primary pass and its per-pass decay
INITIAL_WEIGHT = 1.0
WEIGHT_DECAY = 0.5


class TraceState(IntEnum):
    """Loop state of the bounce tracer."""

    ACTIVE = 0
    TERMINATED = 1


@ti.func
def shade_step(origin: vec3, direction: vec3):
    """Run one shading pass for a ray.

    Args:
        origin: Ray origin (camera position or previous hit point).
        direction: Unit ray direction.

    Returns:
        A tuple (color, next_state, next_origin, next_direction). The next
        ray is only meaningful when next_state is ACTIVE.
    """
    hit = trace(origin, direction, max_distance())

    color = background()
    next_state = int(TraceState.TERMINATED)
    next_origin = origin
    next_direction = direction

    if hit.hit == 1:
        shaded, shadowed = shade_hit(hit, origin)
        color = shaded
        if is_reflective(hit.material_id) == 1 and shadowed == 0:
            next_state = int(TraceState.ACTIVE)
            next_origin = hit.point
            next_direction = reflect(direction, hit.normal)

    return color, next_state, next_origin, next_direction


@ti.func
def trace_bounces(ray: Ray):
    """Follow a camera ray through the scene and accumulate its color.

    Args:
        ray: The primary camera ray.

    Returns:
        A tuple (color, passes) with the accumulated color and the number
        of shading passes run (1 to max_bounces + 1).
    """
    final = vec3(0.0, 0.0, 0.0)
    weight = INITIAL_WEIGHT
    state = int(TraceState.ACTIVE)
    origin = ray.origin
    direction = ray.direction
    passes = 0

    for _ in range(max_bounces() + 1):
        if state == int(TraceState.ACTIVE):
            step_color, next_state, next_origin, next_direction = shade_step(origin, direction)

            final = (1.0 - weight) * final + weight * mix(step_color, final, 1.0 - weight)
            weight *= WEIGHT_DECAY
            passes += 1

            state = next_state
            origin = next_origin
            direction = next_direction

    return final, passes
