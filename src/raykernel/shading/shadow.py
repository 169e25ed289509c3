"""Shadow tester.

A shadow ray starts at the shaded point and heads for the light with the
light distance as its search bound, so geometry beyond the light never
occludes it. The resolver's epsilon keeps the ray from hitting the surface
it starts on.
"""

import taichi as ti
import taichi.math as tm

from raykernel.scene.intersection import trace_any

vec3 = tm.vec3


@ti.func
def is_occluded(point: vec3, light_position: vec3) -> ti.i32:
    """Check whether anything lies between a point and a light.

    Args:
        point: The shaded surface point.
        light_position: Position of the point light.

    Returns:
        1 if the light is blocked, 0 otherwise.
    """
    to_light = light_position - point
    distance = tm.length(to_light)
    return trace_any(point, to_light / distance, distance)
