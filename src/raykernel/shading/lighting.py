"""Light loop and shading-model dispatch.

``shade_hit`` evaluates every light at a hit with the frame's shading model
and runs the shadow test for each one:

    COOK_TORRANCE  an occluded light contributes nothing
    BLINN_PHONG    an occluded light's contribution is scaled by SHADOW_FACTOR

In both models a hit with at least one occluded light is reported as
shadowed; the bounce tracer does not reflect off shadowed hits.
"""

import taichi as ti
import taichi.math as tm

from raykernel.config import SHADOW_FACTOR, ShadingModel, shading_model
from raykernel.scene.intersection import Intersection
from raykernel.shading.blinn_phong import blinn_phong
from raykernel.shading.cook_torrance import cook_torrance
from raykernel.shading.lights import get_light, light_count
from raykernel.shading.materials import get_material
from raykernel.shading.shadow import is_occluded

vec3 = tm.vec3


@ti.func
def shade_hit(hit: Intersection, view_origin: vec3):
    """Shade a hit point under all lights.

    Args:
        hit: A record with hit == 1.
        view_origin: Origin of the ray that produced the hit; the view
            vector points from the hit toward it.

    Returns:
        A tuple (color, shadowed) where shadowed is 1 if any light is
        occluded from the hit point.
    """
    material = get_material(hit.material_id)
    model = shading_model()
    view_dir = tm.normalize(view_origin - hit.point)

    color = vec3(0.0, 0.0, 0.0)
    shadowed = 0

    for i in range(light_count()):
        light_position, light_color = get_light(i)
        to_light = light_position - hit.point
        distance = tm.length(to_light)
        light_dir = to_light / distance

        occluded = is_occluded(hit.point, light_position)
        if occluded == 1:
            shadowed = 1

        if model == int(ShadingModel.COOK_TORRANCE):
            if occluded == 0:
                brdf = cook_torrance(
                    hit.normal,
                    view_dir,
                    light_dir,
                    material.albedo,
                    material.roughness,
                    material.metalness,
                )
                color += brdf * light_color / (distance * distance)
        else:
            contribution = blinn_phong(
                hit.normal,
                view_dir,
                light_dir,
                distance,
                light_color,
                material.albedo,
                material.shininess,
            )
            if occluded == 1:
                contribution *= SHADOW_FACTOR
            color += contribution

    return color, shadowed
