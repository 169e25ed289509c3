"""Blinn-Phong point-light shading.

    intensity = color / (4 pi d)
    diffuse   = intensity * albedo * max(N.L, 0)
    specular  = intensity * clamp(N.H, 0, 1) ^ shininess
    result    = diffuse + specular

with H = normalize(L + V). Unlike the physically based model, an occluded
light is not dropped; the caller darkens its contribution by SHADOW_FACTOR.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


@ti.func
def blinn_phong(
    normal: vec3,
    view_dir: vec3,
    light_dir: vec3,
    light_distance: ti.f32,
    light_color: vec3,
    albedo: vec3,
    shininess: ti.f32,
) -> vec3:
    """Diffuse plus specular contribution of one point light.

    Args:
        normal: Unit surface normal N.
        view_dir: Unit vector from the hit point toward the viewer, V.
        light_dir: Unit vector from the hit point toward the light, L.
        light_distance: Distance from the hit point to the light.
        light_color: Light power per channel.
        albedo: Base color.
        shininess: Specular exponent.

    Returns:
        The unshadowed color contribution.
    """
    intensity = light_color / (4.0 * tm.pi * light_distance)
    half_vec = tm.normalize(light_dir + view_dir)

    diffuse = intensity * albedo * tm.max(tm.dot(normal, light_dir), 0.0)
    specular = intensity * ti.pow(tm.clamp(tm.dot(normal, half_vec), 0.0, 1.0), shininess)
    return diffuse + specular
