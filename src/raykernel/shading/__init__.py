"""Shading module: materials, lights, shading models and shadows.

Components:
    materials: Material table (albedo, roughness, metalness, reflective, shininess)
    lights: Scene point lights in addition to the frame's key light
    cook_torrance: GGX / Smith / Schlick microfacet BRDF
    blinn_phong: Blinn-Phong point-light model
    shadow: Bounded shadow-ray occlusion test
    lighting: Light loop with per-frame shading-model dispatch

All shading computations are Taichi functions.
"""

from .blinn_phong import blinn_phong
from .cook_torrance import (
    base_reflectance,
    cook_torrance,
    distribution_ggx,
    energy_split,
    fresnel_schlick,
    geometry_schlick_ggx,
    geometry_smith,
)
from .lighting import shade_hit
from .lights import MAX_SCENE_LIGHTS, add_light, clear_lights, get_light, get_light_count
from .materials import (
    MAX_MATERIALS,
    Material,
    add_material,
    clear_materials,
    get_material,
    get_material_count,
)
from .shadow import is_occluded

__all__ = [
    "Material",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_count",
    "MAX_MATERIALS",
    "add_light",
    "clear_lights",
    "get_light",
    "get_light_count",
    "MAX_SCENE_LIGHTS",
    "blinn_phong",
    "cook_torrance",
    "distribution_ggx",
    "geometry_schlick_ggx",
    "geometry_smith",
    "fresnel_schlick",
    "base_reflectance",
    "energy_split",
    "is_occluded",
    "shade_hit",
]
