"""Material table shared by both shading models.

Every primitive carries an index into this table. A material holds the
parameters of both shading models so a scene can be rendered with either:

    albedo      base color, each component in [0, 1]
    roughness   Cook-Torrance roughness in [0, 1]
    metalness   Cook-Torrance metalness in [0, 1]
    reflective  1 if the bounce tracer reflects rays off this surface
    shininess   Blinn-Phong specular exponent (> 0)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.shading.materials import add_material
    >>> red = add_material(albedo=(0.8, 0.1, 0.1), roughness=0.4)
    >>> mirror = add_material(albedo=(0.9, 0.9, 0.9), reflective=True)
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

DEFAULT_SHININESS = 32.0


@ti.dataclass
class Material:
    """Material properties as seen by the kernel."""

    albedo: vec3
    roughness: ti.f32
    metalness: ti.f32
    reflective: ti.i32
    shininess: ti.f32


# =============================================================================
# Material Field Storage
# =============================================================================

MAX_MATERIALS = 256

material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_roughnesses = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_metalnesses = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_reflective = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_shininesses = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(
    albedo: tuple[float, float, float],
    roughness: float = 0.5,
    metalness: float = 0.0,
    reflective: bool = False,
    shininess: float = DEFAULT_SHININESS,
) -> int:
    """Add a material to the material table.

    Args:
        albedo: The base color as (R, G, B), each component in [0, 1].
        roughness: Microfacet roughness in [0, 1].
        metalness: Metalness in [0, 1].
        reflective: Whether the bounce tracer reflects off this material.
        shininess: Blinn-Phong specular exponent.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any parameter is outside its valid range.
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    if roughness < 0.0 or roughness > 1.0:
        raise ValueError(f"Roughness = {roughness} is outside [0, 1]")
    if metalness < 0.0 or metalness > 1.0:
        raise ValueError(f"Metalness = {metalness} is outside [0, 1]")
    if shininess <= 0.0:
        raise ValueError(f"Shininess must be positive, got {shininess}")

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    material_roughnesses[idx] = roughness
    material_metalnesses[idx] = metalness
    material_reflective[idx] = 1 if reflective else 0
    material_shininesses[idx] = shininess
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the table."""
    return int(num_materials[None])


@ti.func
def get_material(material_id: ti.i32) -> Material:
    """Look up a material by index.

    The index is trusted; the scene builder guarantees it is valid.
    """
    return Material(
        albedo=material_albedos[material_id],
        roughness=material_roughnesses[material_id],
        metalness=material_metalnesses[material_id],
        reflective=material_reflective[material_id],
        shininess=material_shininesses[material_id],
    )


@ti.func
def is_reflective(material_id: ti.i32) -> ti.i32:
    return material_reflective[material_id]
