"""Point light storage.

The frame's key light (position and color from the FrameConfig) is always
light 0. Scenes may add a small fixed set of further point lights here;
they are lit exactly like the key light. There are no area lights.
"""

import taichi as ti
import taichi.math as tm

from raykernel.config import key_light_color, key_light_position

vec3 = tm.vec3

MAX_SCENE_LIGHTS = 16

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SCENE_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SCENE_LIGHTS)
num_scene_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all scene lights. The key light is unaffected."""
    num_scene_lights[None] = 0


def add_light(
    position: tuple[float, float, float],
    color: tuple[float, float, float],
) -> int:
    """Add a point light to the scene.

    Args:
        position: World-space position of the light.
        color: Color times intensity of the light, components >= 0.

    Returns:
        The index of the added scene light.

    Raises:
        RuntimeError: If the maximum number of scene lights is exceeded.
        ValueError: If any color component is negative.
    """
    for i, component in enumerate(color):
        if component < 0.0:
            raise ValueError(f"Light color component {i} = {component} is negative")

    idx = num_scene_lights[None]
    if idx >= MAX_SCENE_LIGHTS:
        raise RuntimeError(f"Maximum number of scene lights ({MAX_SCENE_LIGHTS}) exceeded")

    light_positions[idx] = vec3(position[0], position[1], position[2])
    light_colors[idx] = vec3(color[0], color[1], color[2])
    num_scene_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights lit per hit, including the key light."""
    return int(num_scene_lights[None]) + 1


@ti.func
def light_count() -> ti.i32:
    return num_scene_lights[None] + 1


@ti.func
def get_light(index: ti.i32):
    """Get (position, color) of light ``index``; index 0 is the key light."""
    position = key_light_position()
    color = key_light_color()
    if index > 0:
        position = light_positions[index - 1]
        color = light_colors[index - 1]
    return position, color
