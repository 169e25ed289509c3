"""Demo scene configuration.

A small reference scene exercising every primitive kind:

- A large diffuse sphere of radius 16 resting on the ground at (0, 16, 0)
- A smaller mirror sphere beside it
- The ground plane y = 0
- A reflective triangle panel behind the spheres, facing the camera
- The key light at (16, 64, 16)

The camera sits in front of the scene (negative z) and looks toward +z.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.core.frame import Renderer
    >>> from raykernel.scene.demo import create_demo_scene
    >>> scene, config = create_demo_scene()
    >>> renderer = Renderer(256, 256)
    >>> renderer.load(scene, config)
    >>> renderer.render()
"""

from dataclasses import dataclass

from raykernel.camera.camera import look_at
from raykernel.config import FrameConfig, ShadingModel
from raykernel.scene.store import SceneDescription


@dataclass
class DemoSceneParams:
    """Parameters for configuring the demo scene.

    Attributes:
        light_position: Position of the key light.
        light_color: Power of the key light per channel.
        sphere_albedo: Color of the large sphere.
        ground_albedo: Color of the ground plane.
        shading_model: Shading model for the frame.
        max_bounces: Reflective bounces after the primary ray.
    """

    light_position: tuple[float, float, float] = (16.0, 64.0, 16.0)
    light_color: tuple[float, float, float] = (1000.0, 1000.0, 1000.0)
    sphere_albedo: tuple[float, float, float] = (0.8, 0.25, 0.2)
    ground_albedo: tuple[float, float, float] = (0.6, 0.6, 0.6)
    shading_model: ShadingModel = ShadingModel.BLINN_PHONG
    max_bounces: int = 2


# Main sphere from the reference layout
SPHERE_CENTER = (0.0, 16.0, 0.0)
SPHERE_RADIUS = 16.0

MIRROR_CENTER = (28.0, 8.0, -8.0)
MIRROR_RADIUS = 8.0

CAMERA_POSITION = (0.0, 40.0, -80.0)
CAMERA_TARGET = (0.0, 16.0, 0.0)


def create_demo_scene(
    params: DemoSceneParams | None = None,
    aspect_ratio: float = 1.0,
) -> tuple[SceneDescription, FrameConfig]:
    """Create the demo scene and a matching frame configuration.

    Args:
        params: Optional DemoSceneParams. If None, uses defaults.
        aspect_ratio: Output width divided by height.

    Returns:
        A tuple of (SceneDescription, FrameConfig).
    """
    if params is None:
        params = DemoSceneParams()

    scene = SceneDescription()

    # =========================================================================
    # Materials
    # =========================================================================

    sphere_mat = scene.add_material(params.sphere_albedo, roughness=0.4, metalness=0.0)
    mirror_mat = scene.add_material(
        (0.9, 0.9, 0.9), roughness=0.05, metalness=1.0, reflective=True, shininess=128.0
    )
    ground_mat = scene.add_material(params.ground_albedo, roughness=0.8)
    panel_mat = scene.add_material((0.2, 0.3, 0.7), roughness=0.2, reflective=True)

    # =========================================================================
    # Geometry
    # =========================================================================

    scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, sphere_mat)
    scene.add_sphere(MIRROR_CENTER, MIRROR_RADIUS, mirror_mat)
    scene.add_plane((0.0, 1.0, 0.0), 0.0, ground_mat)

    # Back panel at z = 40, wound so its normal faces -z (toward the camera)
    scene.add_triangle((-48.0, 0.0, 40.0), (-48.0, 48.0, 40.0), (48.0, 0.0, 40.0), panel_mat)
    scene.add_triangle((48.0, 0.0, 40.0), (-48.0, 48.0, 40.0), (48.0, 48.0, 40.0), panel_mat)

    config = FrameConfig(
        aspect_ratio=aspect_ratio,
        light_position=params.light_position,
        camera=look_at(CAMERA_POSITION, CAMERA_TARGET),
        light_color=params.light_color,
        shading_model=params.shading_model,
        max_bounces=params.max_bounces,
    )
    return scene, config
