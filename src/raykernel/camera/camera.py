"""Basis camera and primary ray generation.

The kernel does not derive a camera from application state. It receives a
fully resolved basis (position plus mutually orthogonal unit vectors
``dir``, ``right`` and ``up``) once per frame and maps every pixel to one
primary ray:

    uv  = (x, y) / (W, H)
    ndc = 2 * uv - 1
    dir = cam.dir + cam.right * ndc.x + cam.up * ndc.y
    dir.x *= aspect_ratio
    ray = Ray(cam.pos, normalize(dir))

Pixel (0, 0) is the bottom-left corner of the image and there is no
half-pixel offset. The aspect ratio scales the world-space x component of
the direction, so it acts as a horizontal stretch for cameras whose
``right`` vector is aligned with the x axis.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.camera.camera import look_at, setup_camera
    >>> camera = look_at((0.0, 16.0, -64.0), (0.0, 16.0, 0.0))
    >>> setup_camera(camera, aspect_ratio=1.0)
"""

import logging
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from raykernel.core.ray import Ray, make_ray

logger = logging.getLogger(__name__)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """A resolved camera basis.

    Attributes:
        pos: Camera position in world space (x, y, z).
        dir: Unit view direction.
        right: Unit vector pointing to the right edge of the image.
        up: Unit vector pointing to the top edge of the image.
    """

    pos: tuple[float, float, float] = (0.0, 0.0, 0.0)
    dir: tuple[float, float, float] = (0.0, 0.0, 1.0)
    right: tuple[float, float, float] = (1.0, 0.0, 0.0)
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)


def look_at(
    position: tuple[float, float, float],
    target: tuple[float, float, float],
    world_up: tuple[float, float, float] = (0.0, 1.0, 0.0),
) -> Camera:
    """Build a camera basis looking from ``position`` toward ``target``.

    The basis follows the kernel's convention: with ``dir = +z`` and
    ``world_up = +y`` the right vector is ``+x``.

    Args:
        position: Camera position.
        target: Point the camera looks at.
        world_up: Approximate up direction, must not be parallel to the view.

    Returns:
        A Camera with orthonormal dir, right and up vectors.

    Raises:
        ValueError: If position equals target or world_up is parallel to the
            view direction.
    """
    pos = np.array(position, dtype=np.float64)
    forward = np.array(target, dtype=np.float64) - pos
    norm = np.linalg.norm(forward)
    if norm < 1e-12:
        raise ValueError("Camera position and target must differ")
    forward = forward / norm

    right = np.cross(np.array(world_up, dtype=np.float64), forward)
    right_norm = np.linalg.norm(right)
    if right_norm < 1e-12:
        raise ValueError("world_up must not be parallel to the view direction")
    right = right / right_norm

    up = np.cross(forward, right)

    return Camera(
        pos=tuple(float(c) for c in pos),
        dir=tuple(float(c) for c in forward),
        right=tuple(float(c) for c in right),
        up=tuple(float(c) for c in up),
    )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_pos = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_dir = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_aspect_ratio = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: Camera, aspect_ratio: float = 1.0) -> None:
    """Upload the camera basis and aspect ratio for the next dispatch.

    The basis is taken as given; a malformed basis is the caller's
    responsibility.

    Args:
        camera: The resolved camera basis.
        aspect_ratio: Output width divided by height.

    Raises:
        ValueError: If aspect_ratio is not positive.
    """
    if aspect_ratio <= 0.0:
        raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")

    _camera_pos[None] = list(camera.pos)
    _camera_dir[None] = list(camera.dir)
    _camera_right[None] = list(camera.right)
    _camera_up[None] = list(camera.up)
    _aspect_ratio[None] = aspect_ratio
    logger.debug("Camera set to pos=%s dir=%s aspect=%.4f", camera.pos, camera.dir, aspect_ratio)


def get_camera_position() -> tuple[float, float, float]:
    """Get the uploaded camera position."""
    p = _camera_pos[None]
    return (float(p[0]), float(p[1]), float(p[2]))


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def camera_ray(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray for pixel (x, y).

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera position with a normalized direction.
    """
    uv = tm.vec2(
        ti.cast(x, ti.f32) / ti.cast(width, ti.f32),
        ti.cast(y, ti.f32) / ti.cast(height, ti.f32),
    )
    ndc = 2.0 * uv - 1.0

    direction = _camera_dir[None] + _camera_right[None] * ndc.x + _camera_up[None] * ndc.y
    direction.x *= _aspect_ratio[None]

    return make_ray(_camera_pos[None], tm.normalize(direction))
