"""Camera module for primary ray generation.

Components:
    camera: Resolved camera basis, look-at helper and per-pixel ray generation

Ray generation is Taichi-compatible and is called once per pixel from the
frame driver kernel.
"""

from .camera import (
    Camera,
    camera_ray,
    get_camera_position,
    look_at,
    setup_camera,
)

__all__ = [
    "Camera",
    "look_at",
    "setup_camera",
    "get_camera_position",
    "camera_ray",
]
