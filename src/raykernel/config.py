"""Per-frame configuration and kernel constants.

The frame configuration is supplied once per frame by the caller and is
read-only for the whole dispatch. ``apply_frame_config`` validates it on the
Python side and uploads it into 0-d Taichi fields that the kernel reads.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.camera.camera import Camera
    >>> from raykernel.config import FrameConfig, ShadingModel, apply_frame_config
    >>> config = FrameConfig(
    ...     aspect_ratio=1.0,
    ...     light_position=(16.0, 64.0, 16.0),
    ...     camera=Camera(pos=(0.0, 16.0, -64.0)),
    ...     shading_model=ShadingModel.BLINN_PHONG,
    ... )
    >>> apply_frame_config(config)
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

import taichi as ti
import taichi.math as tm

from raykernel.camera.camera import Camera, setup_camera

logger = logging.getLogger(__name__)

vec3 = tm.vec3

# =============================================================================
# Kernel Constants
# =============================================================================

# Default number of reflective bounces after the primary ray
MAX_BOUNCES = 2

# "No hit yet" distance for primary and bounce rays
MAX_DISTANCE = 1000.0

# Minimum accepted hit distance (self-intersection guard)
EPSILON = 0.01

# Blinn-Phong darkening applied to an occluded light
SHADOW_FACTOR = 0.5

# Additive guard in the Cook-Torrance specular denominator
SPECULAR_GUARD = 0.001

# Side of the square pixel tile used as a scheduling hint
TILE_SIZE = 16

BACKGROUND_COLOR = (0.0, 0.0, 0.0)

DEFAULT_LIGHT_COLOR = (1000.0, 1000.0, 1000.0)


class ShadingModel(IntEnum):
    """Shading model applied uniformly to every hit of a frame."""

    COOK_TORRANCE = 0
    BLINN_PHONG = 1


@dataclass
class FrameConfig:
    """Per-frame inputs of the kernel.

    Attributes:
        aspect_ratio: Output width divided by height.
        light_position: Position of the key light.
        camera: Resolved camera basis.
        light_color: Color times intensity (power) of the key light.
        shading_model: Which shading model to evaluate.
        max_bounces: Reflective bounces allowed after the primary ray.
        max_distance: Search bound for primary and bounce rays.
        epsilon: Minimum accepted hit distance.
        background: Color returned for rays that hit nothing.
    """

    aspect_ratio: float = 1.0
    light_position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    camera: Camera = field(default_factory=Camera)
    light_color: tuple[float, float, float] = DEFAULT_LIGHT_COLOR
    shading_model: ShadingModel = ShadingModel.BLINN_PHONG
    max_bounces: int = MAX_BOUNCES
    max_distance: float = MAX_DISTANCE
    epsilon: float = EPSILON
    background: tuple[float, float, float] = BACKGROUND_COLOR

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FrameConfig":
        """Build a FrameConfig from a plain dictionary.

        Unknown keys are rejected. ``camera`` is a dict with ``pos``,
        ``dir``, ``right`` and ``up`` entries; ``shading_model`` is either
        the enum name (case-insensitive) or its integer value.

        Raises:
            ValueError: On unknown keys or an unknown shading model.
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown frame config keys: {sorted(unknown)}")

        kwargs = dict(data)
        if "camera" in kwargs and isinstance(kwargs["camera"], dict):
            cam = kwargs["camera"]
            kwargs["camera"] = Camera(
                pos=tuple(cam.get("pos", (0.0, 0.0, 0.0))),
                dir=tuple(cam.get("dir", (0.0, 0.0, 1.0))),
                right=tuple(cam.get("right", (1.0, 0.0, 0.0))),
                up=tuple(cam.get("up", (0.0, 1.0, 0.0))),
            )
        if "shading_model" in kwargs:
            kwargs["shading_model"] = parse_shading_model(kwargs["shading_model"])
        for key in ("light_position", "light_color", "background"):
            if key in kwargs:
                kwargs[key] = tuple(kwargs[key])
        return cls(**kwargs)


def parse_shading_model(value: Any) -> ShadingModel:
    """Convert a name or integer into a ShadingModel.

    Raises:
        ValueError: If the value does not name a shading model.
    """
    if isinstance(value, ShadingModel):
        return value
    if isinstance(value, str):
        key = value.strip().upper().replace("-", "_")
        if key in ShadingModel.__members__:
            return ShadingModel[key]
        raise ValueError(f"Unknown shading model: {value}")
    try:
        return ShadingModel(int(value))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Unknown shading model: {value}") from e


# =============================================================================
# Taichi Fields for Frame State
# =============================================================================

_key_light_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_key_light_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_shading_model = ti.field(dtype=ti.i32, shape=())
_max_bounces = ti.field(dtype=ti.i32, shape=())
_max_distance = ti.field(dtype=ti.f32, shape=())
_epsilon = ti.field(dtype=ti.f32, shape=())
_background = ti.Vector.field(3, dtype=ti.f32, shape=())


def apply_frame_config(config: FrameConfig) -> None:
    """Validate and upload a frame configuration.

    Args:
        config: The configuration for the next dispatch.

    Raises:
        ValueError: If a numeric setting is out of range.
    """
    if config.max_bounces < 0:
        raise ValueError(f"max_bounces must be non-negative, got {config.max_bounces}")
    if config.epsilon <= 0.0:
        raise ValueError(f"epsilon must be positive, got {config.epsilon}")
    if config.max_distance <= config.epsilon:
        raise ValueError(
            f"max_distance ({config.max_distance}) must exceed epsilon ({config.epsilon})"
        )

    setup_camera(config.camera, config.aspect_ratio)

    _key_light_position[None] = list(config.light_position)
    _key_light_color[None] = list(config.light_color)
    _shading_model[None] = int(parse_shading_model(config.shading_model))
    _max_bounces[None] = config.max_bounces
    _max_distance[None] = config.max_distance
    _epsilon[None] = config.epsilon
    _background[None] = list(config.background)

    logger.debug(
        "Frame config applied: model=%s bounces=%d light=%s",
        ShadingModel(_shading_model[None]).name,
        config.max_bounces,
        config.light_position,
    )


def reset_frame_config() -> None:
    """Restore every frame setting to its default value."""
    apply_frame_config(FrameConfig())


# =============================================================================
# Kernel-side accessors
# =============================================================================


@ti.func
def key_light_position() -> vec3:
    return _key_light_position[None]


@ti.func
def key_light_color() -> vec3:
    return _key_light_color[None]


@ti.func
def shading_model() -> ti.i32:
    return _shading_model[None]


@ti.func
def max_bounces() -> ti.i32:
    return _max_bounces[None]


@ti.func
def max_distance() -> ti.f32:
    return _max_distance[None]


@ti.func
def epsilon() -> ti.f32:
    return _epsilon[None]


@ti.func
def background() -> vec3:
    return _background[None]
