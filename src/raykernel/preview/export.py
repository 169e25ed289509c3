"""Image export utilities for the output surface.

The kernel writes linear float RGBA. This module turns that into an 8-bit
normalized surface, optionally tone mapped and gamma corrected, and saves
it as PNG.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from raykernel.preview.export import save_png
    >>> from raykernel.core.frame import Renderer
    >>>
    >>> renderer = Renderer(512, 512)
    >>> renderer.render()
    >>> save_png(renderer, "output.png", tone_map="reinhard")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from raykernel.core.frame import Renderer


# Type alias for tone mapping options
ToneMapMethod = Literal["none", "reinhard", "exposure"]


def tone_map_reinhard(image: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    """Apply Reinhard tone mapping: c / (1 + c)."""
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.float32],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Apply exposure tone mapping: 1 - exp(-c * exposure)."""
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float32)


def process_image(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Tone map and gamma correct the color channels of an RGBA image.

    Alpha is passed through unchanged. The result is clamped to [0, 1].

    Args:
        image: Linear image of shape (H, W, 4) or (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value; 1.0 leaves values linear.
        exposure: Exposure value for exposure tone mapping.

    Returns:
        Processed image in [0, 1] with the input's shape.

    Raises:
        ValueError: If the tone map method is unknown or gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")

    result = np.array(image, dtype=np.float32, copy=True)
    rgb = result[..., :3]

    if tone_map == "reinhard":
        rgb = tone_map_reinhard(rgb)
    elif tone_map == "exposure":
        rgb = tone_map_exposure(rgb, exposure)
    elif tone_map != "none":
        raise ValueError(f"Unknown tone map method: {tone_map}")

    rgb = np.clip(rgb, 0.0, 1.0)
    if gamma != 1.0:
        rgb = np.power(rgb, 1.0 / gamma)

    result[..., :3] = rgb
    return np.clip(result, 0.0, 1.0)


def to_rgba8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a float RGBA image to an 8-bit normalized RGBA surface.

    Args:
        image: Linear image of shape (H, W, 4).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value.
        exposure: Exposure value for exposure tone mapping.

    Returns:
        Array of shape (H, W, 4) with dtype uint8.
    """
    processed = process_image(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    return np.round(processed * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save a float RGBA array as an 8-bit RGBA PNG file."""
    image_uint8 = to_rgba8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(image_uint8).save(filepath)


def save_png(
    renderer: Renderer,
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save the renderer's output surface as a PNG file.

    Args:
        renderer: The Renderer whose last frame to save.
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure value for exposure tone mapping (default 1.0).
    """
    save_png_from_array(
        renderer.get_image_numpy(),
        filepath,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )
