"""Preview module for exporting the output surface.

Components:
    export: Tone mapping, gamma, 8-bit conversion and PNG saving (Pillow)

Example:
    >>> from raykernel.preview import save_png
    >>> save_png(renderer, "output.png", tone_map="reinhard")
"""

from .export import (
    ToneMapMethod,
    process_image,
    save_png,
    save_png_from_array,
    to_rgba8,
    tone_map_exposure,
    tone_map_reinhard,
)

__all__ = [
    "ToneMapMethod",
    "tone_map_reinhard",
    "tone_map_exposure",
    "process_image",
    "to_rgba8",
    "save_png",
    "save_png_from_array",
]
