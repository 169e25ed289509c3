"""Frame driver: one task per output pixel.

For each pixel the driver generates the primary camera ray, runs the bounce
tracer to completion and writes ``(r, g, b, 1.0)`` into the RGBA output
surface. Pixels are fully independent; the scene and frame configuration
are read-only during the dispatch, so Taichi is free to run the outer loop
in parallel. Pixels are scheduled in TILE_SIZE x TILE_SIZE blocks, a hint
that does not affect the result.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raykernel.core.frame import Renderer
    >>> from raykernel.scene.demo import create_demo_scene
    >>> scene, config = create_demo_scene()
    >>> renderer = Renderer(256, 256)
    >>> renderer.load(scene, config)
    >>> renderer.render()
    >>> image = renderer.get_image_numpy()  # (256, 256, 4) float32
"""

import logging
import time
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from raykernel.camera.camera import camera_ray
from raykernel.config import TILE_SIZE, FrameConfig, apply_frame_config
from raykernel.core.tracer import trace_bounces

if TYPE_CHECKING:
    from raykernel.scene.store import SceneDescription

logger = logging.getLogger(__name__)

vec3 = tm.vec3

# =============================================================================
# Output Surface
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# RGBA output surface, indexed [x, y] with y = 0 at the bottom
_output = ti.Vector.field(4, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Single-pixel probe results
_probe_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_passes = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active output size and clear the surface.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()
    logger.debug("Render target set to %dx%d", width, height)


def clear_render_target() -> None:
    """Clear the output surface to zero."""
    _output.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Kernels
# =============================================================================


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32):
    """Shade every pixel of the active region and write RGBA."""
    ti.loop_config(block_dim=TILE_SIZE * TILE_SIZE)
    for i, j in ti.ndrange(width, height):
        ray = camera_ray(i, j, width, height)
        color, _ = trace_bounces(ray)
        _output[i, j] = tm.vec4(color.x, color.y, color.z, 1.0)


@ti.kernel
def _trace_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32):
    """Trace one pixel and store its color and pass count in the probe fields."""
    ray = camera_ray(pixel_i, pixel_j, width, height)
    color, passes = trace_bounces(ray)
    _probe_color[None] = color
    _probe_passes[None] = passes


# =============================================================================
# Public Rendering API
# =============================================================================


def render_frame() -> None:
    """Render every pixel of the active render target.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    _render_frame(width, height)


def trace_pixel(pixel_i: int, pixel_j: int) -> tuple[tuple[float, float, float], int]:
    """Trace a single pixel without touching the output surface.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).

    Returns:
        Tuple of ((R, G, B), number of shading passes).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    _trace_single_pixel(pixel_i, pixel_j, width, height)
    c = _probe_color[None]
    return (float(c[0]), float(c[1]), float(c[2])), int(_probe_passes[None])


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single pixel and return its (R, G, B) color."""
    color, _ = trace_pixel(pixel_i, pixel_j)
    return color


def get_output_numpy() -> npt.NDArray[np.float32]:
    """Get the output surface as a NumPy array.

    The array has shape (height, width, 4), row 0 at the top of the image,
    and holds the unclamped float colors written by the kernel.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()

    full_image = _output.to_numpy()
    image = full_image[:width, :height, :]

    # (width, height, 4) -> (height, width, 4), then bottom-left to top-left origin
    image = np.transpose(image, (1, 0, 2))
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)


# =============================================================================
# Renderer
# =============================================================================


class Renderer:
    """Owns the render target and runs one frame at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer and its output surface.

        Raises:
            ValueError: If dimensions are invalid.
        """
        self._width = width
        self._height = height
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height of the output surface."""
        return self._width / self._height

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and clear it."""
        self._width = width
        self._height = height
        setup_render_target(width, height)

    def load(self, scene: "SceneDescription", config: FrameConfig) -> None:
        """Upload a scene and the frame configuration for the next render."""
        from raykernel.scene.store import SceneStore

        SceneStore().upload(scene)
        apply_frame_config(config)

    def render(self) -> None:
        """Render one full frame into the output surface."""
        start = time.perf_counter()
        render_frame()
        logger.info(
            "Rendered %dx%d frame in %.3fs",
            self._width,
            self._height,
            time.perf_counter() - start,
        )

    def trace_pixel(self, x: int, y: int) -> tuple[tuple[float, float, float], int]:
        """Trace one pixel, see trace_pixel()."""
        return trace_pixel(x, y)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered RGBA image, shape (height, width, 4)."""
        return get_output_numpy()
