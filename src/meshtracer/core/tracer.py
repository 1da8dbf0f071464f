"""Frame kernel: one primary ray per pixel into a render target.

This module owns the render target and the kernel that fills it. For every
pixel the kernel generates the camera ray, finds the nearest face, shades it
from the texture and stores the color. Pixels do not depend on each other,
so the backend is free to process them in parallel; the result is the same
for any execution order.

The render target is indexed [x, y] with y = 0 at the top of the image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from meshtracer.core.tracer import setup_render_target, render_image
    >>> from meshtracer.camera.pinhole import PinholeCamera, setup_camera
    >>>
    >>> setup_camera(PinholeCamera())
    >>> setup_render_target(800, 600)
    >>> render_image()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from meshtracer.camera.pinhole import get_ray
from meshtracer.shading.shader import trace_ray

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color buffer (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
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


def clear_render_target() -> None:
    """Clear the render target buffer to black."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Clear the buffer and mark the render target as uninitialized."""
    clear_render_target()
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.func
def render_pixel_impl(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Compute the color of one pixel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The pixel color (RGB in [0, 1]).
    """
    ray = get_ray(pixel_x, pixel_y, width, height)
    return trace_ray(ray.origin, ray.direction)


@ti.kernel
def _render_rows(y_start: ti.i32, y_end: ti.i32, width: ti.i32, height: ti.i32):
    """Render rows [y_start, y_end) into the color buffer."""
    for i, j in ti.ndrange(width, (y_start, y_end)):
        _color_buffer[i, j] = render_pixel_impl(i, j, width, height)


@ti.kernel
def _render_single_pixel(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Render one pixel without touching the color buffer."""
    return render_pixel_impl(pixel_x, pixel_y, width, height)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(y_start: int, y_end: int) -> None:
    """Render a band of rows into the color buffer.

    Args:
        y_start: First row to render (inclusive).
        y_end: Row to stop at (exclusive). Clamped to the image height.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the range is empty or starts outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    y_end = min(y_end, height)
    if not 0 <= y_start < y_end:
        raise ValueError(f"Invalid row range [{y_start}, {y_end}) for image height {height}")

    _render_rows(y_start, y_end, width, height)


def render_image() -> None:
    """Render every pixel of the render target.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_rows(0, height, width, height)


def render_pixel(pixel_x: int, pixel_y: int) -> tuple[float, float, float]:
    """Render a single pixel.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_x, pixel_y, width, height)

    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Returns:
        Array of shape (height, width, 3) with dtype float32, row 0 at the
        top of the image and values in [0, 1].

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Get raw image data (full buffer)
    full_image = _color_buffer.to_numpy()

    # Extract active region
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(image, (1, 0, 2))

    return np.clip(image, 0.0, 1.0).astype(np.float32)
