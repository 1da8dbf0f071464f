"""Texture storage and nearest-neighbour sampling.

The texture is held in a preallocated 8-bit RGB Taichi field indexed
[x, y], where x runs left to right and y = 0 is the top row of the image
(the same orientation as the decoded image file). The active width and
height are stored in scalar fields.

Sampling clamps UV coordinates to [0, 1] and maps them to texels with

    tex_x = floor(u * (width - 1))
    tex_y = floor(v * (height - 1))

so out-of-range coordinates land on the boundary texels and never read
outside the image. No filtering is applied.

Before any texture is loaded the field holds a single white texel, so
untextured geometry still renders visibly.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from meshtracer.shading.texture import load_texture, sample_texture
    >>> load_texture("texture.png")
    >>> # Use sample_texture(uv) within a Taichi kernel
"""

import logging
import math
from os import PathLike
from pathlib import Path

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm
from PIL import Image as PILImage

# Type aliases for vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2

logger = logging.getLogger(__name__)

# Maximum supported texture dimensions (preallocated to avoid kernel recompilation)
MAX_TEXTURE_WIDTH = 4096
MAX_TEXTURE_HEIGHT = 4096

texture = ti.Vector.field(3, dtype=ti.u8, shape=(MAX_TEXTURE_WIDTH, MAX_TEXTURE_HEIGHT))
texture_width = ti.field(dtype=ti.i32, shape=())
texture_height = ti.field(dtype=ti.i32, shape=())


def clear_texture() -> None:
    """Reset the texture to a single white texel."""
    texture[0, 0] = [255, 255, 255]
    texture_width[None] = 1
    texture_height[None] = 1


@ti.kernel
def _copy_pixels(pixels: ti.types.ndarray(), width: ti.i32, height: ti.i32):
    for x, y in ti.ndrange(width, height):
        texture[x, y] = ti.Vector(
            [pixels[y, x, 0], pixels[y, x, 1], pixels[y, x, 2]], dt=ti.u8
        )


def check_texture_pixels(pixels: npt.NDArray[np.uint8]) -> tuple[int, int]:
    """Check that an image array fits the texture field.

    Args:
        pixels: Image array of shape (height, width, 3).

    Returns:
        (width, height) of the image.

    Raises:
        ValueError: If the array is empty, not RGB, or exceeds the maximum
            supported texture size.
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Texture must have shape (height, width, 3), got {pixels.shape}")

    height, width = pixels.shape[0], pixels.shape[1]
    if width == 0 or height == 0:
        raise ValueError("Texture must not be empty")
    if width > MAX_TEXTURE_WIDTH or height > MAX_TEXTURE_HEIGHT:
        raise ValueError(
            f"Texture dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_TEXTURE_WIDTH}x{MAX_TEXTURE_HEIGHT})"
        )
    return width, height


def set_texture(pixels: npt.NDArray[np.uint8]) -> None:
    """Upload an RGB image as the active texture.

    Args:
        pixels: Image array of shape (height, width, 3) with dtype uint8,
            row 0 being the top of the image.

    Raises:
        ValueError: See check_texture_pixels().
    """
    pixels = np.asarray(pixels)
    width, height = check_texture_pixels(pixels)
    _copy_pixels(np.ascontiguousarray(pixels, dtype=np.uint8), width, height)
    texture_width[None] = width
    texture_height[None] = height


def load_texture_image(path: str | PathLike[str]) -> npt.NDArray[np.uint8]:
    """Decode an image file into an RGB uint8 array.

    Any Pillow-readable format and mode is accepted; alpha and palette
    images are converted to plain RGB.

    Args:
        path: Path to the image file.

    Returns:
        Array of shape (height, width, 3) with dtype uint8.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Texture file not found: {path}")

    with PILImage.open(path) as image:
        return np.asarray(image.convert("RGB"), dtype=np.uint8)


def load_texture(path: str | PathLike[str]) -> tuple[int, int]:
    """Decode an image file and upload it as the active texture.

    Returns:
        Tuple of (width, height).
    """
    pixels = load_texture_image(path)
    set_texture(pixels)
    width, height = get_texture_size()
    logger.info("Loaded texture %s (%dx%d)", path, width, height)
    return width, height


def get_texture_size() -> tuple[int, int]:
    """Get the active texture dimensions as (width, height)."""
    return int(texture_width[None]), int(texture_height[None])


def get_texture_pixel(x: int, y: int) -> tuple[int, int, int]:
    """Read one texel of the active texture from Python.

    Raises:
        IndexError: If (x, y) lies outside the active texture.
    """
    width, height = get_texture_size()
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Texel ({x}, {y}) outside texture of size {width}x{height}")
    texel = texture[x, y]
    return int(texel[0]), int(texel[1]), int(texel[2])


@ti.func
def sample_texture(uv: vec2) -> vec3:
    """Sample the active texture at a UV coordinate (nearest neighbour).

    Args:
        uv: Texture coordinate. Components are clamped to [0, 1].

    Returns:
        The RGB color with components in [0, 1].
    """
    width = texture_width[None]
    height = texture_height[None]

    u = tm.clamp(uv.x, 0.0, 1.0)
    v = tm.clamp(uv.y, 0.0, 1.0)

    tex_x = ti.cast(ti.floor(u * ti.cast(width - 1, ti.f32)), ti.i32)
    tex_y = ti.cast(ti.floor(v * ti.cast(height - 1, ti.f32)), ti.i32)

    return ti.cast(texture[tex_x, tex_y], ti.f32) / 255.0


# =============================================================================
# NumPy Reference Implementations (Python-side)
# =============================================================================


def texel_coordinates(u: float, v: float, width: int, height: int) -> tuple[int, int]:
    """Map a UV coordinate to texel coordinates the same way sample_texture() does."""
    u = min(max(u, 0.0), 1.0)
    v = min(max(v, 0.0), 1.0)
    return int(math.floor(u * (width - 1))), int(math.floor(v * (height - 1)))


def sample_texture_numpy(
    pixels: npt.NDArray[np.uint8], uv: tuple[float, float]
) -> npt.NDArray[np.float32]:
    """Sample an (H, W, 3) uint8 image at a UV coordinate.

    Returns:
        RGB color as float32 array with components in [0, 1].
    """
    height, width = pixels.shape[0], pixels.shape[1]
    tex_x, tex_y = texel_coordinates(uv[0], uv[1], width, height)
    return pixels[tex_y, tex_x].astype(np.float32) / 255.0
