"""Image export utilities for rendered images.

This module provides functions for saving rendered frames to files.
Rendered colors come straight from 8-bit textures, so no tone mapping or
gamma correction is applied: values are rounded back to the nearest byte.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from meshtracer.preview.export import save_png
    >>> from meshtracer.core.frame import FrameRenderer
    >>>
    >>> renderer = FrameRenderer(800, 600)
    >>> renderer.render()
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

from os import PathLike
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from meshtracer.core.frame import FrameRenderer


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to uint8.

    Values are clamped and rounded to the nearest byte, so a texel that was
    read as c / 255 is written back as exactly c.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    clamped = np.clip(image.astype(np.float64), 0.0, 1.0)
    return np.rint(clamped * 255.0).astype(np.uint8)


def save_png_from_array(image: npt.NDArray[np.floating], filepath: str | PathLike[str]) -> None:
    """Save a float image array as a PNG file.

    Args:
        image: Image array of shape (H, W, 3) with values in [0, 1].
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the image is not an (H, W, 3) array.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must have shape (H, W, 3), got {image.shape}")

    pil_image = PILImage.fromarray(image_to_uint8(image), mode="RGB")
    pil_image.save(filepath, format="PNG")


def save_png(renderer: FrameRenderer, filepath: str | PathLike[str]) -> None:
    """Save a finished frame as a PNG file.

    Args:
        renderer: The FrameRenderer whose image should be saved.
        filepath: Output file path (should end in .png).
    """
    renderer.save_image(filepath)


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
