"""Preview module for output and visualization.

Components:
    export: PNG export via Pillow, float-to-byte conversion, RMSE
    display: Matplotlib preview and side-by-side comparison

Example:
    >>> from meshtracer.preview import show_preview, save_png
    >>> from meshtracer.core.frame import FrameRenderer
    >>>
    >>> renderer = FrameRenderer(800, 600)
    >>> renderer.render()
    >>> show_preview(renderer)
    >>> save_png(renderer, "output.png")
"""

from meshtracer.preview.display import show_comparison, show_preview
from meshtracer.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)

__all__ = [
    # Display functions
    "show_preview",
    "show_comparison",
    # Export functions
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
