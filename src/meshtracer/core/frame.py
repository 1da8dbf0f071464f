"""Frame driver for rendering a complete image.

This module provides a convenient wrapper around the frame kernel that supports:
- Rendering in bands of rows with progress callbacks for UI updates
- A generator interface for iterative processing
- Writing the finished image once, after the last row

It also provides render_scene(), which runs the whole pipeline from a
RenderConfig: load mesh, apply rotations, load texture, upload, set up the
camera, render and save. Every input is loaded and validated before the
first pixel is rendered.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from meshtracer.core.frame import FrameRenderer
    >>>
    >>> renderer = FrameRenderer(800, 600)
    >>> renderer.render(rows_per_batch=50)
    >>> renderer.save_image("output.png")
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from meshtracer.core.tracer import (
    clear_render_target,
    get_image_numpy,
    render_rows,
    setup_render_target,
)

if TYPE_CHECKING:
    from meshtracer.config import RenderConfig

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_completed, total_rows)
ProgressCallback = Callable[[int, int], None]


class FrameRenderer:
    """Renders one frame row band by row band.

    The renderer maintains its own state for width/height and the number of
    completed rows, and delegates to the global render target (which is a
    Taichi field).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the frame renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are invalid or exceed maximum supported size.
        """
        self._width = width
        self._height = height
        self._rows_completed = 0
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
    def rows_completed(self) -> int:
        """Get the number of rows rendered so far."""
        return self._rows_completed

    @property
    def is_complete(self) -> bool:
        """Whether every row of the frame has been rendered."""
        return self._rows_completed >= self._height

    def reset(self) -> None:
        """Clear the image so the frame can be rendered again."""
        clear_render_target()
        self._rows_completed = 0

    def render(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render all remaining rows of the frame.

        Args:
            rows_per_batch: Number of rows to render between callbacks.
                Defaults to the whole image in one batch.
            callback: Optional callback function called after each batch.
                Receives (rows_completed, total_rows).

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(rows_per_batch=60, callback=progress)
        """
        for done, total in self.render_progressive(rows_per_batch):
            if callback is not None:
                callback(done, total)

    def render_progressive(
        self,
        rows_per_batch: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render remaining rows, yielding progress after each batch.

        This is a generator-based alternative to render() with callbacks.

        Args:
            rows_per_batch: Number of rows to render before each yield.

        Yields:
            Tuple of (rows_completed, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        if rows_per_batch is None:
            rows_per_batch = self._height
        if rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        while not self.is_complete:
            y_end = min(self._rows_completed + rows_per_batch, self._height)
            render_rows(self._rows_completed, y_end)
            self._rows_completed = y_end
            yield (self._rows_completed, self._height)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as a NumPy array.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32.
        """
        return get_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array."""
        from meshtracer.preview.export import image_to_uint8

        return image_to_uint8(self.get_image_numpy())

    def save_image(self, filepath: str | Path) -> None:
        """Save the finished image to a file.

        Args:
            filepath: Path to save the image (e.g., "output.png").

        Raises:
            RuntimeError: If the frame has not been fully rendered.
        """
        from meshtracer.preview.export import save_png_from_array

        if not self.is_complete:
            raise RuntimeError(
                f"Frame incomplete: {self._rows_completed}/{self._height} rows rendered"
            )
        save_png_from_array(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"FrameRenderer(width={self.width}, height={self.height}, "
            f"rows={self.rows_completed})"
        )


def prepare_scene(config: RenderConfig) -> None:
    """Load, transform and upload everything a frame needs.

    Args:
        config: The render configuration.

    Raises:
        FileNotFoundError: If the mesh or texture file is missing.
        MeshFormatError: If the mesh is malformed.
        ValueError: If the configuration or texture is invalid.
    """
    from meshtracer.camera.pinhole import PinholeCamera, setup_camera
    from meshtracer.scene.intersection import upload_mesh
    from meshtracer.scene.obj_loader import load_obj
    from meshtracer.scene.transform import apply_transform, rotation_matrix
    from meshtracer.shading.texture import (
        check_texture_pixels,
        load_texture_image,
        set_texture,
    )

    config.validate()

    mesh = load_obj(config.mesh_path)
    pixels = load_texture_image(config.texture_path)
    # Nothing is uploaded until both inputs are known to fit
    check_texture_pixels(pixels)

    for angle, x, y, z in config.rotations:
        mesh = apply_transform(mesh, rotation_matrix(angle, x, y, z))

    upload_mesh(mesh)
    set_texture(pixels)
    setup_camera(
        PinholeCamera(
            position=config.camera_position,
            look_at=config.camera_look_at,
            fov=config.camera_fov,
        )
    )


def render_scene(
    config: RenderConfig,
    *,
    rows_per_batch: int | None = None,
    callback: ProgressCallback | None = None,
) -> FrameRenderer:
    """Render a frame from a configuration and write it to config.output_path.

    Args:
        config: The render configuration.
        rows_per_batch: Rows per progress batch (default: whole image).
        callback: Optional progress callback, see FrameRenderer.render().

    Returns:
        The FrameRenderer holding the finished image.
    """
    prepare_scene(config)

    start_time = time.time()
    renderer = FrameRenderer(config.width, config.height)
    renderer.render(rows_per_batch=rows_per_batch, callback=callback)

    output_file = Path(config.output_path)
    renderer.save_image(output_file)

    logger.info(
        "Rendered %dx%d in %.2fs to %s",
        config.width,
        config.height,
        time.time() - start_time,
        output_file,
    )
    return renderer
