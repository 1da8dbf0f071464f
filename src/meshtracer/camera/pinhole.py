"""Pinhole camera model for primary ray generation.

This module implements a pinhole camera that generates one primary ray per
pixel. The camera is axis-aligned: it sits at its position and always looks
down the -z axis with +y up. The look-at target and field of view are kept
on the camera and reported by get_camera_info(), but they do not rotate or
scale the generated rays.

For pixel (x, y) of a W x H image the ray direction is built as:

    ndc_x = (x + 0.5) / W           ndc_y = (y + 0.5) / H
    screen_x = (2 * ndc_x - 1) * W / H
    screen_y = 1 - 2 * ndc_y
    direction = normalize(screen_x, screen_y, -1)

Pixel row y = 0 is the top of the image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from meshtracer.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> camera = PinholeCamera(position=(0.0, 0.0, 3.0), look_at=(0.0, 0.0, 0.0), fov=90.0)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(400, 300, 800, 600)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from meshtracer.core.ray import Ray, make_ray, normalize, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for a pinhole camera.

    Attributes:
        position: Camera position in world space (x, y, z). Origin of
            every primary ray.
        look_at: Point the camera is aimed at. Stored for reporting; ray
            generation always looks down -z.
        fov: Field of view in degrees. Stored for reporting; the image plane
            is fixed at unit distance with a half-height of 1.
    """

    position: tuple[float, float, float] = (0.0, 0.0, 3.0)
    look_at: tuple[float, float, float] = (0.0, 0.0, 0.0)
    fov: float = 90.0


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_look_at = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_fov = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    This must be called before rendering.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If a coordinate is not finite.
    """
    for name, value in (("position", camera.position), ("look_at", camera.look_at)):
        if len(value) != 3 or not all(math.isfinite(c) for c in value):
            raise ValueError(f"Camera {name} must be three finite numbers, got {value}")

    _camera_origin[None] = [float(c) for c in camera.position]
    _camera_look_at[None] = [float(c) for c in camera.look_at]
    _camera_fov[None] = float(camera.fov)


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the center of a pixel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray starting at the camera position with a unit direction.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)

    ndc_x = (ti.cast(pixel_x, ti.f32) + 0.5) / w
    ndc_y = (ti.cast(pixel_y, ti.f32) + 0.5) / h

    screen_x = 2.0 * ndc_x - 1.0
    screen_y = 1.0 - 2.0 * ndc_y

    # Correct for aspect ratio
    screen_x *= w / h

    direction = normalize(vec3(screen_x, screen_y, -1.0))
    return make_ray(_camera_origin[None], direction)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera position in world space."""
    return _camera_origin[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_ray_direction(pixel_x: int, pixel_y: int, width: int, height: int) -> npt.NDArray[np.float64]:
    """Compute a primary ray direction in double precision (Python-side).

    Mirrors get_ray() for debugging and tests.
    """
    ndc_x = (pixel_x + 0.5) / width
    ndc_y = (pixel_y + 0.5) / height
    screen_x = (2.0 * ndc_x - 1.0) * (width / height)
    screen_y = 1.0 - 2.0 * ndc_y
    direction = np.array([screen_x, screen_y, -1.0], dtype=np.float64)
    return direction / np.linalg.norm(direction)


def get_camera_info() -> dict[str, tuple[float, float, float] | float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, look_at and fov.
    """
    origin_vec = _camera_origin[None]
    look_at_vec = _camera_look_at[None]

    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "look_at": (float(look_at_vec[0]), float(look_at_vec[1]), float(look_at_vec[2])),
        "fov": float(_camera_fov[None]),
    }
