"""Camera module for primary ray generation.

Components:
    pinhole: Axis-aligned pinhole camera

Ray generation maps pixel centers through normalized device coordinates to
a unit direction looking down -z, corrected for the image aspect ratio.
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_camera_origin,
    get_ray,
    get_ray_direction,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_ray",
    "get_ray_direction",
    "get_camera_origin",
    "get_camera_info",
]
