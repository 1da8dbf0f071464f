"""Core rendering module.

This module contains the fundamental building blocks for ray casting:

Components:
    ray: Ray data structure and vector utilities
    tracer: Render target and the per-pixel frame kernel
    frame: Frame driver (row-band rendering, progress, full pipeline)

All compute-intensive operations use Taichi kernels for GPU acceleration.
"""

from .ray import (
    EPSILON,
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    ray_at,
    vec2,
    vec3,
)

# Note: tracer and frame are NOT imported here to avoid circular imports.
# Import directly from meshtracer.core.tracer or meshtracer.core.frame when needed.

__all__ = [
    "EPSILON",
    "Ray",
    "ray_at",
    "make_ray",
    "vec2",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "near_zero",
]
