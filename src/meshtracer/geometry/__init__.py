"""Geometry module for the triangle primitive.

Components:
    triangle: HitRecord and Möller-Trumbore ray-triangle intersection

Intersection routines are Taichi functions (@ti.func) for GPU-accelerated
parallel intersection testing:
    rec = hit_triangle(ray_origin, ray_direction, v0, v1, v2)
"""

from .triangle import HitRecord, hit_triangle, triangle_area, triangle_normal

__all__ = [
    "HitRecord",
    "hit_triangle",
    "triangle_normal",
    "triangle_area",
]
