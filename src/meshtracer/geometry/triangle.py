"""Triangle primitive with Möller-Trumbore ray-triangle intersection.

This module provides the HitRecord dataclass and the intersection routine
used for every face of a mesh.

The Möller-Trumbore test solves

    origin + t * direction = (1 - u - v) * v0 + u * v1 + v * v2

directly with Cramer's rule, without first computing the triangle's plane.
The test is non-culling: front and back faces are both reported, and only
the sign of the determinant distinguishes them.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from meshtracer.geometry.triangle import hit_triangle
    >>> # Use hit_triangle within a Taichi kernel:
    >>> # rec = hit_triangle(origin, direction, v0, v1, v2)
"""

import taichi as ti
import taichi.math as tm

from meshtracer.core.ray import EPSILON, normalize, vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-triangle intersection.

    Attributes:
        hit: Whether the ray intersected the triangle (1 if hit, 0 if miss).
        t: The signed distance along the ray where the intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the triangle.
            Only valid if hit == 1.
        normal: The geometric normal normalize(edge1 x edge2). It is not
            flipped toward the ray. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def hit_triangle(
    ray_origin: vec3,
    ray_direction: vec3,
    v0: vec3,
    v1: vec3,
    v2: vec3,
) -> HitRecord:
    """Test for ray-triangle intersection (Möller-Trumbore).

    Steps:
    1. edge1 = v1 - v0, edge2 = v2 - v0, h = direction x edge2, a = edge1 . h
    2. |a| < EPSILON means the ray is parallel to the triangle plane: miss
    3. u = f * (s . h) with f = 1 / a and s = origin - v0; miss outside [0, 1]
    4. v = f * (direction . q) with q = s x edge1; miss if v < 0 or u + v > 1
    5. t = f * (edge2 . q); hit only when t > EPSILON

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        v0: First triangle vertex.
        v1: Second triangle vertex.
        v2: Third triangle vertex.

    Returns:
        A HitRecord. Check the hit field before reading point and normal.
    """
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    edge1 = v1 - v0
    edge2 = v2 - v0
    h = tm.cross(ray_direction, edge2)
    a = tm.dot(edge1, h)

    # Degenerate triangle or ray parallel to its plane
    if ti.abs(a) >= EPSILON:
        f = 1.0 / a
        s = ray_origin - v0
        u = f * tm.dot(s, h)

        if u >= 0.0 and u <= 1.0:
            q = tm.cross(s, edge1)
            v = f * tm.dot(ray_direction, q)

            if v >= 0.0 and u + v <= 1.0:
                t = f * tm.dot(edge2, q)

                # Reject intersections behind or at the ray origin
                if t > EPSILON:
                    did_hit = 1
                    hit_t = t
                    hit_point = ray_origin + ray_direction * t
                    hit_normal = normalize(tm.cross(edge1, edge2))

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=hit_normal)


@ti.func
def triangle_normal(v0: vec3, v1: vec3, v2: vec3) -> vec3:
    """Compute the unit geometric normal of a triangle.

    The normal follows the right-hand rule over (v0, v1, v2). A degenerate
    triangle yields the zero vector.
    """
    return normalize(tm.cross(v1 - v0, v2 - v0))


@ti.func
def triangle_area(v0: vec3, v1: vec3, v2: vec3) -> ti.f32:
    """Compute the area of a triangle (half the cross product magnitude)."""
    return 0.5 * tm.length(tm.cross(v1 - v0, v2 - v0))
