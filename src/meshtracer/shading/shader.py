"""Surface shading: barycentric interpolation and texture lookup.

Given the nearest hit from the intersector, the shader:
1. Computes the barycentric weights of the hit point in its triangle
2. Interpolates the corner UVs with those weights
3. Flips the v coordinate (OBJ texture space has v = 0 at the bottom,
   images have row 0 at the top)
4. Samples the texture at the resulting coordinate

Rays that hit nothing, and hits on triangles too thin to interpolate over,
resolve to BACKGROUND_COLOR.

Barycentric weights are solved from the 2x2 system

    [d00 d01] [v]   [d20]
    [d01 d11] [w] = [d21],   u = 1 - v - w

where d00 = e0.e0, d01 = e0.e1, d11 = e1.e1, d20 = p'.e0, d21 = p'.e1 with
e0 = b - a, e1 = c - a and p' = p - a.
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from meshtracer.errors import DegenerateTriangleError
from meshtracer.scene.intersection import (
    SceneHitRecord,
    get_face_uvs,
    get_face_vertices,
    intersect_scene,
)
from meshtracer.shading.texture import sample_texture

# Type aliases for vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2

# Color returned for rays that hit nothing
BACKGROUND_COLOR = vec3(0.0, 0.0, 0.0)

# Relative determinant threshold below which a triangle counts as degenerate
BARYCENTRIC_EPSILON = 1e-7


@ti.func
def barycentric(p: vec3, a: vec3, b: vec3, c: vec3):
    """Compute the barycentric weights of p in triangle (a, b, c).

    Args:
        p: The point, assumed to lie in the triangle's plane.
        a: First vertex.
        b: Second vertex.
        c: Third vertex.

    Returns:
        A tuple (weights, valid) where weights is a vec3 (w0, w1, w2) for
        (a, b, c) and valid is 0 when the triangle is degenerate (weights
        are then zero).
    """
    e0 = b - a
    e1 = c - a
    e2 = p - a

    d00 = tm.dot(e0, e0)
    d01 = tm.dot(e0, e1)
    d11 = tm.dot(e1, e1)
    d20 = tm.dot(e2, e0)
    d21 = tm.dot(e2, e1)
    denom = d00 * d11 - d01 * d01

    weights = vec3(0.0, 0.0, 0.0)
    valid = 0
    if ti.abs(denom) > BARYCENTRIC_EPSILON * d00 * d11:
        v = (d11 * d20 - d01 * d21) / denom
        w = (d00 * d21 - d01 * d20) / denom
        weights = vec3(1.0 - v - w, v, w)
        valid = 1

    return weights, valid


@ti.func
def interpolate_uv(weights: vec3, uv0: vec2, uv1: vec2, uv2: vec2) -> vec2:
    """Blend three corner UVs and flip v into image orientation.

    Returns:
        vec2(u, 1 - v) where (u, v) is the weighted sum of the corners.
    """
    uv = weights.x * uv0 + weights.y * uv1 + weights.z * uv2
    return vec2(uv.x, 1.0 - uv.y)


@ti.func
def shade_hit(rec: SceneHitRecord) -> vec3:
    """Compute the texture color at a hit point.

    Args:
        rec: A scene hit record with hit == 1.

    Returns:
        The sampled RGB color, or BACKGROUND_COLOR if the hit face is
        degenerate.
    """
    color = BACKGROUND_COLOR
    v0, v1, v2 = get_face_vertices(rec.face_id)
    weights, valid = barycentric(rec.point, v0, v1, v2)
    if valid == 1:
        uv0, uv1, uv2 = get_face_uvs(rec.face_id)
        color = sample_texture(interpolate_uv(weights, uv0, uv1, uv2))
    return color


@ti.func
def trace_ray(ray_origin: vec3, ray_direction: vec3) -> vec3:
    """Trace a primary ray and return the visible surface color.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The (normalized) ray direction.

    Returns:
        The texture color at the nearest hit, or BACKGROUND_COLOR on a miss.
    """
    color = BACKGROUND_COLOR
    rec = intersect_scene(ray_origin, ray_direction)
    if rec.hit == 1:
        color = shade_hit(rec)
    return color


# =============================================================================
# NumPy Reference Implementations (Python-side)
# =============================================================================


def barycentric_numpy(
    p: npt.ArrayLike, a: npt.ArrayLike, b: npt.ArrayLike, c: npt.ArrayLike
) -> npt.NDArray[np.float64]:
    """Compute barycentric weights in double precision.

    Returns:
        Array (w0, w1, w2) of weights for (a, b, c).

    Raises:
        DegenerateTriangleError: If the triangle has (near) zero area.
    """
    p, a, b, c = (np.asarray(x, dtype=np.float64) for x in (p, a, b, c))
    e0, e1, e2 = b - a, c - a, p - a

    d00 = float(e0 @ e0)
    d01 = float(e0 @ e1)
    d11 = float(e1 @ e1)
    d20 = float(e2 @ e0)
    d21 = float(e2 @ e1)
    denom = d00 * d11 - d01 * d01

    if abs(denom) <= BARYCENTRIC_EPSILON * d00 * d11:
        raise DegenerateTriangleError("Cannot interpolate over a zero-area triangle")

    v = (d11 * d20 - d01 * d21) / denom
    w = (d00 * d21 - d01 * d20) / denom
    return np.array([1.0 - v - w, v, w])


def interpolate_uv_numpy(
    weights: npt.ArrayLike, uv0: npt.ArrayLike, uv1: npt.ArrayLike, uv2: npt.ArrayLike
) -> tuple[float, float]:
    """Blend three corner UVs and flip v, mirroring interpolate_uv()."""
    w = np.asarray(weights, dtype=np.float64)
    corners = np.array([uv0, uv1, uv2], dtype=np.float64)
    u, v = w @ corners
    return float(u), float(1.0 - v)
