"""Shading module: texture storage, sampling and UV interpolation.

Components:
    texture: 8-bit RGB texture field, Pillow decoding, nearest-neighbour sampling
    shader: Barycentric weights, UV interpolation with v flip, trace_ray()
"""

from .shader import (
    BACKGROUND_COLOR,
    barycentric,
    barycentric_numpy,
    interpolate_uv,
    interpolate_uv_numpy,
    shade_hit,
    trace_ray,
)
from .texture import (
    MAX_TEXTURE_HEIGHT,
    MAX_TEXTURE_WIDTH,
    check_texture_pixels,
    clear_texture,
    get_texture_pixel,
    get_texture_size,
    load_texture,
    load_texture_image,
    sample_texture,
    sample_texture_numpy,
    set_texture,
    texel_coordinates,
)

__all__ = [
    # Shader
    "BACKGROUND_COLOR",
    "barycentric",
    "barycentric_numpy",
    "interpolate_uv",
    "interpolate_uv_numpy",
    "shade_hit",
    "trace_ray",
    # Texture
    "MAX_TEXTURE_WIDTH",
    "MAX_TEXTURE_HEIGHT",
    "check_texture_pixels",
    "clear_texture",
    "set_texture",
    "load_texture",
    "load_texture_image",
    "get_texture_size",
    "get_texture_pixel",
    "sample_texture",
    "sample_texture_numpy",
    "texel_coordinates",
]
