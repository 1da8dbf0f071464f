"""Pytest configuration for meshtracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    discard every field allocated so far.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene, texture and render target before and after each test."""
    # Import here so Taichi is initialized before any field is created
    from meshtracer.core.tracer import reset_render_target
    from meshtracer.scene.intersection import clear_scene
    from meshtracer.shading.texture import clear_texture

    def _clear_all():
        clear_scene()
        clear_texture()
        reset_render_target()

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def single_triangle_mesh():
    """Triangle at z=-5 with vertices (-1,-1), (1,-1), (0,1) and matching UVs."""
    from meshtracer.scene.mesh import Face, Mesh

    return Mesh(
        vertices=np.array([[-1.0, -1.0, -5.0], [1.0, -1.0, -5.0], [0.0, 1.0, -5.0]]),
        uvs=np.array([[0.0, 0.0], [1.0, 0.0], [0.5, 1.0]]),
        normals=np.array([[0.0, 0.0, 1.0]]),
        faces=[Face(vertices=(0, 1, 2), uvs=(0, 1, 2), normals=(0, 0, 0))],
    )


@pytest.fixture
def corner_texture():
    """2x2 texture: red top-left, green top-right, blue bottom-left, white bottom-right."""
    return np.array(
        [
            [[255, 0, 0], [0, 255, 0]],
            [[0, 0, 255], [255, 255, 255]],
        ],
        dtype=np.uint8,
    )


@pytest.fixture
def cube_obj_text():
    """Unit cube with one full-texture UV square per face."""
    return """\
v -0.5 -0.5  0.5
v  0.5 -0.5  0.5
v  0.5  0.5  0.5
v -0.5  0.5  0.5
v -0.5 -0.5 -0.5
v  0.5 -0.5 -0.5
v  0.5  0.5 -0.5
v -0.5  0.5 -0.5
vt 0 0
vt 1 0
vt 1 1
vt 0 1
f 1/1 2/2 3/3 4/4
f 6/1 5/2 8/3 7/4
f 2/1 6/2 7/3 3/4
f 5/1 1/2 4/3 8/4
f 4/1 3/2 7/3 8/4
f 5/1 6/2 2/3 1/4
"""
