"""Rigid transforms applied to a mesh before rendering.

Matrices are 4x4 homogeneous NumPy arrays acting on column vectors, using
the same conventions as OpenGL's glRotate/glTranslate. Transforms are
applied once, on the host, before the mesh is uploaded; nothing moves while
a frame is being rendered.

Example:
    >>> from meshtracer.scene.transform import apply_transform, rotation_matrix
    >>> rx = rotation_matrix(30.0, 1.0, 0.0, 0.0)
    >>> ry = rotation_matrix(30.0, 0.0, 1.0, 0.0)
    >>> mesh = apply_transform(apply_transform(mesh, rx), ry)
"""

from __future__ import annotations

import math
from dataclasses import replace

import numpy as np
import numpy.typing as npt

from meshtracer.errors import DegenerateVectorError
from meshtracer.scene.mesh import Mesh


def rotation_matrix(angle_degrees: float, x: float, y: float, z: float) -> npt.NDArray[np.float64]:
    """Build a rotation matrix about an arbitrary axis (glRotate semantics).

    Args:
        angle_degrees: Counter-clockwise rotation angle in degrees, looking
            down the axis toward the origin.
        x: Axis x component.
        y: Axis y component.
        z: Axis z component.

    Returns:
        A 4x4 rotation matrix.

    Raises:
        DegenerateVectorError: If the axis has zero length.
    """
    axis_length = math.sqrt(x * x + y * y + z * z)
    if axis_length < 1e-12:
        raise DegenerateVectorError("Rotation axis must have non-zero length")
    x, y, z = x / axis_length, y / axis_length, z / axis_length

    theta = math.radians(angle_degrees)
    c = math.cos(theta)
    s = math.sin(theta)
    k = 1.0 - c

    return np.array(
        [
            [x * x * k + c, x * y * k - z * s, x * z * k + y * s, 0.0],
            [y * x * k + z * s, y * y * k + c, y * z * k - x * s, 0.0],
            [x * z * k - y * s, y * z * k + x * s, z * z * k + c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )


def translation_matrix(x: float, y: float, z: float) -> npt.NDArray[np.float64]:
    """Build a translation matrix (glTranslate semantics)."""
    matrix = np.identity(4, dtype=np.float64)
    matrix[:3, 3] = (x, y, z)
    return matrix


def transform_points(
    points: npt.NDArray[np.float64], matrix: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """Apply a 4x4 matrix to an (N, 3) array of points.

    Raises:
        ValueError: If the matrix is not 4x4.
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise ValueError(f"Transform must be a 4x4 matrix, got shape {matrix.shape}")

    homogeneous = np.hstack([points, np.ones((points.shape[0], 1), dtype=np.float64)])
    result = homogeneous @ matrix.T
    w = result[:, 3:4]
    # Affine matrices keep w == 1; projective ones need the divide
    if not np.allclose(w, 1.0):
        result = result / w
    return result[:, :3]


def apply_transform(mesh: Mesh, matrix: npt.NDArray[np.float64]) -> Mesh:
    """Transform all vertex positions of a mesh.

    UVs, normals and faces are carried over unchanged.

    Args:
        mesh: The mesh to transform. It is not modified.
        matrix: A 4x4 homogeneous transform.

    Returns:
        A new Mesh with transformed vertices.
    """
    return replace(mesh, vertices=transform_points(mesh.vertices, matrix))
