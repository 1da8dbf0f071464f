"""Wavefront OBJ loader.

Parses the subset of the OBJ format needed for textured rendering:

    v  x y z          vertex position
    vt u v [w]        texture coordinate (w ignored)
    vn x y z          vertex normal
    f  a b c [d ...]  face; each corner is i, i/j, i//k or i/j/k (1-based)

Faces with four corners are split into the triangles (0, 1, 2) and
(0, 2, 3); larger polygons continue the same fan, (0, i, i + 1). A corner
without a UV or normal reference uses index 0 for it. Comments, blank lines
and every other record type (o, g, s, usemtl, mtllib, ...) are skipped.

Example:
    >>> from meshtracer.scene.obj_loader import parse_obj
    >>> mesh = parse_obj([
    ...     "v 0 0 0", "v 1 0 0", "v 0 1 0",
    ...     "vt 0 0", "vt 1 0", "vt 0 1",
    ...     "f 1/1 2/2 3/3",
    ... ])
    >>> mesh.face_count
    1
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from os import PathLike
from pathlib import Path

import numpy as np

from meshtracer.errors import MeshFormatError
from meshtracer.scene.mesh import Face, Mesh

logger = logging.getLogger(__name__)


def _parse_floats(tokens: list[str], count: int, record: str, line_number: int) -> list[float]:
    """Parse the first `count` tokens as floats."""
    if len(tokens) < count:
        raise MeshFormatError(
            f"'{record}' record needs {count} components, got {len(tokens)}",
            line_number,
        )
    try:
        return [float(token) for token in tokens[:count]]
    except ValueError as e:
        raise MeshFormatError(f"Invalid number in '{record}' record: {e}", line_number) from e


def _parse_index(token: str, line_number: int) -> int:
    """Convert a 1-based OBJ index to 0-based. Empty tokens default to 0."""
    if token == "":
        return 0
    try:
        index = int(token)
    except ValueError as e:
        raise MeshFormatError(f"Invalid face index '{token}'", line_number) from e
    if index < 1:
        raise MeshFormatError(f"Face index {index} is out of range", line_number)
    return index - 1


def _parse_corner(token: str, line_number: int) -> tuple[int, int, int, bool, bool]:
    """Parse one face corner.

    Returns:
        Tuple of (vertex, uv, normal, has_uv, has_normal).
    """
    parts = token.split("/")
    if len(parts) > 3 or parts[0] == "":
        raise MeshFormatError(f"Malformed face corner '{token}'", line_number)

    vertex = _parse_index(parts[0], line_number)
    uv_token = parts[1] if len(parts) > 1 else ""
    normal_token = parts[2] if len(parts) > 2 else ""
    uv = _parse_index(uv_token, line_number)
    normal = _parse_index(normal_token, line_number)
    return vertex, uv, normal, uv_token != "", normal_token != ""


def triangulate(corners: list[tuple[int, int, int]]) -> list[Face]:
    """Fan-triangulate a polygon given as (vertex, uv, normal) corners.

    A quad (A, B, C, D) becomes (A, B, C) and (A, C, D). Per-corner UV and
    normal indices travel with their vertex.

    Args:
        corners: Polygon corners in winding order, at least three.

    Returns:
        The triangles in fan order.

    Raises:
        ValueError: If fewer than three corners are given.
    """
    if len(corners) < 3:
        raise ValueError(f"A face needs at least 3 corners, got {len(corners)}")

    faces = []
    first = corners[0]
    for i in range(1, len(corners) - 1):
        tri = (first, corners[i], corners[i + 1])
        faces.append(
            Face(
                vertices=(tri[0][0], tri[1][0], tri[2][0]),
                uvs=(tri[0][1], tri[1][1], tri[2][1]),
                normals=(tri[0][2], tri[1][2], tri[2][2]),
            )
        )
    return faces


def parse_obj(lines: Iterable[str]) -> Mesh:
    """Parse OBJ text into a Mesh.

    Args:
        lines: The OBJ file contents, one record per item.

    Returns:
        A validated Mesh.

    Raises:
        MeshFormatError: On malformed numbers, short records, faces with
            fewer than three corners, or out-of-range indices.
    """
    vertices: list[list[float]] = []
    uvs: list[list[float]] = []
    normals: list[list[float]] = []
    faces: list[Face] = []
    face_lines: list[int] = []
    missing_uv = False
    missing_normal = False

    for line_number, raw in enumerate(lines, start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue

        tokens = line.split()
        record, args = tokens[0], tokens[1:]

        if record == "v":
            vertices.append(_parse_floats(args, 3, record, line_number))
        elif record == "vt":
            uvs.append(_parse_floats(args, 2, record, line_number))
        elif record == "vn":
            normals.append(_parse_floats(args, 3, record, line_number))
        elif record == "f":
            if len(args) < 3:
                raise MeshFormatError(
                    f"Face needs at least 3 corners, got {len(args)}", line_number
                )
            corners = []
            for token in args:
                vertex, uv, normal, has_uv, has_normal = _parse_corner(token, line_number)
                missing_uv = missing_uv or not has_uv
                missing_normal = missing_normal or not has_normal
                corners.append((vertex, uv, normal))
            for face in triangulate(corners):
                faces.append(face)
                face_lines.append(line_number)

    # Defaulted references point at index 0, which must exist
    if missing_uv and not uvs:
        uvs.append([0.0, 0.0])
    if missing_normal and not normals:
        normals.append([0.0, 0.0, 0.0])

    mesh = Mesh(
        vertices=np.array(vertices, dtype=np.float64).reshape(-1, 3),
        uvs=np.array(uvs, dtype=np.float64).reshape(-1, 2),
        normals=np.array(normals, dtype=np.float64).reshape(-1, 3),
        faces=faces,
    )

    try:
        mesh.validate()
    except MeshFormatError as e:
        # Re-raise with the line of the offending face
        face_id = _first_invalid_face(mesh)
        line_number = face_lines[face_id] if face_id is not None else None
        raise MeshFormatError(str(e), line_number) from e

    return mesh


def _first_invalid_face(mesh: Mesh) -> int | None:
    for face_id, face in enumerate(mesh.faces):
        if not all(0 <= i < mesh.vertex_count for i in face.vertices):
            return face_id
        if not all(0 <= i < mesh.uv_count for i in face.uvs):
            return face_id
        if not all(0 <= i < mesh.normal_count for i in face.normals):
            return face_id
    return None


def load_obj(path: str | PathLike[str]) -> Mesh:
    """Load a Mesh from an OBJ file.

    Args:
        path: Path to the .obj file.

    Returns:
        A validated Mesh.

    Raises:
        FileNotFoundError: If the file does not exist.
        MeshFormatError: If the file is not UTF-8 text or its contents are
            malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Mesh file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            mesh = parse_obj(f)
    except UnicodeDecodeError as e:
        raise MeshFormatError(f"{path} is not valid UTF-8 text: {e.reason}") from e

    logger.info(
        "Loaded %s: %d vertices, %d uvs, %d normals, %d triangles",
        path,
        mesh.vertex_count,
        mesh.uv_count,
        mesh.normal_count,
        mesh.face_count,
    )
    return mesh
