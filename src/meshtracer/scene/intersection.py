"""GPU scene storage and nearest-hit ray queries.

The mesh is stored in preallocated Taichi fields using a Structure-of-Arrays
layout: one field per vertex attribute and one index field per face
attribute. Faces reference vertices, UVs and normals by integer index, so
the fields must stay populated for as long as faces are being traced.

Scene data is written once by upload_mesh() and only read while rendering.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from meshtracer.scene.intersection import upload_mesh, intersect_scene
    >>> from meshtracer.scene.obj_loader import load_obj
    >>> upload_mesh(load_obj("cube.obj"))
    >>> # Use intersect_scene within a Taichi kernel
"""

import logging

import numpy as np
import taichi as ti
import taichi.math as tm

from meshtracer.geometry.triangle import HitRecord, hit_triangle
from meshtracer.scene.mesh import Mesh

# Type aliases for vectors using Taichi's math module
vec3 = tm.vec3
vec2 = tm.vec2
ivec3 = tm.ivec3

logger = logging.getLogger(__name__)


@ti.dataclass
class SceneHitRecord:
    """Record of the nearest ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any face (1 if hit, 0 if miss).
        t: Distance along the ray of the nearest hit. Only valid if hit == 1.
        point: The 3D hit point. Only valid if hit == 1.
        normal: Geometric normal of the hit face. Only valid if hit == 1.
        face_id: Index of the hit face. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    face_id: ti.i32


# Maximum number of elements supported in the scene
MAX_VERTICES = 65536
MAX_UVS = 65536
MAX_NORMALS = 65536
MAX_FACES = 131072

# Vertex attribute storage
vertices = ti.Vector.field(3, dtype=ti.f32, shape=MAX_VERTICES)
uvs = ti.Vector.field(2, dtype=ti.f32, shape=MAX_UVS)
normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_NORMALS)
num_vertices = ti.field(dtype=ti.i32, shape=())
num_uvs = ti.field(dtype=ti.i32, shape=())
num_normals = ti.field(dtype=ti.i32, shape=())

# Face storage: per-corner indices into the attribute fields
face_vertex_ids = ti.Vector.field(3, dtype=ti.i32, shape=MAX_FACES)
face_uv_ids = ti.Vector.field(3, dtype=ti.i32, shape=MAX_FACES)
face_normal_ids = ti.Vector.field(3, dtype=ti.i32, shape=MAX_FACES)
num_faces = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all geometry from the scene.

    Resets the element counts to zero. The field data is not cleared but
    will be overwritten when a new mesh is uploaded.
    """
    num_vertices[None] = 0
    num_uvs[None] = 0
    num_normals[None] = 0
    num_faces[None] = 0


@ti.kernel
def _copy_vec3(dst: ti.template(), src: ti.types.ndarray(), n: ti.i32):
    for i in range(n):
        dst[i] = vec3(src[i, 0], src[i, 1], src[i, 2])


@ti.kernel
def _copy_vec2(dst: ti.template(), src: ti.types.ndarray(), n: ti.i32):
    for i in range(n):
        dst[i] = vec2(src[i, 0], src[i, 1])


@ti.kernel
def _copy_ivec3(dst: ti.template(), src: ti.types.ndarray(), n: ti.i32):
    for i in range(n):
        dst[i] = ivec3(src[i, 0], src[i, 1], src[i, 2])


def _check_capacity(kind: str, count: int, maximum: int) -> None:
    if count > maximum:
        raise RuntimeError(f"Maximum number of {kind} ({maximum}) exceeded: {count}")


def upload_mesh(mesh: Mesh) -> None:
    """Replace the scene contents with a mesh.

    The mesh is validated before anything is written, so a rejected mesh
    leaves the previous scene untouched.

    Args:
        mesh: The mesh to upload.

    Raises:
        MeshFormatError: If a face index is out of range.
        RuntimeError: If the mesh exceeds the preallocated capacity.
    """
    mesh.validate()
    _check_capacity("vertices", mesh.vertex_count, MAX_VERTICES)
    _check_capacity("uvs", mesh.uv_count, MAX_UVS)
    _check_capacity("normals", mesh.normal_count, MAX_NORMALS)
    _check_capacity("faces", mesh.face_count, MAX_FACES)

    clear_scene()

    if mesh.vertex_count > 0:
        _copy_vec3(vertices, np.ascontiguousarray(mesh.vertices, dtype=np.float32), mesh.vertex_count)
    if mesh.uv_count > 0:
        _copy_vec2(uvs, np.ascontiguousarray(mesh.uvs, dtype=np.float32), mesh.uv_count)
    if mesh.normal_count > 0:
        _copy_vec3(normals, np.ascontiguousarray(mesh.normals, dtype=np.float32), mesh.normal_count)

    if mesh.face_count > 0:
        vertex_ids, uv_ids, normal_ids = mesh.face_index_arrays()
        _copy_ivec3(face_vertex_ids, vertex_ids, mesh.face_count)
        _copy_ivec3(face_uv_ids, uv_ids, mesh.face_count)
        _copy_ivec3(face_normal_ids, normal_ids, mesh.face_count)

    num_vertices[None] = mesh.vertex_count
    num_uvs[None] = mesh.uv_count
    num_normals[None] = mesh.normal_count
    num_faces[None] = mesh.face_count

    logger.debug("Uploaded %r", mesh)


def get_vertex_count() -> int:
    """Get the number of vertices in the scene."""
    return int(num_vertices[None])


def get_uv_count() -> int:
    """Get the number of texture coordinates in the scene."""
    return int(num_uvs[None])


def get_normal_count() -> int:
    """Get the number of normals in the scene."""
    return int(num_normals[None])


def get_face_count() -> int:
    """Get the number of triangles in the scene."""
    return int(num_faces[None])


@ti.func
def get_face_vertices(face_id: ti.i32):
    """Get the three vertex positions of a face.

    Returns:
        A tuple (v0, v1, v2) of vec3.
    """
    ids = face_vertex_ids[face_id]
    return vertices[ids[0]], vertices[ids[1]], vertices[ids[2]]


@ti.func
def get_face_uvs(face_id: ti.i32):
    """Get the three texture coordinates of a face.

    Returns:
        A tuple (uv0, uv1, uv2) of vec2, in the same corner order as
        get_face_vertices().
    """
    ids = face_uv_ids[face_id]
    return uvs[ids[0]], uvs[ids[1]], uvs[ids[2]]


@ti.func
def _hit_record_to_scene_hit_record(rec: HitRecord, face_id: ti.i32) -> SceneHitRecord:
    """Convert a triangle HitRecord to a SceneHitRecord with the face index."""
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        face_id=face_id,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        face_id=-1,
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest face hit by a ray.

    Tests every face in storage order and keeps the hit with the smallest
    t. A later face only replaces the current hit when its t is strictly
    smaller, so equal distances resolve to the first face encountered.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record.
    """
    result = _make_miss_record()

    for i in range(num_faces[None]):
        v0, v1, v2 = get_face_vertices(i)
        rec = hit_triangle(ray_origin, ray_direction, v0, v1, v2)
        if rec.hit == 1:
            if result.hit == 0 or rec.t < result.t:
                result = _hit_record_to_scene_hit_record(rec, i)

    return result
