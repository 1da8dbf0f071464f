"""Scene module: mesh model, loading, transforms and GPU storage.

Components:
    mesh: Host-side Face and Mesh dataclasses (NumPy arrays + index triples)
    obj_loader: Wavefront OBJ parser with fan triangulation
    transform: glRotate-style matrices applied before upload
    intersection: Taichi field storage and nearest-hit ray queries

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for vertex attributes
    - Per-corner integer index fields for faces
"""

from .intersection import (
    MAX_FACES,
    MAX_NORMALS,
    MAX_UVS,
    MAX_VERTICES,
    SceneHitRecord,
    clear_scene,
    get_face_count,
    get_normal_count,
    get_uv_count,
    get_vertex_count,
    intersect_scene,
    upload_mesh,
)
from .mesh import Face, Mesh
from .obj_loader import load_obj, parse_obj, triangulate
from .transform import apply_transform, rotation_matrix, transform_points, translation_matrix

__all__ = [
    # Mesh model
    "Face",
    "Mesh",
    # OBJ loading
    "load_obj",
    "parse_obj",
    "triangulate",
    # Transforms
    "apply_transform",
    "rotation_matrix",
    "translation_matrix",
    "transform_points",
    # GPU storage and intersection
    "SceneHitRecord",
    "upload_mesh",
    "clear_scene",
    "get_vertex_count",
    "get_uv_count",
    "get_normal_count",
    "get_face_count",
    "intersect_scene",
    "MAX_VERTICES",
    "MAX_UVS",
    "MAX_NORMALS",
    "MAX_FACES",
]
