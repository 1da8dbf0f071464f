"""Host-side mesh model.

A Mesh is the flat, indexed representation produced by the OBJ loader and
consumed by the GPU scene storage. Geometry lives in NumPy arrays; faces only
hold integer indices into those arrays, never references to the vectors
themselves.

Example:
    >>> import numpy as np
    >>> from meshtracer.scene.mesh import Face, Mesh
    >>> mesh = Mesh(
    ...     vertices=np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=np.float64),
    ...     uvs=np.array([[0, 0], [1, 0], [0, 1]], dtype=np.float64),
    ...     normals=np.zeros((1, 3)),
    ...     faces=[Face(vertices=(0, 1, 2), uvs=(0, 1, 2), normals=(0, 0, 0))],
    ... )
    >>> mesh.validate()
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from meshtracer.errors import MeshFormatError


@dataclass(frozen=True)
class Face:
    """A triangle referencing vertex, UV and normal arrays by 0-based index.

    Attributes:
        vertices: Indices into Mesh.vertices for the three corners.
        uvs: Indices into Mesh.uvs for the three corners.
        normals: Indices into Mesh.normals for the three corners. Parsed
            but not used by texture sampling.
    """

    vertices: tuple[int, int, int]
    uvs: tuple[int, int, int] = (0, 0, 0)
    normals: tuple[int, int, int] = (0, 0, 0)


def _empty(columns: int) -> npt.NDArray[np.float64]:
    return np.zeros((0, columns), dtype=np.float64)


@dataclass
class Mesh:
    """Indexed triangle mesh.

    Attributes:
        vertices: Vertex positions, shape (N, 3).
        uvs: Texture coordinates, shape (M, 2).
        normals: Vertex normals, shape (K, 3).
        faces: Triangles in file order.
    """

    vertices: npt.NDArray[np.float64] = field(default_factory=lambda: _empty(3))
    uvs: npt.NDArray[np.float64] = field(default_factory=lambda: _empty(2))
    normals: npt.NDArray[np.float64] = field(default_factory=lambda: _empty(3))
    faces: list[Face] = field(default_factory=list)

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def uv_count(self) -> int:
        return int(self.uvs.shape[0])

    @property
    def normal_count(self) -> int:
        return int(self.normals.shape[0])

    @property
    def face_count(self) -> int:
        return len(self.faces)

    def validate(self) -> None:
        """Check array shapes and that every face index is in range.

        Raises:
            MeshFormatError: If an array has the wrong shape or a face
                references an element that does not exist.
        """
        for name, array, columns in (
            ("vertices", self.vertices, 3),
            ("uvs", self.uvs, 2),
            ("normals", self.normals, 3),
        ):
            if array.ndim != 2 or array.shape[1] != columns:
                raise MeshFormatError(
                    f"{name} must have shape (n, {columns}), got {array.shape}"
                )

        for face_id, face in enumerate(self.faces):
            for kind, indices, count in (
                ("vertex", face.vertices, self.vertex_count),
                ("uv", face.uvs, self.uv_count),
                ("normal", face.normals, self.normal_count),
            ):
                for index in indices:
                    if not 0 <= index < count:
                        raise MeshFormatError(
                            f"Face {face_id} references {kind} {index}, "
                            f"but the mesh has {count} {kind} entries"
                        )

    def face_index_arrays(
        self,
    ) -> tuple[npt.NDArray[np.int32], npt.NDArray[np.int32], npt.NDArray[np.int32]]:
        """Get face indices as three (F, 3) int32 arrays (vertex, uv, normal)."""
        if not self.faces:
            empty = np.zeros((0, 3), dtype=np.int32)
            return empty, empty.copy(), empty.copy()
        vertex_ids = np.array([f.vertices for f in self.faces], dtype=np.int32)
        uv_ids = np.array([f.uvs for f in self.faces], dtype=np.int32)
        normal_ids = np.array([f.normals for f in self.faces], dtype=np.int32)
        return vertex_ids, uv_ids, normal_ids

    def bounds(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Get the axis-aligned bounding box of the vertices.

        Returns:
            Tuple of (min_corner, max_corner).

        Raises:
            ValueError: If the mesh has no vertices.
        """
        if self.vertex_count == 0:
            raise ValueError("Cannot compute bounds of a mesh without vertices")
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def __repr__(self) -> str:
        return (
            f"Mesh(vertices={self.vertex_count}, uvs={self.uv_count}, "
            f"normals={self.normal_count}, faces={self.face_count})"
        )
