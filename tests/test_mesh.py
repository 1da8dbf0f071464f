"""Unit tests for the host-side Mesh model."""

import numpy as np
import pytest


def _triangle_mesh(**overrides):
    from meshtracer.scene.mesh import Face, Mesh

    data = dict(
        vertices=np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]),
        uvs=np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]),
        normals=np.array([[0.0, 0.0, 1.0]]),
        faces=[Face(vertices=(0, 1, 2), uvs=(0, 1, 2), normals=(0, 0, 0))],
    )
    data.update(overrides)
    return Mesh(**data)


class TestMeshCounts:
    """Tests for counts, bounds and index arrays."""

    def test_counts(self):
        mesh = _triangle_mesh()
        assert mesh.vertex_count == 3
        assert mesh.uv_count == 3
        assert mesh.normal_count == 1
        assert mesh.face_count == 1

    def test_default_mesh_is_empty(self):
        from meshtracer.scene.mesh import Mesh

        mesh = Mesh()
        assert mesh.vertex_count == 0
        assert mesh.face_count == 0
        mesh.validate()

    def test_face_defaults(self):
        """Test a Face without UV or normal indices points at entry 0."""
        from meshtracer.scene.mesh import Face

        face = Face(vertices=(3, 4, 5))
        assert face.uvs == (0, 0, 0)
        assert face.normals == (0, 0, 0)

    def test_face_index_arrays(self):
        from meshtracer.scene.mesh import Face

        mesh = _triangle_mesh(
            faces=[
                Face(vertices=(0, 1, 2), uvs=(2, 1, 0)),
                Face(vertices=(2, 1, 0), uvs=(0, 1, 2)),
            ]
        )
        vertex_ids, uv_ids, normal_ids = mesh.face_index_arrays()
        assert vertex_ids.dtype == np.int32
        np.testing.assert_array_equal(vertex_ids, [[0, 1, 2], [2, 1, 0]])
        np.testing.assert_array_equal(uv_ids, [[2, 1, 0], [0, 1, 2]])
        np.testing.assert_array_equal(normal_ids, np.zeros((2, 3)))

    def test_face_index_arrays_empty(self):
        from meshtracer.scene.mesh import Mesh

        vertex_ids, uv_ids, normal_ids = Mesh().face_index_arrays()
        assert vertex_ids.shape == (0, 3)
        assert uv_ids.shape == (0, 3)
        assert normal_ids.shape == (0, 3)

    def test_bounds(self):
        lo, hi = _triangle_mesh().bounds()
        np.testing.assert_allclose(lo, [0.0, 0.0, 0.0])
        np.testing.assert_allclose(hi, [1.0, 1.0, 0.0])

    def test_bounds_of_empty_mesh(self):
        from meshtracer.scene.mesh import Mesh

        with pytest.raises(ValueError):
            Mesh().bounds()

    def test_repr(self):
        assert repr(_triangle_mesh()) == "Mesh(vertices=3, uvs=3, normals=1, faces=1)"


class TestMeshValidation:
    """Tests for Mesh.validate()."""

    def test_valid_mesh(self):
        _triangle_mesh().validate()

    @pytest.mark.parametrize(
        "vertices, uvs, normals",
        [
            ((0, 1, 3), (0, 1, 2), (0, 0, 0)),
            ((0, 1, -1), (0, 1, 2), (0, 0, 0)),
            ((0, 1, 2), (0, 1, 3), (0, 0, 0)),
            ((0, 1, 2), (0, 1, 2), (0, 0, 1)),
        ],
    )
    def test_out_of_range_index(self, vertices, uvs, normals):
        from meshtracer.errors import MeshFormatError
        from meshtracer.scene.mesh import Face

        face = Face(vertices=vertices, uvs=uvs, normals=normals)
        with pytest.raises(MeshFormatError):
            _triangle_mesh(faces=[face]).validate()

    def test_bad_array_shape(self):
        from meshtracer.errors import MeshFormatError

        with pytest.raises(MeshFormatError, match="uvs"):
            _triangle_mesh(uvs=np.zeros((3, 3))).validate()
