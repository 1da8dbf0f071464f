"""Unit tests for RenderConfig."""

import math
from pathlib import Path

import pytest


class TestDefaults:
    """Tests for the default configuration."""

    def test_defaults(self):
        from meshtracer.config import RenderConfig

        config = RenderConfig()
        assert config.mesh_path == "cube.obj"
        assert config.texture_path == "texture.png"
        assert config.output_path == "output.png"
        assert (config.width, config.height) == (800, 600)
        assert config.camera_position == (0.0, 0.0, 3.0)
        assert config.rotations == [(30.0, 1.0, 0.0, 0.0), (30.0, 0.0, 1.0, 0.0)]
        config.validate()

    def test_rotations_are_not_shared(self):
        from meshtracer.config import DEFAULT_ROTATIONS, RenderConfig

        config = RenderConfig()
        config.rotations.append((10.0, 0.0, 0.0, 1.0))
        assert len(RenderConfig().rotations) == 2
        assert len(DEFAULT_ROTATIONS) == 2


class TestValidate:
    """Tests for RenderConfig.validate()."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"width": 0},
            {"height": -1},
            {"width": 4096},
            {"camera_position": (0.0, math.nan, 0.0)},
            {"camera_look_at": (0.0, 0.0)},
            {"camera_fov": 0.0},
            {"camera_fov": 180.0},
            {"rotations": [(30.0, 1.0, 0.0)]},
        ],
    )
    def test_invalid_values(self, overrides):
        from meshtracer.config import RenderConfig

        with pytest.raises(ValueError):
            RenderConfig(**overrides).validate()


class TestFromDict:
    """Tests for RenderConfig.from_dict()."""

    def test_flat_and_nested_camera(self):
        from meshtracer.config import RenderConfig

        config = RenderConfig.from_dict(
            {
                "mesh_path": "model.obj",
                "width": 320,
                "height": 240,
                "rotations": [[45, 0, 0, 1]],
                "camera": {"position": [1, 2, 3], "fov": 60},
            }
        )
        assert config.mesh_path == "model.obj"
        assert (config.width, config.height) == (320, 240)
        assert config.rotations == [(45.0, 0.0, 0.0, 1.0)]
        assert config.camera_position == (1.0, 2.0, 3.0)
        assert config.camera_fov == 60.0
        assert config.texture_path == "texture.png"

    def test_flat_camera_keys(self):
        from meshtracer.config import RenderConfig

        config = RenderConfig.from_dict({"camera_look_at": [0, 0, -1]})
        assert config.camera_look_at == (0.0, 0.0, -1.0)

    def test_empty_rotations(self):
        from meshtracer.config import RenderConfig

        assert RenderConfig.from_dict({"rotations": []}).rotations == []

    @pytest.mark.parametrize(
        "data",
        [
            {"samples": 4},
            {"camera": {"aperture": 1.0}},
            {"camera": 3},
            {"width": "800"},
            {"width": 800.0},
            {"height": True},
            {"camera": {"position": [0, 0]}},
            {"rotations": [[30, 1, 0]]},
            {"rotations": [["a", 1, 0, 0]]},
        ],
    )
    def test_invalid(self, data):
        from meshtracer.config import RenderConfig

        with pytest.raises(ValueError):
            RenderConfig.from_dict(data)


class TestFromToml:
    """Tests for RenderConfig.from_toml()."""

    def test_load_toml(self, tmp_path: Path):
        from meshtracer.config import RenderConfig

        path = tmp_path / "scene.toml"
        path.write_text(
            'mesh_path = "models/cube.obj"\n'
            'texture_path = "/abs/crate.png"\n'
            "width = 64\n"
            "height = 48\n"
            "rotations = [[15.0, 0.0, 1.0, 0.0]]\n"
            "\n"
            "[camera]\n"
            "position = [0.0, 0.0, 4.0]\n",
            encoding="utf-8",
        )

        config = RenderConfig.from_toml(path)
        assert Path(config.mesh_path) == tmp_path / "models" / "cube.obj"
        assert config.texture_path == "/abs/crate.png"
        # Keys left out keep their defaults
        assert config.output_path == "output.png"
        assert (config.width, config.height) == (64, 48)
        assert config.rotations == [(15.0, 0.0, 1.0, 0.0)]
        assert config.camera_position == (0.0, 0.0, 4.0)

    def test_missing_file(self, tmp_path: Path):
        from meshtracer.config import RenderConfig

        with pytest.raises(FileNotFoundError):
            RenderConfig.from_toml(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path):
        from meshtracer.config import RenderConfig

        path = tmp_path / "broken.toml"
        path.write_text("width = = 3\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid TOML"):
            RenderConfig.from_toml(path)

    def test_invalid_values_in_toml(self, tmp_path: Path):
        from meshtracer.config import RenderConfig

        path = tmp_path / "zero.toml"
        path.write_text("width = 0\n", encoding="utf-8")
        with pytest.raises(ValueError):
            RenderConfig.from_toml(path)
