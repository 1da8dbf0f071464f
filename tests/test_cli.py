"""Tests for the command-line entry point.

Taichi is already initialized by the session fixture, so init_taichi is
replaced with a no-op here: initializing again would discard every field.
"""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

TRIANGLE_OBJ = "v -1 -1 -5\nv 1 -1 -5\nv 0 1 -5\nvt 0 0\nvt 1 0\nvt 0.5 1\nf 1/1 2/2 3/3\n"


@pytest.fixture
def no_taichi_init(monkeypatch):
    import meshtracer.cli

    calls = []
    monkeypatch.setattr(
        meshtracer.cli, "init_taichi", lambda force_cpu=False, quiet=False: calls.append(force_cpu)
    )
    return calls


@pytest.fixture
def scene_files(tmp_path: Path):
    mesh_path = tmp_path / "triangle.obj"
    mesh_path.write_text(TRIANGLE_OBJ, encoding="utf-8")
    texture = np.zeros((2, 2, 3), dtype=np.uint8)
    texture[0, 0] = (255, 0, 0)
    texture_path = tmp_path / "texture.png"
    PILImage.fromarray(texture, mode="RGB").save(texture_path)
    return mesh_path, texture_path


class TestBuildConfig:
    """Tests for argument parsing and config assembly."""

    def test_defaults(self):
        from meshtracer.cli import build_config, parse_args

        config = build_config(parse_args([]))
        assert config.mesh_path == "cube.obj"
        assert config.texture_path == "texture.png"
        assert config.output_path == "output.png"
        assert (config.width, config.height) == (800, 600)
        assert len(config.rotations) == 2

    def test_overrides(self):
        from meshtracer.cli import build_config, parse_args

        args = parse_args(
            [
                "--mesh", "m.obj",
                "--texture", "t.png",
                "--output", "o.png",
                "--width", "320",
                "--height", "200",
                "--rotate", "90", "0", "0", "1",
                "--rotate", "45", "1", "0", "0",
            ]
        )
        config = build_config(args)
        assert (config.mesh_path, config.texture_path, config.output_path) == (
            "m.obj",
            "t.png",
            "o.png",
        )
        assert (config.width, config.height) == (320, 200)
        assert config.rotations == [(90.0, 0.0, 0.0, 1.0), (45.0, 1.0, 0.0, 0.0)]

    def test_no_rotate(self):
        from meshtracer.cli import build_config, parse_args

        assert build_config(parse_args(["--no-rotate"])).rotations == []

    def test_flags_override_toml(self, tmp_path: Path):
        from meshtracer.cli import build_config, parse_args

        path = tmp_path / "scene.toml"
        path.write_text('mesh_path = "cube.obj"\nwidth = 64\nheight = 48\n', encoding="utf-8")

        config = build_config(parse_args(["--config", str(path), "--width", "32"]))
        assert config.width == 32
        assert config.height == 48
        assert Path(config.mesh_path) == tmp_path / "cube.obj"

    def test_invalid_resolution(self):
        from meshtracer.cli import build_config, parse_args

        with pytest.raises(ValueError):
            build_config(parse_args(["--width", "0"]))


class TestMain:
    """Tests for main()."""

    def test_renders_and_reports(self, tmp_path, scene_files, no_taichi_init, capsys):
        from meshtracer.cli import main

        mesh_path, texture_path = scene_files
        output_path = tmp_path / "out.png"

        exit_code = main(
            [
                "--mesh", str(mesh_path),
                "--texture", str(texture_path),
                "--output", str(output_path),
                "--width", "8",
                "--height", "6",
                "--no-rotate",
                "--rows-per-batch", "2",
                "--cpu",
            ]
        )

        assert exit_code == 0
        assert no_taichi_init == [True]
        out = capsys.readouterr().out
        assert "Progress: 6/6 rows" in out
        assert "Saved to:" in out
        with PILImage.open(output_path) as img:
            assert img.size == (8, 6)

    def test_quiet(self, tmp_path, scene_files, no_taichi_init, capsys):
        from meshtracer.cli import main

        mesh_path, texture_path = scene_files
        exit_code = main(
            [
                "--mesh", str(mesh_path),
                "--texture", str(texture_path),
                "--output", str(tmp_path / "out.png"),
                "--width", "4",
                "--height", "4",
                "--quiet",
            ]
        )

        assert exit_code == 0
        assert capsys.readouterr().out == ""

    def test_missing_input_returns_error(self, tmp_path, no_taichi_init, capsys):
        from meshtracer.cli import main

        exit_code = main(["--mesh", str(tmp_path / "missing.obj"), "--quiet"])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err

    def test_preview(self, tmp_path, scene_files, no_taichi_init, monkeypatch):
        import meshtracer.preview.display
        from meshtracer.cli import main

        shown = []
        monkeypatch.setattr(
            meshtracer.preview.display,
            "show_preview",
            lambda renderer, title=None, **kwargs: shown.append((renderer.width, title)),
        )

        mesh_path, texture_path = scene_files
        output_path = tmp_path / "out.png"
        exit_code = main(
            [
                "--mesh", str(mesh_path),
                "--texture", str(texture_path),
                "--output", str(output_path),
                "--width", "4",
                "--height", "4",
                "--quiet",
                "--preview",
            ]
        )

        assert exit_code == 0
        assert shown == [(4, str(output_path))]
