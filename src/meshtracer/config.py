"""Render configuration.

The configuration surface is the mesh path, the texture path, the output
path and the resolution, plus the camera and the rotations applied to the
mesh before rendering. Defaults reproduce the classic textured-cube render:
cube.obj and texture.png into output.png at 800x600, the camera at (0, 0, 3)
and the mesh turned 30 degrees about X, then 30 degrees about Y.

Configurations can be built directly, from a dict, or from a TOML file:

    mesh_path = "models/cube.obj"
    texture_path = "textures/crate.png"
    output_path = "crate.png"
    width = 640
    height = 480
    rotations = [[30.0, 1.0, 0.0, 0.0], [30.0, 0.0, 1.0, 0.0]]

    [camera]
    position = [0.0, 0.0, 3.0]
    look_at = [0.0, 0.0, 0.0]
    fov = 90.0
"""

from __future__ import annotations

import math
import tomllib
from dataclasses import dataclass, field, fields
from os import PathLike
from pathlib import Path
from typing import Any

DEFAULT_ROTATIONS: list[tuple[float, float, float, float]] = [
    (30.0, 1.0, 0.0, 0.0),
    (30.0, 0.0, 1.0, 0.0),
]


def _vector3(name: str, value: Any) -> tuple[float, float, float]:
    try:
        x, y, z = (float(c) for c in value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a list of three numbers, got {value!r}") from e
    return (x, y, z)


def _rotation(value: Any) -> tuple[float, float, float, float]:
    try:
        angle, x, y, z = (float(c) for c in value)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"rotation must be [angle, x, y, z], got {value!r}"
        ) from e
    return (angle, x, y, z)


@dataclass
class RenderConfig:
    """Everything needed to render one frame.

    Attributes:
        mesh_path: OBJ file to render.
        texture_path: Image file used as the texture.
        output_path: PNG file written after the frame is complete.
        width: Image width in pixels.
        height: Image height in pixels.
        camera_position: Camera position in world space.
        camera_look_at: Camera target (reported only, see PinholeCamera).
        camera_fov: Camera field of view in degrees (reported only).
        rotations: (angle_degrees, x, y, z) rotations applied to the mesh
            in order before rendering.
    """

    mesh_path: str = "cube.obj"
    texture_path: str = "texture.png"
    output_path: str = "output.png"
    width: int = 800
    height: int = 600
    camera_position: tuple[float, float, float] = (0.0, 0.0, 3.0)
    camera_look_at: tuple[float, float, float] = (0.0, 0.0, 0.0)
    camera_fov: float = 90.0
    rotations: list[tuple[float, float, float, float]] = field(
        default_factory=lambda: list(DEFAULT_ROTATIONS)
    )

    def validate(self) -> None:
        """Check resolution, camera and rotations.

        Raises:
            ValueError: If any value is out of range.
        """
        from meshtracer.core.tracer import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH

        if not (0 < self.width <= MAX_IMAGE_WIDTH and 0 < self.height <= MAX_IMAGE_HEIGHT):
            raise ValueError(
                f"Resolution {self.width}x{self.height} outside supported range "
                f"1x1 to {MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT}"
            )
        for name in ("camera_position", "camera_look_at"):
            value = getattr(self, name)
            if len(value) != 3 or not all(math.isfinite(c) for c in value):
                raise ValueError(f"{name} must be three finite numbers, got {value}")
        if not 0.0 < self.camera_fov < 180.0:
            raise ValueError(f"camera_fov must be in (0, 180), got {self.camera_fov}")
        for rotation in self.rotations:
            if len(rotation) != 4:
                raise ValueError(f"rotation must be (angle, x, y, z), got {rotation}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RenderConfig:
        """Build a configuration from a (TOML-shaped) dict.

        Camera settings may be given either flat (camera_position, ...) or
        in a nested "camera" table (position, look_at, fov).

        Raises:
            ValueError: On unknown keys or badly typed values.
        """
        data = dict(data)
        camera = data.pop("camera", {})
        if not isinstance(camera, dict):
            raise ValueError("camera must be a table")
        for key, value in camera.items():
            data[f"camera_{key}"] = value

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key in ("mesh_path", "texture_path", "output_path"):
                kwargs[key] = str(value)
            elif key in ("width", "height"):
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValueError(f"{key} must be an integer, got {value!r}")
                kwargs[key] = value
            elif key in ("camera_position", "camera_look_at"):
                kwargs[key] = _vector3(key, value)
            elif key == "camera_fov":
                kwargs[key] = float(value)
            elif key == "rotations":
                kwargs[key] = [_rotation(r) for r in value]

        config = cls(**kwargs)
        config.validate()
        return config

    @classmethod
    def from_toml(cls, path: str | PathLike[str]) -> RenderConfig:
        """Load a configuration from a TOML file.

        Relative mesh, texture and output paths are resolved against the
        directory containing the TOML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid TOML or has invalid values.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

        for key in ("mesh_path", "texture_path", "output_path"):
            if key in data and not Path(str(data[key])).is_absolute():
                data[key] = str(path.parent / str(data[key]))

        return cls.from_dict(data)
