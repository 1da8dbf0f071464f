#!/usr/bin/env python3
"""Render a textured cube.

This script demonstrates end-to-end rendering with the meshtracer package.
It writes a unit cube OBJ (six quads, each mapped to the full texture) and a
checkerboard texture, then renders the cube rotated 30 degrees about X and
30 degrees about Y, as seen from (0, 0, 3).

Usage:
    python examples/render_cube.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 800)
    --height HEIGHT     Image height in pixels (default: 600)
    --output OUTPUT     Output file path (default: cube.png)
    --workdir DIR       Where cube.obj and texture.png are written (default: .)
    --checks N          Checkerboard squares per side (default: 8)
    --quiet             Suppress progress output

Example:
    python examples/render_cube.py --width 400 --height 300 --output cube_small.png
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
from PIL import Image as PILImage

CUBE_OBJ = """\
# Unit cube centered on the origin
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
vn 0 0 1
vn 0 0 -1
vn 1 0 0
vn -1 0 0
vn 0 1 0
vn 0 -1 0
f 1/1/1 2/2/1 3/3/1 4/4/1
f 6/1/2 5/2/2 8/3/2 7/4/2
f 2/1/3 6/2/3 7/3/3 3/4/3
f 5/1/4 1/2/4 4/3/4 8/4/4
f 4/1/5 3/2/5 7/3/5 8/4/5
f 5/1/6 6/2/6 2/3/6 1/4/6
"""


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a textured cube.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=800, help="Image width (default: 800)")
    parser.add_argument("--height", type=int, default=600, help="Image height (default: 600)")
    parser.add_argument(
        "--output", type=str, default="cube.png", help="Output file path (default: cube.png)"
    )
    parser.add_argument(
        "--workdir", type=str, default=".", help="Directory for generated inputs (default: .)"
    )
    parser.add_argument(
        "--checks", type=int, default=8, help="Checkerboard squares per side (default: 8)"
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def make_checkerboard(size: int = 256, checks: int = 8) -> np.ndarray:
    """Build an orange/blue checkerboard with a red top-left square."""
    cell = max(size // checks, 1)
    ys, xs = np.mgrid[0:size, 0:size]
    parity = ((xs // cell) + (ys // cell)) % 2

    image = np.empty((size, size, 3), dtype=np.uint8)
    image[parity == 0] = (240, 150, 40)
    image[parity == 1] = (40, 90, 200)
    image[:cell, :cell] = (220, 30, 30)
    return image


def write_inputs(workdir: Path, checks: int) -> tuple[Path, Path]:
    """Write cube.obj and texture.png into workdir."""
    workdir.mkdir(parents=True, exist_ok=True)
    mesh_path = workdir / "cube.obj"
    texture_path = workdir / "texture.png"
    mesh_path.write_text(CUBE_OBJ, encoding="utf-8")
    PILImage.fromarray(make_checkerboard(checks=checks), mode="RGB").save(texture_path)
    return mesh_path, texture_path


def main() -> int:
    """Main entry point."""
    args = parse_args()

    from meshtracer.cli import init_taichi, run
    from meshtracer.config import RenderConfig

    init_taichi(quiet=args.quiet)

    try:
        mesh_path, texture_path = write_inputs(Path(args.workdir), args.checks)
        config = RenderConfig(
            mesh_path=str(mesh_path),
            texture_path=str(texture_path),
            output_path=args.output,
            width=args.width,
            height=args.height,
        )
        run(config, rows_per_batch=max(args.height // 20, 1), quiet=args.quiet)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
