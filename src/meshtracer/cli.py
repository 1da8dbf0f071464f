"""Command-line entry point: render a textured OBJ mesh to a PNG.

Usage:
    meshtracer [options]
    python -m meshtracer [options]

Options:
    --mesh PATH         OBJ mesh to render (default: cube.obj)
    --texture PATH      Texture image (default: texture.png)
    --output PATH       Output PNG path (default: output.png)
    --width WIDTH       Image width in pixels (default: 800)
    --height HEIGHT     Image height in pixels (default: 600)
    --rotate A X Y Z    Rotate the mesh by A degrees about axis (X, Y, Z);
                        repeatable, replaces the default 30/X then 30/Y
    --no-rotate         Render the mesh untransformed
    --config FILE       Read settings from a TOML file (flags override it)
    --rows-per-batch N  Rows rendered between progress updates (default: 50)
    --preview           Show the result in a Matplotlib window
    --cpu               Force the Taichi CPU backend
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    meshtracer --mesh cube.obj --texture crate.png --width 400 --height 300
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import time
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import taichi as ti

from meshtracer.config import RenderConfig

if TYPE_CHECKING:
    from meshtracer.core.frame import FrameRenderer


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="meshtracer",
        description="Render a textured OBJ mesh with one primary ray per pixel.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--mesh", type=str, default=None, help="OBJ mesh (default: cube.obj)")
    parser.add_argument(
        "--texture", type=str, default=None, help="Texture image (default: texture.png)"
    )
    parser.add_argument(
        "--output", type=str, default=None, help="Output PNG path (default: output.png)"
    )
    parser.add_argument("--width", type=int, default=None, help="Image width (default: 800)")
    parser.add_argument("--height", type=int, default=None, help="Image height (default: 600)")
    parser.add_argument(
        "--rotate",
        type=float,
        nargs=4,
        action="append",
        metavar=("ANGLE", "X", "Y", "Z"),
        default=None,
        help="Rotate the mesh by ANGLE degrees about axis (X, Y, Z); repeatable",
    )
    parser.add_argument(
        "--no-rotate",
        action="store_true",
        help="Render the mesh without the default rotations",
    )
    parser.add_argument("--config", type=str, default=None, help="TOML configuration file")
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=50,
        help="Rows rendered between progress updates (default: 50)",
    )
    parser.add_argument("--preview", action="store_true", help="Show the result when done")
    parser.add_argument("--cpu", action="store_true", help="Force the Taichi CPU backend")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RenderConfig:
    """Combine the optional TOML file with command-line overrides."""
    config = RenderConfig.from_toml(args.config) if args.config else RenderConfig()

    overrides = {
        "mesh_path": args.mesh,
        "texture_path": args.texture,
        "output_path": args.output,
        "width": args.width,
        "height": args.height,
    }
    if args.no_rotate:
        overrides["rotations"] = []
    elif args.rotate:
        overrides["rotations"] = [tuple(r) for r in args.rotate]

    config = dataclasses.replace(
        config, **{key: value for key, value in overrides.items() if value is not None}
    )
    config.validate()
    return config


def init_taichi(force_cpu: bool = False, quiet: bool = False) -> None:
    """Initialize Taichi, preferring the GPU backend."""
    if force_cpu:
        ti.init(arch=ti.cpu)
        if not quiet:
            print("Using CPU backend")
        return

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not quiet:
            print("Using CPU backend")


def run(config: RenderConfig, rows_per_batch: int = 50, quiet: bool = False) -> FrameRenderer:
    """Render a configured frame, printing progress unless quiet.

    Returns:
        The FrameRenderer holding the finished image.
    """
    # Lazy imports so the Taichi fields are created after ti.init()
    from meshtracer.core.frame import render_scene

    if not quiet:
        print(
            f"Rendering {config.mesh_path} with {config.texture_path} "
            f"({config.width}x{config.height})..."
        )

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            progress_pct = (done / total) * 100 if total > 0 else 0
            print(f"\r  Progress: {done}/{total} rows ({progress_pct:.1f}%)", end="", flush=True)

    renderer = render_scene(config, rows_per_batch=rows_per_batch, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress
        print(f"Saved to: {Path(config.output_path).absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return renderer


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s: %(message)s"
        )

    init_taichi(force_cpu=args.cpu, quiet=args.quiet)

    try:
        config = build_config(args)
        renderer = run(config, rows_per_batch=args.rows_per_batch, quiet=args.quiet)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.preview:
        from meshtracer.preview.display import show_preview

        show_preview(renderer, title=config.output_path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
