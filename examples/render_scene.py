#!/usr/bin/env python3
"""Render a scene description (or the built-in demo scene) to a PNG file.

Usage:
    python examples/render_scene.py [options]

Options:
    --scene PATH        Scene description file (default: built-in demo scene)
    --output PATH       Output file path (default: scene.png)
    --antialias         Average jittered samples per pixel
    --max-depth N       Override the scene's reflection depth
    --show              Show the result in a Matplotlib window
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    python examples/render_scene.py --scene examples/scenes/mirror.txt --antialias
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

from whitted.logging_config import setup_logging

logger = logging.getLogger("whitted.examples.render_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene with the Whitted ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="Scene description file (default: built-in demo scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="scene.png",
        help="Output file path (default: scene.png)",
    )
    parser.add_argument(
        "--antialias",
        action="store_true",
        help="Average jittered samples per pixel",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Reflection depth (default: taken from the scene)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the rendered image in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_scene(
    scene_path: str | None = None,
    output_path: str = "scene.png",
    antialias: bool = False,
    max_depth: int | None = None,
    show: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it as a PNG.

    Args:
        scene_path: Scene description file, or None for the demo scene.
        output_path: Output file path (PNG).
        antialias: Average jittered samples per pixel.
        max_depth: Reflection depth override.
        show: Display the result when done.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.core.renderer import render_frame
    from whitted.preview.export import save_png
    from whitted.scene.demo import create_demo_scene
    from whitted.scene.loader import load_scene_file

    if scene_path is None:
        _scene, camera, scene_depth = create_demo_scene()
    else:
        scene_file = load_scene_file(scene_path)
        scene_file.build_scene()
        camera, scene_depth = scene_file.camera, scene_file.max_depth

    depth = scene_depth if max_depth is None else max_depth

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            print(f"\rRow: {rows_done:4d} / {total_rows:4d}", end="", flush=True)

    frame = render_frame(camera, max_depth=depth, antialias=antialias, progress=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_png(frame, output_file)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")

    if show:
        from whitted.preview.display import show_preview

        show_preview(frame, title=output_file.name)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(level="DEBUG" if args.verbose else ("WARNING" if args.quiet else "INFO"))

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
    except RuntimeError:
        ti.init(arch=ti.cpu)

    try:
        render_scene(
            scene_path=args.scene,
            output_path=args.output,
            antialias=args.antialias,
            max_depth=args.max_depth,
            show=args.show,
            quiet=args.quiet,
        )
        return 0
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("Render failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
