#!/usr/bin/env python3
"""Render a scene description file to a PNG image.

Usage:
    python -m examples.render_scene [scene] [output] [options]

Arguments:
    scene               Scene description file (default: scene1.txt)
    output              Output image path (default: render.png)

Options:
    --width WIDTH       Image width in pixels (default: 1000)
    --height HEIGHT     Image height in pixels (default: 1000)
    --max-depth DEPTH   Maximum recursion depth (default: 5)
    --batch-size ROWS   Rows per progress update (default: 50)
    --preview           Show the result in a Matplotlib window
    --cpu               Force the CPU backend
    --quiet             Suppress progress output

If the scene file does not exist, ../<scene> is tried before giving up.
The exit status is 1 when the scene cannot be loaded or the image cannot be
written.

Example:
    python -m examples.render_scene examples/scene1.txt out.png --width 400 --height 400
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene description file with Whitted ray tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "scene",
        nargs="?",
        default="scene1.txt",
        help="Scene description file (default: scene1.txt)",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default="render.png",
        help="Output image path (default: render.png)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1000,
        help="Image width in pixels (default: 1000)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=1000,
        help="Image height in pixels (default: 1000)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=5,
        help="Maximum recursion depth (default: 5)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=50,
        help="Rows per progress update (default: 50)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def resolve_scene_path(scene: str) -> Path:
    """Return the scene path, falling back to the parent directory.

    The original path is returned unchanged when neither exists, so the
    loader reports the name the user gave.
    """
    path = Path(scene)
    if not path.exists():
        candidate = Path("..") / scene
        if candidate.exists():
            return candidate
    return path


def render_scene(
    scene_path: Path,
    output_path: str,
    width: int = 1000,
    height: int = 1000,
    max_depth: int = 5,
    batch_size: int = 50,
    preview: bool = False,
    quiet: bool = False,
) -> bool:
    """Load, render and save a scene.

    Returns:
        True on success, False if loading or writing failed.
    """
    # Lazy imports to allow Taichi initialization first
    from src.whitted.core.integrator import TracerConfig
    from src.whitted.core.renderer import WhittedRenderer
    from src.whitted.preview.export import save_png
    from src.whitted.scene.loader import load_scene_file
    from src.whitted.scene.manager import SceneManager

    desc = load_scene_file(scene_path)
    if desc is None:
        print(f"Failed to load scene: {scene_path}", file=sys.stderr)
        return False

    scene = SceneManager()
    scene.load_description(desc)

    if not quiet:
        print(
            f"Loaded {scene_path}: {scene.get_primitive_count()} primitives, "
            f"{scene.get_light_count()} lights"
        )

    renderer = WhittedRenderer(width, height, TracerConfig(max_depth=max_depth))

    if not quiet:
        print(f"Rendering {width}x{height} (max depth {max_depth})...")

    start_time = time.time()

    for done, total in renderer.render_rows(batch_size):
        if not quiet:
            elapsed = time.time() - start_time
            print(
                f"\r  Progress: {done}/{total} rows ({done / total * 100:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    if not quiet:
        print()  # Newline after progress

    if not save_png(renderer, output_path):
        return False

    if not quiet:
        print(f"Rendered {scene_path} -> {output_path}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    if preview:
        from src.whitted.preview.display import show_preview

        show_preview(renderer, title=f"{scene_path}")

    return True


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not args.quiet:
                print("Using CPU backend")

    try:
        ok = render_scene(
            resolve_scene_path(args.scene),
            args.output,
            width=args.width,
            height=args.height,
            max_depth=args.max_depth,
            batch_size=args.batch_size,
            preview=args.preview,
            quiet=args.quiet,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
