#!/usr/bin/env python3
"""Render the animated demo scene to PNG frames.

Three spheres orbit above a reflective floor. Every frame rotates the scene
about the vertical axis through (0, 0, -1) and writes one PNG.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 640)
    --height HEIGHT     Image height in pixels (default: 480)
    --fov FOV           Vertical field of view in degrees (default: 90)
    --frames FRAMES     Number of frames to render (default: 1)
    --dt DT             Rotation per frame in radians (default: 0.05)
    --backend BACKEND   taichi or python (default: taichi)
    --output OUTPUT     Output path, may contain {frame} (default: frame_{frame:04d}.png)
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --width 320 --height 240 --frames 60
"""

from __future__ import annotations

import argparse
import math
import sys
import time
from pathlib import Path

from whitted import init_backend


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the animated demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=480,
        help="Image height in pixels (default: 480)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=90.0,
        help="Vertical field of view in degrees (default: 90)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=1,
        help="Number of frames to render (default: 1)",
    )
    parser.add_argument(
        "--dt",
        type=float,
        default=0.05,
        help="Rotation per frame in radians (default: 0.05)",
    )
    parser.add_argument(
        "--backend",
        choices=("taichi", "python"),
        default="taichi",
        help="Render backend (default: taichi)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="frame_{frame:04d}.png",
        help="Output path, may contain {frame} (default: frame_{frame:04d}.png)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_scene(
    width: int = 640,
    height: int = 480,
    fov_degrees: float = 90.0,
    frames: int = 1,
    dt: float = 0.05,
    backend: str = "taichi",
    output_path: str = "frame_{frame:04d}.png",
    quiet: bool = False,
) -> list[Path]:
    """Render the demo animation and save each frame.

    Returns:
        Paths of the written frames.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.preview.surface import ImageFileSurface
    from whitted.scene.animation import AnimationLoop
    from whitted.scene.demo import create_demo_scene, orbit_transform

    if not quiet:
        print(f"Creating demo scene ({width}x{height}, fov {fov_degrees:.1f} deg)...")

    scene = create_demo_scene(width, height, fov=math.radians(fov_degrees))
    surface = ImageFileSurface(output_path)
    loop = AnimationLoop(scene, surface, orbit_transform, backend)

    start_time = time.time()

    def progress_callback(current: int, total: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            fps = current / elapsed if elapsed > 0 else 0
            print(f"\r  Frame {current}/{total} - {fps:.1f} fps", end="", flush=True)

    if not quiet:
        print(f"Rendering {frames} frames with the {backend} backend...")
    loop.run(frames, dt, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress
        for path in surface.written[-1:]:
            print(f"Saved to: {path.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return surface.written


def main() -> int:
    """Main entry point."""
    args = parse_args()

    if args.backend == "taichi":
        # Use GPU if available, fall back to CPU
        init_backend()

    try:
        render_scene(
            width=args.width,
            height=args.height,
            fov_degrees=args.fov,
            frames=args.frames,
            dt=args.dt,
            backend=args.backend,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
