#!/usr/bin/env python3
"""Render the sample sphere scene.

This script renders the demo scene (three spheres resting on a ground sphere,
lit by two point lights) and writes it as a PPM or PNG image depending on the
output file suffix.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 320)
    --height HEIGHT     Image height in pixels (default: 240)
    --output OUTPUT     Output file path, .ppm or .png (default: spheres.ppm)
    --orthographic      Use orthographic instead of perspective projection
    --arch ARCH         Taichi backend: cpu, gpu, cuda, vulkan, metal, opengl
    --verbose           Enable debug logging
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres --width 640 --height 480 --output spheres.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the sample sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=320,
        help="Image width in pixels (default: 320)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=240,
        help="Image height in pixels (default: 240)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.ppm",
        help="Output file path, .ppm or .png (default: spheres.ppm)",
    )
    parser.add_argument(
        "--orthographic",
        action="store_true",
        help="Use orthographic instead of perspective projection",
    )
    parser.add_argument(
        "--arch",
        type=str,
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_spheres(
    width: int = 320,
    height: int = 240,
    output_path: str = "spheres.ppm",
    perspective: bool = True,
    quiet: bool = False,
) -> Path:
    """Render the demo scene and save it to a file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        output_path: Output file path; the suffix selects PPM or PNG.
        perspective: Perspective projection if True, orthographic otherwise.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from raytrace.image.export import save_image
    from raytrace.scene.demo import create_demo_scene

    projection = "perspective" if perspective else "orthographic"
    if not quiet:
        print(f"Creating demo scene ({width}x{height}, {projection})...")

    scene = create_demo_scene(perspective=perspective)

    start_time = time.time()
    image = scene.render(width, height)
    render_time = time.time() - start_time

    output_file = Path(output_path)
    save_image(image, output_file)

    if not quiet:
        print(f"Rendered in {render_time:.2f}s")
        print(f"Saved to: {output_file.absolute()}")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    from raytrace.config import init_taichi
    from raytrace.core.errors import RaytraceError

    try:
        init_taichi(args.arch)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not args.quiet:
        print(f"Using {args.arch} backend")

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            output_path=args.output,
            perspective=not args.orthographic,
            quiet=args.quiet,
        )
        return 0
    except (RaytraceError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
