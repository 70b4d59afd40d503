"""Image export utilities for rendered images.

This module saves Image objects to disk. Writing happens after rendering
and never modifies the image; a failed write raises RasterWriteError and
leaves the in-memory image intact.

Supported formats:
    - PPM, ASCII "P3" variant
    - PNG (8-bit via Pillow)

Each channel is discretized as round(clamp(x, 0, 1) * 255), halves rounding
up, and rows are written top (y = height - 1) to bottom (y = 0).

Example:
    >>> from raytrace.image.export import save_image
    >>> image = scene.render(320, 240)
    >>> save_image(image, "spheres.ppm")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from raytrace.core.errors import RasterWriteError
from raytrace.image.framebuffer import Image

logger = logging.getLogger(__name__)


def discretize(image: Image) -> npt.NDArray[np.uint8]:
    """Convert an image to 8-bit channels in top-down row order.

    Args:
        image: The image to convert.

    Returns:
        Array of shape (height, width, 3) with dtype uint8, row 0 being the
        top of the image.
    """
    pixels = np.clip(image.to_numpy(), 0.0, 1.0)
    levels = np.floor(pixels * 255.0 + 0.5)
    levels = np.clip(levels, 0, 255).astype(np.uint8)
    return np.ascontiguousarray(np.flipud(levels))


def format_ppm(image: Image) -> str:
    """Render an image as the text of an ASCII PPM (P3) file."""
    levels = discretize(image)
    lines = ["P3", f"{image.width} {image.height}", "255"]
    for row in levels:
        lines.append(" ".join(f"{r} {g} {b}" for r, g, b in row))
    return "\n".join(lines) + "\n"


def write_ppm(image: Image, path: str | Path) -> None:
    """Write an image as an ASCII PPM (P3) file.

    Args:
        image: The image to save.
        path: Output file path.

    Raises:
        RasterWriteError: If the file cannot be opened or written.
    """
    text = format_ppm(image)
    try:
        with open(path, "w", encoding="ascii") as f:
            f.write(text)
    except OSError as e:
        raise RasterWriteError(f"Could not write PPM to {path}: {e}") from e
    logger.info("Wrote %dx%d PPM to %s", image.width, image.height, path)


def save_png(image: Image, path: str | Path) -> None:
    """Save an image as an 8-bit RGB PNG file.

    Raises:
        RasterWriteError: If the file cannot be written.
    """
    pil_image = PILImage.fromarray(discretize(image))
    try:
        pil_image.save(path, format="PNG")
    except OSError as e:
        raise RasterWriteError(f"Could not write PNG to {path}: {e}") from e
    logger.info("Wrote %dx%d PNG to %s", image.width, image.height, path)


def save_image(image: Image, path: str | Path) -> None:
    """Save an image, choosing the format from the file suffix.

    ".ppm" writes ASCII PPM and ".png" writes PNG.

    Raises:
        ValueError: If the suffix is not supported.
        RasterWriteError: If the file cannot be written.
    """
    suffix = Path(path).suffix.lower()
    if suffix == ".ppm":
        write_ppm(image, path)
    elif suffix == ".png":
        save_png(image, path)
    else:
        raise ValueError(f"Unsupported image format {suffix!r}; use .ppm or .png")
