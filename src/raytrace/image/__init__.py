"""Image module: the framebuffer and its file writers.

Components:
    framebuffer: Image, a width x height grid of colors (y = 0 at the bottom)
    export: PPM (P3) and PNG writers with 8-bit discretization
"""

from .export import discretize, format_ppm, save_image, save_png, write_ppm
from .framebuffer import Image

__all__ = [
    "Image",
    "discretize",
    "format_ppm",
    "write_ppm",
    "save_png",
    "save_image",
]
