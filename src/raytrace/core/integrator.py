"""Per-pixel render kernel: nearest hit, local shading, or background.

For every pixel (i, j) the kernel generates the viewing ray, finds the
globally nearest object hit among all loaded objects, and either shades the
hit with the winning object's material or writes the background color.

Pixels are independent, so the outermost ndrange loop is parallelized by
Taichi with each iteration writing only its own output cell. Camera, object,
and light tables are read-only during the kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raytrace.core.integrator import render_pixels, set_background_color
    >>> # after setup_camera, load_objects and load_lights:
    >>> set_background_color((0.0, 0.0, 0.0))
    >>> pixels = render_pixels(64, 48)  # shape (64, 48, 3), [i, j] indexed
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from raytrace.camera.viewport import get_ray
from raytrace.config import T_MAX, T_MIN
from raytrace.core.ray import vec3
from raytrace.scene.intersection import get_sphere_material, intersect_scene
from raytrace.shading.shader import shade_point

# Color written where the viewing ray misses every object
_background_color = ti.Vector.field(3, dtype=ti.f64, shape=())


def set_background_color(color: Sequence[float]) -> None:
    """Set the color written for pixels whose ray hits nothing."""
    _background_color[None] = list(color)


# =============================================================================
# Per-pixel Evaluation
# =============================================================================


@ti.func
def trace_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Compute the color of one pixel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The shaded color of the nearest hit, or the background color.
    """
    ray = get_ray(pixel_i, pixel_j, width, height)

    color = _background_color[None]

    rec = intersect_scene(ray.origin, ray.direction, T_MIN, T_MAX)
    if rec.hit == 1:
        diffuse, specular, shininess = get_sphere_material(rec.sphere_index)
        view = -tm.normalize(ray.direction)
        color = shade_point(rec.point, rec.normal, diffuse, specular, shininess, view)

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(pixels: ti.types.ndarray(dtype=ti.f64, ndim=3)):
    """Render every pixel into pixels, an array of shape (width, height, 3)."""
    width = pixels.shape[0]
    height = pixels.shape[1]
    for i, j in ti.ndrange(width, height):
        color = trace_pixel(i, j, width, height)
        for c in ti.static(range(3)):
            pixels[i, j, c] = color[c]


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    out: ti.types.ndarray(dtype=ti.f64, ndim=1),
):
    """Render a specific pixel; used for testing and debugging."""
    for _ in range(1):
        color = trace_pixel(pixel_i, pixel_j, width, height)
        for c in ti.static(range(3)):
            out[c] = color[c]


# =============================================================================
# Public Rendering API
# =============================================================================


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")


def render_pixels(width: int, height: int) -> npt.NDArray[np.float64]:
    """Render the loaded scene.

    The camera, objects, lights, and background must already be on the
    device (Scene.render does this).

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Array of shape (width, height, 3) indexed [i, j], with j = 0 the
        bottom row.

    Raises:
        ValueError: If either dimension is not positive.
    """
    _check_dimensions(width, height)
    pixels = np.zeros((width, height, 3), dtype=np.float64)
    _render_kernel(pixels)
    return pixels


def render_pixel(pixel_i: int, pixel_j: int, width: int, height: int) -> tuple[float, float, float]:
    """Render a single pixel of the loaded scene.

    This is a Python-callable function for testing. For production rendering,
    use render_pixels() which processes all pixels in parallel.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        ValueError: If the dimensions are not positive or the pixel lies
            outside the image.
    """
    _check_dimensions(width, height)
    if not (0 <= pixel_i < width and 0 <= pixel_j < height):
        raise ValueError(f"Pixel ({pixel_i}, {pixel_j}) is outside a {width}x{height} image")
    out = np.zeros(3, dtype=np.float64)
    _render_single_pixel(pixel_i, pixel_j, width, height, out)
    return (float(out[0]), float(out[1]), float(out[2]))
