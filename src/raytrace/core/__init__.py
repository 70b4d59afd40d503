"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vector: Homogeneous point/direction value type (host side)
    color: Validated RGB colors, clamping, and web color parsing
    ray: Device Ray struct and the host ViewingRay
    errors: Exception hierarchy for invalid scene data and I/O failures
    integrator: Per-pixel render kernel (nearest hit, shading, background)

The render kernel runs one primary ray per pixel; all compute-intensive
operations use Taichi kernels, parallelized over pixels.
"""

from .color import BLACK, WHITE, Color, as_color, clamp_color, is_color_intensity, web_color
from .errors import (
    CoordinateTagError,
    InvalidColorError,
    InvalidGeometryError,
    RasterWriteError,
    RaytraceError,
)
from .ray import (
    Ray,
    ViewingRay,
    make_ray,
    vec3,
)
from .vector import Vector4, direction, point, require_direction, require_point

# Note: integrator is NOT imported here because it declares Taichi fields and
# depends on the camera, scene, and shading packages.
# Import directly from raytrace.core.integrator when needed.

__all__ = [
    # Vectors
    "Vector4",
    "point",
    "direction",
    "require_point",
    "require_direction",
    # Colors
    "Color",
    "BLACK",
    "WHITE",
    "as_color",
    "clamp_color",
    "is_color_intensity",
    "web_color",
    # Errors
    "RaytraceError",
    "InvalidColorError",
    "InvalidGeometryError",
    "CoordinateTagError",
    "RasterWriteError",
    # Rays
    "Ray",
    "ViewingRay",
    "make_ray",
    "vec3",
]
