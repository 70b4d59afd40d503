"""Viewport camera for perspective and orthographic ray generation.

The camera is described by a location, gaze and up directions, a viewport
rectangle [l, r] x [b, t] and the distance d from the eye to the viewport.
It builds an orthonormal basis (u, v, w) from the view parameters:
- w: opposite the gaze direction
- u: points right in the image plane
- v: points up in the image plane

Pixel (i, j) maps to viewport coordinates at the pixel center:
    su = l + (r - l) * (i + 0.5) / width
    sv = b + (t - b) * (j + 0.5) / height

so j = 0 is the bottom row. Perspective rays all start at the eye; orthographic
rays start on the viewport plane through the eye and travel along -w. This
module is the only place the projection mode is branched on.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raytrace.camera.viewport import Camera
    >>> from raytrace.core.vector import point, direction
    >>> camera = Camera(
    ...     location=point(0, 0, 5),
    ...     gaze=direction(0, 0, -1),
    ...     up=direction(0, 1, 0),
    ...     l=-1.0, r=1.0, b=-1.0, t=1.0, d=1.0,
    ... )
    >>> ray = camera.generate_ray(32, 32, 64, 64)
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from raytrace.core.errors import InvalidGeometryError
from raytrace.core.ray import Ray, ViewingRay, make_ray, vec3
from raytrace.core.vector import Vector4, require_direction, require_point

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Configuration for a viewport camera.

    Attributes:
        location: Eye position (homogeneous point).
        gaze: Viewing direction (homogeneous direction, any length).
        up: Approximate up direction (homogeneous direction, not parallel
            to gaze).
        l: Left viewport bound, negative.
        t: Top viewport bound, positive.
        r: Right viewport bound, positive.
        b: Bottom viewport bound, negative.
        d: Distance from the eye to the viewport, positive.
        perspective: True for perspective projection, False for orthographic.

    Raises:
        CoordinateTagError: If location/gaze/up carry the wrong tag.
        InvalidGeometryError: If the viewport bounds or distance are out of
            range, or gaze and up do not span a plane.
    """

    location: Vector4
    gaze: Vector4
    up: Vector4
    l: float  # noqa: E741
    t: float
    r: float
    b: float
    d: float
    perspective: bool = True

    def __post_init__(self) -> None:
        require_point(self.location, "camera location")
        require_direction(self.gaze, "camera gaze")
        require_direction(self.up, "camera up")
        if not (self.l < 0.0 < self.r):
            raise InvalidGeometryError(
                f"Viewport needs l < 0 < r, got l={self.l}, r={self.r}"
            )
        if not (self.b < 0.0 < self.t):
            raise InvalidGeometryError(
                f"Viewport needs b < 0 < t, got b={self.b}, t={self.t}"
            )
        if not (math.isfinite(self.d) and self.d > 0.0):
            raise InvalidGeometryError(f"Viewport distance must be positive, got {self.d}")
        if self.gaze.magnitude() == 0.0:
            raise InvalidGeometryError("Camera gaze must be non-zero")
        if self.up.cross(self.gaze).magnitude() == 0.0:
            raise InvalidGeometryError("Camera up must not be parallel to gaze")

    def basis(self) -> tuple[npt.NDArray[np.float64], ...]:
        """Compute the camera's orthonormal basis.

        Returns:
            A tuple (u, v, w) of unit float64 arrays where w = -gaze, u is
            the right direction, and v the up direction.
        """
        w = -self.gaze.as_array()
        w = w / np.linalg.norm(w)

        u = np.cross(self.up.as_array(), w)
        u = u / np.linalg.norm(u)

        v = np.cross(w, u)
        return u, v, w

    def generate_ray(self, pixel_i: int, pixel_j: int, width: int, height: int) -> ViewingRay:
        """Generate the viewing ray through the center of pixel (i, j).

        Uploads this camera to the device and evaluates get_ray, the same
        function the render kernel uses. Requires an initialized Taichi
        runtime.

        Args:
            pixel_i: Column, 0 = left.
            pixel_j: Row, 0 = bottom.
            width: Image width in pixels.
            height: Image height in pixels.

        Returns:
            The viewing ray; its direction is unit length.

        Raises:
            ValueError: If the resolution is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        setup_camera(self)
        out = np.zeros(6, dtype=np.float64)
        _generate_ray_kernel(pixel_i, pixel_j, width, height, out)
        return ViewingRay.from_arrays(out[:3], out[3:])


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

# Camera origin (eye position)
_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f64, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f64, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f64, shape=())  # Backward (opposite gaze)

# Viewport bounds (l, r, b, t) and distance
_viewport_bounds = ti.Vector.field(4, dtype=ti.f64, shape=())
_viewport_distance = ti.field(dtype=ti.f64, shape=())

# 1 for perspective, 0 for orthographic
_perspective = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per render)
# =============================================================================


def setup_camera(camera: Camera) -> None:
    """Upload camera state to the device.

    Computes the orthonormal basis with NumPy and stores it, with the
    viewport parameters, in Taichi fields read by get_ray.

    Args:
        camera: Validated camera configuration.

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    u, v, w = camera.basis()

    _camera_origin[None] = list(camera.location.xyz)
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()

    _viewport_bounds[None] = [camera.l, camera.r, camera.b, camera.t]
    _viewport_distance[None] = camera.d
    _perspective[None] = 1 if camera.perspective else 0


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the viewing ray through the center of a pixel.

    This function is designed to be called from within Taichi kernels.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray with unit direction. Perspective rays start at the eye;
        orthographic rays start on the viewport plane through the eye.
    """
    bounds = _viewport_bounds[None]
    l = bounds[0]  # noqa: E741
    r = bounds[1]
    b = bounds[2]
    t = bounds[3]

    su = l + (r - l) * (ti.cast(pixel_i, ti.f64) + 0.5) / ti.cast(width, ti.f64)
    sv = b + (t - b) * (ti.cast(pixel_j, ti.f64) + 0.5) / ti.cast(height, ti.f64)

    u = _camera_u[None]
    v = _camera_v[None]
    w = _camera_w[None]

    origin = _camera_origin[None]
    direction = -w
    if _perspective[None] == 1:
        direction = tm.normalize(-_viewport_distance[None] * w + su * u + sv * v)
    else:
        origin = origin + su * u + sv * v

    return make_ray(origin, direction)


@ti.kernel
def _generate_ray_kernel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    out: ti.types.ndarray(dtype=ti.f64, ndim=1),
):
    """Evaluate get_ray once; out = [ox, oy, oz, dx, dy, dz]."""
    ray = get_ray(pixel_i, pixel_j, width, height)
    for k in ti.static(range(3)):
        out[k] = ray.origin[k]
        out[3 + k] = ray.direction[k]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, ...] | float | bool]:
    """Get current device camera state for debugging.

    Returns:
        Dictionary with origin, u, v, w, bounds (l, r, b, t), distance,
        and perspective.
    """
    origin_vec = _camera_origin[None]
    u_vec = _camera_u[None]
    v_vec = _camera_v[None]
    w_vec = _camera_w[None]
    bounds = _viewport_bounds[None]

    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "u": (float(u_vec[0]), float(u_vec[1]), float(u_vec[2])),
        "v": (float(v_vec[0]), float(v_vec[1]), float(v_vec[2])),
        "w": (float(w_vec[0]), float(w_vec[1]), float(w_vec[2])),
        "bounds": tuple(float(bounds[k]) for k in range(4)),
        "distance": float(_viewport_distance[None]),
        "perspective": bool(_perspective[None]),
    }
