"""Ray data structures.

This module provides the device-side Ray dataclass used inside Taichi
kernels, plus ViewingRay, the validated host-side value returned
to Python callers.

Device vectors are double precision (see raytrace.config.init_taichi).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> origin = vec3(0.0, 0.0, 0.0)
    >>> direction = vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
"""

from dataclasses import dataclass

import taichi as ti

from raytrace.core.vector import Vector4, direction, point, require_direction, require_point

# Type alias for double precision 3D vectors
vec3 = ti.types.vector(3, ti.f64)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Need not be
            normalized; intersection routines carry its length into their
            coefficients.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Host-side Ray
# =============================================================================


@dataclass(frozen=True)
class ViewingRay:
    """A ray handed back to Python callers.

    Attributes:
        origin: Homogeneous point where the ray starts.
        direction: Homogeneous direction of travel (not necessarily unit).

    Raises:
        CoordinateTagError: If origin is not a point or direction is not a
            direction.
    """

    origin: Vector4
    direction: Vector4

    def __post_init__(self) -> None:
        require_point(self.origin, "ray origin")
        require_direction(self.direction, "ray direction")

    def at(self, t: float) -> Vector4:
        """Return the point origin + t * direction."""
        return self.origin + t * self.direction

    @classmethod
    def from_arrays(cls, origin, direction_xyz) -> "ViewingRay":
        """Build a ray from two 3-element sequences (e.g. kernel output)."""
        return cls(
            origin=point(origin[0], origin[1], origin[2]),
            direction=direction(direction_xyz[0], direction_xyz[1], direction_xyz[2]),
        )
