"""Sphere primitive with ray-sphere intersection.

This module provides the device-side Sphere and HitRecord dataclasses, the
hit_sphere Taichi function used by the render kernel, and SceneSphere, the
validated host-side object users put into a scene.

Substituting p(t) = o + t*d into |p - c|^2 = r^2 gives a*t^2 + b*t + c = 0
with:
    a = d . d
    b = 2 * d . (o - c)
    c = (o - c) . (o - c) - r^2

The direction is not assumed to be unit length. The reported hit is the
smaller root that lies in [t_min, t_max); a tangent ray (zero discriminant)
is a valid single-point hit.

Example:
    >>> from raytrace.core.vector import point, direction
    >>> sphere = SceneSphere(point(0, 0, 0), 1.0, Material.diffuse((1, 0, 0)))
    >>> hit = sphere.intersect(point(0, 0, 5), direction(0, 0, -1))
    >>> hit.t
    4.0
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from raytrace.config import T_MAX, T_MIN
from raytrace.core.errors import InvalidGeometryError
from raytrace.core.ray import vec3
from raytrace.core.vector import Vector4, direction, point, require_direction, require_point
from raytrace.geometry.base import Intersection, SceneObject
from raytrace.shading.material import Material


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f64


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: 1 if the ray intersected the sphere, 0 on a miss.
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the sphere.
            Only valid if hit == 1.
        normal: The outward unit normal at the intersection point.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test intersection against.
        t_min: Smallest accepted root (excludes self-intersection).
        t_max: Roots at or beyond this value are rejected (shadow feelers).

    Returns:
        A HitRecord for the smallest root in [t_min, t_max). Check the hit
        field to determine if an intersection occurred.
    """
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = b * b - 4.0 * a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if discriminant >= 0.0 and a > 0.0:
        sqrt_d = ti.sqrt(discriminant)

        # a > 0, so t0 <= t1
        t0 = (-b - sqrt_d) / (2.0 * a)
        t1 = (-b + sqrt_d) / (2.0 * a)

        t = t0
        if t < t_min:
            t = t1

        if t >= t_min and t < t_max:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal = tm.normalize(hit_point - sphere.center)

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=hit_normal)


@ti.func
def make_sphere(center: vec3, radius: ti.f64) -> Sphere:
    """Create a sphere inside a Taichi kernel."""
    return Sphere(center=center, radius=radius)


@ti.kernel
def _intersect_sphere_kernel(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    radius: ti.f64,
    out: ti.types.ndarray(dtype=ti.f64, ndim=1),
):
    """Run hit_sphere once and unpack the record into out.

    Layout of out: [hit, t, px, py, pz, nx, ny, nz].
    """
    rec = hit_sphere(ray_origin, ray_direction, make_sphere(center, radius), T_MIN, T_MAX)
    out[0] = ti.cast(rec.hit, ti.f64)
    out[1] = rec.t
    for k in ti.static(range(3)):
        out[2 + k] = rec.point[k]
        out[5 + k] = rec.normal[k]


def unpack_hit(out: np.ndarray) -> Intersection | None:
    """Convert a [hit, t, point, normal] kernel output row to an Intersection."""
    if out[0] == 0.0:
        return None
    return Intersection(
        point=point(out[2], out[3], out[4]),
        normal=direction(out[5], out[6], out[7]),
        t=float(out[1]),
    )


@dataclass(frozen=True)
class SceneSphere(SceneObject):
    """A sphere placed in a scene.

    Attributes:
        center: Homogeneous point at the sphere's center.
        radius: Positive radius.
        material: Surface material used when shading hits on this sphere.

    Raises:
        CoordinateTagError: If center is not a point.
        InvalidGeometryError: If radius is not positive.
    """

    center: Vector4
    radius: float
    material: Material

    def __post_init__(self) -> None:
        require_point(self.center, "sphere center")
        if not (math.isfinite(self.radius) and self.radius > 0.0):
            raise InvalidGeometryError(f"Sphere radius must be positive, got {self.radius}")
        if not isinstance(self.material, Material):
            raise TypeError(f"material must be a Material, got {type(self.material).__name__}")

    def intersect(self, origin: Vector4, direction: Vector4) -> Intersection | None:
        """Intersect a ray with this sphere.

        Requires an initialized Taichi runtime.

        Args:
            origin: Homogeneous ray origin point.
            direction: Homogeneous ray direction (need not be unit length).

        Returns:
            The nearest hit with t >= T_MIN, or None.

        Raises:
            CoordinateTagError: If origin/direction carry the wrong tag.
        """
        require_point(origin, "ray origin")
        require_direction(direction, "ray direction")
        if direction.dot(direction) == 0.0:
            return None

        out = np.zeros(8, dtype=np.float64)
        _intersect_sphere_kernel(
            vec3(*origin.xyz),
            vec3(*direction.xyz),
            vec3(*self.center.xyz),
            float(self.radius),
            out,
        )
        return unpack_hit(out)

    def upload(self, object_id: int) -> int:
        # Deferred: the device tables are Taichi fields, which must be
        # created after ti.init.
        from raytrace.scene.intersection import add_sphere

        return add_sphere(
            center=self.center.xyz,
            radius=self.radius,
            diffuse=self.material.diffuse_color.as_tuple(),
            specular=self.material.specular_color.as_tuple(),
            shininess=self.material.shininess or 0.0,
            object_id=object_id,
        )
