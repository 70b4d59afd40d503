"""Local illumination: ambient + Lambertian diffuse with shadow feelers.

For a hit point p with normal n and a material with diffuse color kd:

    color = ambient_intensity * kd
          + sum over unoccluded point lights of
                kd * light_color * I * max(0, n . l) / dist^2

where l is the unit vector from p to the light and dist the distance to it.
A light is occluded when a shadow feeler cast from p + SHADOW_BIAS * n toward
the light hits any object before reaching it. Occlusion is decided per light.

Materials with a shininess exponent also receive a Blinn-Phong highlight

    ks * light_color * I * max(0, n . h)^shininess / dist^2,  h = |l + view|

from each unoccluded light. The sum is clamped to [0, 1] per channel; this
is the only place out-of-range light is bounded.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raytrace.shading.shader import shade
    >>> color = shade(hit_point, hit_normal, material, lights, ambient, objects)
"""

from collections.abc import Iterable, Sequence

import numpy as np
import taichi as ti
import taichi.math as tm

from raytrace.config import MAX_POINT_LIGHTS, SHADOW_BIAS, T_MIN
from raytrace.core.color import Color, clamp_color
from raytrace.core.ray import vec3
from raytrace.core.vector import Vector4, require_direction, require_point
from raytrace.geometry.base import SceneObject
from raytrace.scene.intersection import intersect_scene_any, load_objects
from raytrace.shading.lights import Light, PointLight
from raytrace.shading.material import Material

# =============================================================================
# Light Storage
# =============================================================================

light_locations = ti.Vector.field(3, dtype=ti.f64, shape=MAX_POINT_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_POINT_LIGHTS)
light_intensities = ti.field(dtype=ti.f64, shape=MAX_POINT_LIGHTS)
num_point_lights = ti.field(dtype=ti.i32, shape=())

ambient_intensity = ti.field(dtype=ti.f64, shape=())


def clear_lights() -> None:
    """Remove all point lights and zero the ambient term."""
    num_point_lights[None] = 0
    ambient_intensity[None] = 0.0


def add_point_light(
    location: Sequence[float],
    color: Sequence[float],
    intensity: float,
) -> int:
    """Add a point light to the device tables.

    Args:
        location: Light position (x, y, z).
        color: Light color (R, G, B).
        intensity: Positive light power.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of point lights is exceeded.
    """
    idx = num_point_lights[None]
    if idx >= MAX_POINT_LIGHTS:
        raise RuntimeError(f"Maximum number of point lights ({MAX_POINT_LIGHTS}) exceeded")
    light_locations[idx] = list(location)
    light_colors[idx] = list(color)
    light_intensities[idx] = intensity
    num_point_lights[None] = idx + 1
    return idx


def get_point_light_count() -> int:
    """Get the number of point lights in the device tables."""
    return int(num_point_lights[None])


def load_lights(point_lights: Iterable[PointLight], ambient_light: Light) -> int:
    """Replace the device light tables.

    Args:
        point_lights: Point lights of the scene.
        ambient_light: The scene's ambient light; only its intensity is used.

    Returns:
        The number of point lights uploaded.
    """
    clear_lights()
    ambient_intensity[None] = ambient_light.intensity
    for light in point_lights:
        add_point_light(light.location.xyz, light.color.as_tuple(), light.intensity)
    return get_point_light_count()


# =============================================================================
# Shading (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def _blinn_phong(normal: vec3, to_light: vec3, view: vec3, shininess: ti.f64) -> ti.f64:
    """Blinn-Phong lobe max(0, n . h)^shininess with h the half vector."""
    half = to_light + view
    lobe = 0.0
    if tm.dot(half, half) > 0.0:
        lobe = ti.pow(tm.max(0.0, tm.dot(normal, tm.normalize(half))), shininess)
    return lobe


@ti.func
def shade_point(
    hit_point: vec3,
    hit_normal: vec3,
    diffuse: vec3,
    specular: vec3,
    shininess: ti.f64,
    view: vec3,
) -> vec3:
    """Evaluate the illumination model at a surface point.

    Reads the loaded light tables and tests visibility against the loaded
    object tables.

    Args:
        hit_point: The point being shaded.
        hit_normal: Surface normal at the point (need not be unit length).
        diffuse: Material diffuse color.
        specular: Material specular color.
        shininess: Blinn-Phong exponent, or 0 to skip highlights.
        view: Unit direction from the point toward the viewer.

    Returns:
        The shaded color, clamped to [0, 1] per channel.
    """
    unit_normal = tm.normalize(hit_normal)

    accumulated = ambient_intensity[None] * diffuse

    shadow_origin = hit_point + SHADOW_BIAS * unit_normal

    for k in range(num_point_lights[None]):
        light_vector = light_locations[k] - hit_point
        distance = tm.length(light_vector)
        if distance > 0.0:
            unit_light = light_vector / distance

            # Unit feeler direction, so t is a distance along it; the bound is
            # measured from where the feeler actually starts
            feeler_vector = light_locations[k] - shadow_origin
            feeler_distance = tm.length(feeler_vector)
            occluded = 0
            if feeler_distance > 0.0:
                occluded = intersect_scene_any(
                    shadow_origin, feeler_vector / feeler_distance, T_MIN, feeler_distance
                )

            if occluded == 0:
                radiance = light_colors[k] * light_intensities[k] / (distance * distance)
                cos_theta = tm.max(0.0, tm.dot(unit_normal, unit_light))
                accumulated += diffuse * radiance * cos_theta

                if shininess > 0.0:
                    lobe = _blinn_phong(unit_normal, unit_light, view, shininess)
                    accumulated += specular * radiance * lobe

    return tm.clamp(accumulated, 0.0, 1.0)


@ti.kernel
def _shade_kernel(
    hit_point: vec3,
    hit_normal: vec3,
    diffuse: vec3,
    specular: vec3,
    shininess: ti.f64,
    view: vec3,
    out: ti.types.ndarray(dtype=ti.f64, ndim=1),
):
    # Single iteration so the light and object loops stay serial
    for _ in range(1):
        color = shade_point(hit_point, hit_normal, diffuse, specular, shininess, view)
        for c in ti.static(range(3)):
            out[c] = color[c]


# =============================================================================
# Python-side Shading
# =============================================================================


def shade(
    hit_point: Vector4,
    hit_normal: Vector4,
    material: Material,
    lights: Iterable[PointLight],
    ambient_light: Light,
    scene_objects: Iterable[SceneObject],
    view_direction: Vector4 | None = None,
) -> Color:
    """Shade a single surface point.

    Loads the given lights and objects into the device tables and evaluates
    shade_point, the function the render kernel uses.

    Args:
        hit_point: Homogeneous point being shaded.
        hit_normal: Homogeneous surface normal (need not be unit length).
        material: Material of the surface.
        lights: Point lights illuminating the scene.
        ambient_light: The scene's ambient light.
        scene_objects: Objects that may cast shadows.
        view_direction: Direction from the point toward the viewer, used for
            highlights. Defaults to the surface normal.

    Returns:
        The shaded, clamped color.

    Raises:
        CoordinateTagError: If point/normal/view carry the wrong tag.
        InvalidGeometryError: If the normal or view direction is zero.
    """
    require_point(hit_point, "hit point")
    require_direction(hit_normal, "hit normal")
    unit_normal = hit_normal.normalized()
    view = unit_normal if view_direction is None else view_direction.normalized()

    load_objects(scene_objects)
    load_lights(lights, ambient_light)

    out = np.zeros(3, dtype=np.float64)
    _shade_kernel(
        vec3(*hit_point.xyz),
        vec3(*unit_normal.xyz),
        vec3(*material.diffuse_color.as_tuple()),
        vec3(*material.specular_color.as_tuple()),
        float(material.shininess or 0.0),
        vec3(*view.xyz),
        out,
    )
    return clamp_color(out)
