"""Scene-level object tables and nearest-hit intersection testing.

The scene's objects are stored in Taichi fields (Structure of Arrays layout)
so the render kernel can test every object for every pixel. Each sphere slot
also carries its material and the index of the object in the host scene list.

intersect_scene performs the global minimum-t reduction: every object is
tested and the closest hit wins, independent of insertion order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raytrace.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0, 0, -1), 0.5, (0.8, 0.2, 0.2), (0, 0, 0), 0.0, object_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

from collections.abc import Iterable, Sequence

import numpy as np
import taichi as ti
import taichi.math as tm

from raytrace.config import MAX_SPHERES, T_MAX, T_MIN
from raytrace.core.ray import vec3
from raytrace.geometry.base import Intersection, SceneObject
from raytrace.geometry.sphere import Sphere, hit_sphere, unpack_hit


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        hit: 1 if the ray intersected any object, 0 on a miss.
        t: The parameter value of the nearest hit. Only valid if hit == 1.
        point: The nearest hit point. Only valid if hit == 1.
        normal: The outward unit normal at the hit. Only valid if hit == 1.
        sphere_index: Slot of the winning sphere in the device tables.
            -1 on a miss.
        object_id: Index of the winning object in the host scene list.
            -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    sphere_index: ti.i32
    object_id: ti.i32


# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_diffuse = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_specular = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
# 0 disables the specular highlight
sphere_shininess = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_object_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all objects from the device tables.

    Resets the object count to zero. The actual field data is not cleared
    but will be overwritten when new objects are added.
    """
    num_spheres[None] = 0


def add_sphere(
    center: Sequence[float],
    radius: float,
    diffuse: Sequence[float],
    specular: Sequence[float],
    shininess: float,
    object_id: int,
) -> int:
    """Add a sphere to the device tables.

    Values are stored as given; validation happens when the host-side
    SceneSphere is constructed.

    Args:
        center: The center point of the sphere (x, y, z).
        radius: The radius of the sphere.
        diffuse: Diffuse color (R, G, B).
        specular: Specular color (R, G, B).
        shininess: Blinn-Phong exponent, or 0 for no highlight.
        object_id: Index of the object in the host scene list.

    Returns:
        The slot index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = list(center)
    sphere_radii[idx] = radius
    sphere_diffuse[idx] = list(diffuse)
    sphere_specular[idx] = list(specular)
    sphere_shininess[idx] = shininess
    sphere_object_ids[idx] = object_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the device tables."""
    return int(num_spheres[None])


def load_objects(objects: Iterable[SceneObject]) -> int:
    """Replace the device tables with the given scene objects.

    Each object uploads itself, so new primitive types only need their own
    upload method and device table.

    Args:
        objects: Scene objects in scene order; the position of each object
            becomes its object_id.

    Returns:
        The number of objects uploaded.
    """
    clear_scene()
    count = 0
    for object_id, obj in enumerate(objects):
        obj.upload(object_id)
        count += 1
    return count


@ti.func
def get_sphere_material(sphere_index: ti.i32):
    """Get the material of a sphere slot.

    Args:
        sphere_index: Slot in the sphere tables.

    Returns:
        A tuple (diffuse, specular, shininess).
    """
    return (
        sphere_diffuse[sphere_index],
        sphere_specular[sphere_index],
        sphere_shininess[sphere_index],
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        sphere_index=-1,
        object_id=-1,
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
) -> SceneHitRecord:
    """Test ray against all objects in the scene.

    Every sphere is tested; the search interval shrinks to the closest hit
    found so far, so the result is the global nearest hit (smallest t >=
    t_min) regardless of the order objects were added.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A SceneHitRecord containing the closest intersection, or a miss
        record if no intersection was found.
    """
    closest_t = t_max
    result = _make_miss_record()

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                sphere_index=i,
                object_id=sphere_object_ids[i],
            )

    return result


@ti.func
def intersect_scene_any(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
) -> ti.i32:
    """Test if ray hits any object in [t_min, t_max) (shadow feeler query).

    Stops testing once a blocker is found, since only visibility matters.

    Returns:
        1 if any object was hit, 0 otherwise.
    """
    hit_any = 0

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        if hit_any == 0:
            sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
            rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
            if rec.hit == 1:
                hit_any = 1

    return hit_any


@ti.kernel
def _nearest_hit_kernel(
    ray_origin: vec3,
    ray_direction: vec3,
    out: ti.types.ndarray(dtype=ti.f64, ndim=1),
):
    """Run intersect_scene once and unpack the record into out.

    Layout of out: [hit, t, px, py, pz, nx, ny, nz, object_id].
    """
    # Single iteration so the object loop in intersect_scene stays serial
    for _ in range(1):
        rec = intersect_scene(ray_origin, ray_direction, T_MIN, T_MAX)
        out[0] = ti.cast(rec.hit, ti.f64)
        out[1] = rec.t
        for k in ti.static(range(3)):
            out[2 + k] = rec.point[k]
            out[5 + k] = rec.normal[k]
        out[8] = ti.cast(rec.object_id, ti.f64)


def nearest_hit(
    origin: Sequence[float], direction: Sequence[float]
) -> tuple[int, Intersection] | None:
    """Find the nearest object hit along a ray using the loaded device tables.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (x, y, z), not necessarily unit length.

    Returns:
        (object_id, Intersection) for the nearest hit, or None on a miss.
    """
    if not np.any(np.asarray(direction, dtype=np.float64)):
        return None
    out = np.zeros(9, dtype=np.float64)
    _nearest_hit_kernel(vec3(*origin), vec3(*direction), out)
    hit = unpack_hit(out)
    if hit is None:
        return None
    return int(out[8]), hit


@ti.kernel
def _occluded_kernel(
    ray_origin: vec3,
    ray_direction: vec3,
    t_max: ti.f64,
    out: ti.types.ndarray(dtype=ti.i32, ndim=1),
):
    for _ in range(1):
        out[0] = intersect_scene_any(ray_origin, tm.normalize(ray_direction), T_MIN, t_max)


def is_occluded(origin: Sequence[float], toward: Sequence[float]) -> bool:
    """Check whether any loaded object blocks the segment origin -> toward."""
    offset = np.asarray(toward, dtype=np.float64) - np.asarray(origin, dtype=np.float64)
    distance = float(np.linalg.norm(offset))
    if distance == 0.0:
        return False
    out = np.zeros(1, dtype=np.int32)
    _occluded_kernel(vec3(*origin), vec3(*offset.tolist()), distance, out)
    return bool(out[0])
