"""Scene module for scene description and ray-scene queries.

Components:
    scene: Scene container (camera, lights, objects) and the render entry point
    intersection: Device object tables and global nearest-hit queries
    demo: A ready-made sample scene of spheres and point lights

Scene data is organized for efficient device access:
    - Structure-of-Arrays layout for geometric data
    - Per-slot material data next to the geometry
    - Object ids mapping device slots back to the host scene list
"""

from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
    intersect_scene_any,
    is_occluded,
    load_objects,
    nearest_hit,
)

# Note: Scene and create_demo_scene are NOT imported here because the render
# kernel imports this package's intersection module.
# Import them from raytrace.scene.scene and raytrace.scene.demo.

__all__ = [
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "intersect_scene_any",
    "is_occluded",
    "load_objects",
    "nearest_hit",
    "MAX_SPHERES",
]
